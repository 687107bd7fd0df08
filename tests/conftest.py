"""
Pytest configuration and shared fixtures for rank tracker tests.
"""

import pytest

from tests.fakes import RecordingSleep


@pytest.fixture
def events():
    """Shared, ordered log of fetches, sleeps and updates"""
    return []


@pytest.fixture
def sleep(events):
    return RecordingSleep(events)
