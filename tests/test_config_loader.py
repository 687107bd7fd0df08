"""
Unit tests for tracker configuration loading.
"""

import json

import pytest

from serp.core.types import DEFAULT_USER_AGENT
from tracker.config_loader import (
    ConfigError,
    TrackerConfig,
    load_config,
    resolve_target_domain,
)


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "missing.json")

    assert config.max_pages == 5
    assert config.retry_budget == 5
    assert config.courtesy_delay == 1.0
    assert config.sites["gong"] == "gong.conects.com"
    assert config.fetcher.user_agent == DEFAULT_USER_AGENT
    assert config.fetcher.headless is True


def test_values_from_file(tmp_path):
    path = write_config(
        tmp_path,
        {
            "sites": {"shop": "shop.example.com"},
            "default_site": "shop",
            "max_pages": 3,
            "retry_budget": 1,
            "courtesy_delay": 2.5,
            "fetcher": {"headless": False, "locale": "ko-KR"},
        },
    )

    config = load_config(path)

    assert config.sites == {"shop": "shop.example.com"}
    assert config.default_site == "shop"
    assert config.max_pages == 3
    assert config.retry_budget == 1
    assert config.courtesy_delay == 2.5
    assert config.fetcher.headless is False
    assert config.fetcher.locale == "ko-KR"
    assert config.fetcher.result_selector == ".MjjYud"


@pytest.mark.parametrize(
    "data",
    [
        {"max_pages": 0},
        {"retry_budget": -1},
        {"courtesy_delay": -0.5},
        {"max_pages": "many"},
        {"sites": ["gong"]},
        {"fetcher": {"unknown_option": 1}},
        {"fetcher": "chromium"},
        ["not", "an", "object"],
    ],
)
def test_invalid_values_raise(tmp_path, data):
    path = write_config(tmp_path, data)

    with pytest.raises(ConfigError):
        load_config(path)


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_resolve_target_domain():
    config = TrackerConfig()

    assert resolve_target_domain(None, config) == "megagong.net"
    assert resolve_target_domain("gong", config) == "gong.conects.com"
    assert resolve_target_domain("example.org", config) == "example.org"
    with pytest.raises(ConfigError):
        resolve_target_domain("sobang", config)
