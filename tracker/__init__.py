"""
Tracker module - drives rank resolution across keyword sets
"""

from tracker.config_loader import ConfigError, TrackerConfig, load_config, resolve_target_domain
from tracker.events import UpdateChannel
from tracker.logging_setup import setup_logging
from tracker.models import CancellationToken, KeywordStatus, KeywordUpdate, RunState
from tracker.orchestrator import RetryingOrchestrator
from tracker.progress_tracker import ProgressTracker, format_rank
from tracker.result_writer import ResultWriter

__all__ = [
    "CancellationToken",
    "ConfigError",
    "KeywordStatus",
    "KeywordUpdate",
    "ProgressTracker",
    "ResultWriter",
    "RetryingOrchestrator",
    "RunState",
    "TrackerConfig",
    "UpdateChannel",
    "format_rank",
    "load_config",
    "resolve_target_domain",
    "setup_logging",
]
