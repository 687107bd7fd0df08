"""Tracker configuration loader"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path

from serp.core.types import FetcherConfig
from serp.resolver import DEFAULT_MAX_PAGES
from tracker.orchestrator import DEFAULT_COURTESY_DELAY, DEFAULT_RETRY_BUDGET

logger = logging.getLogger(__name__)

DEFAULT_SITES = {
    "gong": "gong.conects.com",
    "megagong": "megagong.net",
}


class ConfigError(ValueError):
    """Invalid tracker configuration"""

    pass


@dataclass
class TrackerConfig:
    """Settings for rank runs"""

    sites: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SITES))
    default_site: str = "megagong"
    max_pages: int = DEFAULT_MAX_PAGES
    retry_budget: int = DEFAULT_RETRY_BUDGET
    courtesy_delay: float = DEFAULT_COURTESY_DELAY
    fetcher: FetcherConfig = field(default_factory=FetcherConfig)


def _build_fetcher_config(data: dict) -> FetcherConfig:
    known = {f.name for f in fields(FetcherConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown fetcher settings: {', '.join(sorted(unknown))}")
    return FetcherConfig(**data)


def load_config(config_path: str | Path = "config.json") -> TrackerConfig:
    """Load tracker configuration from a JSON file

    Args:
        config_path: Path to config.json

    Returns:
        TrackerConfig, with defaults for anything the file leaves out
    """
    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning(f"Config file {config_path} not found, using defaults")
        return TrackerConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")

    config = TrackerConfig()

    sites = data.get("sites")
    if sites is not None:
        if not isinstance(sites, dict) or not all(
            isinstance(v, str) and v for v in sites.values()
        ):
            raise ConfigError("'sites' must map aliases to domain strings")
        config.sites = dict(sites)

    config.default_site = data.get("default_site", config.default_site)
    try:
        config.max_pages = int(data.get("max_pages", config.max_pages))
        config.retry_budget = int(data.get("retry_budget", config.retry_budget))
        config.courtesy_delay = float(data.get("courtesy_delay", config.courtesy_delay))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting in {config_path}: {e}") from e

    if config.max_pages < 1:
        raise ConfigError("'max_pages' must be >= 1")
    if config.retry_budget < 0:
        raise ConfigError("'retry_budget' must be >= 0")
    if config.courtesy_delay < 0:
        raise ConfigError("'courtesy_delay' must be >= 0")

    fetcher = data.get("fetcher")
    if fetcher is not None:
        if not isinstance(fetcher, dict):
            raise ConfigError("'fetcher' must be an object")
        config.fetcher = _build_fetcher_config(fetcher)

    logger.info(f"Loaded config from {config_path} ({len(config.sites)} sites)")
    return config


def resolve_target_domain(site: str | None, config: TrackerConfig) -> str:
    """Map a site alias (or a literal domain) to the target domain"""
    if not site:
        site = config.default_site
    if site in config.sites:
        return config.sites[site]
    if "." in site:
        return site
    raise ConfigError(
        f"Unknown site '{site}'. Known sites: {', '.join(sorted(config.sites))}"
    )
