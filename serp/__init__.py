"""Search result fetching and keyword rank resolution"""

from .core.exceptions import (
    BrowserLaunchError,
    ExtractionError,
    FetchError,
    NavigationError,
    SerpError,
)
from .core.types import (
    ERROR,
    LOADING,
    NOT_FOUND,
    FetcherConfig,
    KeywordOutcome,
    PageEntry,
    ResultEntry,
)
from .resolver import RankResolver, matches_domain

__all__ = [
    "ERROR",
    "LOADING",
    "NOT_FOUND",
    "BrowserLaunchError",
    "ExtractionError",
    "FetchError",
    "FetcherConfig",
    "KeywordOutcome",
    "NavigationError",
    "PageEntry",
    "RankResolver",
    "ResultEntry",
    "SerpError",
    "matches_domain",
]
