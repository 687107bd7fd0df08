"""Result page fetchers"""

from .base import PageSession, ResultPageFetcher
from .google import GooglePageFetcher, GoogleResultSession, build_search_url, parse_entries

__all__ = [
    "PageSession",
    "ResultPageFetcher",
    "GooglePageFetcher",
    "GoogleResultSession",
    "build_search_url",
    "parse_entries",
]
