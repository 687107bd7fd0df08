"""Core data types for rank resolution"""

from dataclasses import dataclass, field
from typing import Any

NOT_FOUND = "not found"
ERROR = "error"
LOADING = "loading"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/110.0.0.0 Safari/537.36"
)

DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-gpu",
]

# Results per page on the search source; also the top-N window for top10_count
PAGE_SIZE = 10


@dataclass
class PageEntry:
    """Page-local result entry, in presentation order, not yet ranked"""

    title: str
    url: str


@dataclass
class ResultEntry:
    """Result entry with its global rank across all fetched pages"""

    title: str
    url: str
    rank: int  # 1-based, contiguous across pages

    def to_dict(self) -> dict:
        return {"title": self.title, "url": self.url, "rank": self.rank}


@dataclass
class KeywordOutcome:
    """Result of resolving one keyword against a target domain"""

    keyword: str
    rank: int | str  # int | NOT_FOUND | ERROR
    source_url: str = ""
    top10_count: int = 0
    entries: list[ResultEntry] = field(default_factory=list)
    pages_fetched: int = 0
    error_message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.rank == ERROR

    @property
    def is_found(self) -> bool:
        return isinstance(self.rank, int)

    @classmethod
    def not_found(
        cls, keyword: str, entries: list[ResultEntry], pages_fetched: int
    ) -> "KeywordOutcome":
        return cls(
            keyword=keyword,
            rank=NOT_FOUND,
            entries=entries,
            pages_fetched=pages_fetched,
        )

    @classmethod
    def error(cls, keyword: str, message: str) -> "KeywordOutcome":
        return cls(keyword=keyword, rank=ERROR, error_message=message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "keyword": self.keyword,
            "rank": self.rank,
            "source_url": self.source_url,
            "top10_count": self.top10_count,
            "pages_fetched": self.pages_fetched,
            "error_message": self.error_message,
            "entries": [entry.to_dict() for entry in self.entries],
        }


@dataclass
class FetcherConfig:
    """Browser and search endpoint settings for the page fetcher"""

    endpoint: str = "https://www.google.com/search"
    result_selector: str = ".MjjYud"  # One container per result
    title_selector: str = "h3"
    link_selector: str = "a"
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = True
    launch_args: list[str] = field(default_factory=lambda: list(DEFAULT_LAUNCH_ARGS))
    navigation_timeout_ms: int = 30000
    settle_ms: int = 0  # Extra wait after DOM content loaded
    locale: str | None = None
