"""Scripted stand-ins for the browser-backed fetcher"""

from contextlib import asynccontextmanager

from serp.core.exceptions import NavigationError
from serp.core.types import PageEntry

TARGET = "megagong.net"


def make_page(urls: list[str], prefix: str = "Result") -> list[PageEntry]:
    """One result page with a title per url"""
    return [PageEntry(title=f"{prefix} {i + 1}", url=url) for i, url in enumerate(urls)]


def filler_page(count: int = 10, host: str = "other.example.com") -> list[PageEntry]:
    return make_page([f"https://{host}/{i}" for i in range(count)])


class ScriptedFetcher:
    """Fetcher that serves scripted pages and records every call

    pages: keyword -> list of pages, each a list of PageEntry
    fail_first: keyword -> number of attempts whose first page fails
    always_fail: keywords whose fetches always fail
    """

    def __init__(self, pages=None, fail_first=None, always_fail=(), events=None):
        self.pages = pages or {}
        self.fail_first = dict(fail_first or {})
        self.always_fail = set(always_fail)
        self.calls: list[tuple[str, int]] = []
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.events = events if events is not None else []

    @asynccontextmanager
    async def session(self):
        self.sessions_opened += 1
        try:
            yield self
        finally:
            self.sessions_closed += 1

    async def fetch(self, keyword: str, page_index: int) -> list[PageEntry]:
        self.calls.append((keyword, page_index))
        self.events.append(("fetch", keyword, page_index))

        if keyword in self.always_fail:
            raise NavigationError("blocked", keyword, page_index)
        if page_index == 1 and self.fail_first.get(keyword, 0) > 0:
            self.fail_first[keyword] -= 1
            raise NavigationError("timeout", keyword, page_index)

        pages = self.pages.get(keyword, [])
        if page_index > len(pages):
            return []
        return list(pages[page_index - 1])


class RecordingSleep:
    """Replacement for asyncio.sleep that returns immediately"""

    def __init__(self, events=None):
        self.delays: list[float] = []
        self.events = events if events is not None else []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.events.append(("sleep", delay))
