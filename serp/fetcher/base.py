"""Result page fetcher protocol"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from ..core.types import PageEntry


class PageSession(Protocol):
    """One open browsing session, reused across pages of a keyword"""

    async def fetch(self, keyword: str, page_index: int) -> list[PageEntry]:
        """
        Fetch one page of results (page_index is 1-based).
        Returns page-local entries in presentation order.
        Raises FetchError on navigation, launch or extraction failure.
        """
        ...


class ResultPageFetcher(Protocol):
    """Protocol for search result page fetchers"""

    def session(self) -> AbstractAsyncContextManager[PageSession]:
        """
        Open a browsing session. The session is released when the
        context exits, whether normally or through an exception.
        """
        ...
