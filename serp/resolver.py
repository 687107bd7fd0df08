"""
Keyword rank resolver
Pages through search results for one keyword and reports the first rank
held by the target domain.
"""

import logging

from .core.exceptions import FetchError
from .core.types import PAGE_SIZE, KeywordOutcome, ResultEntry
from .fetcher.base import ResultPageFetcher

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 5


def matches_domain(url: str, target_domain: str) -> bool:
    """Whether a result url belongs to the target domain"""
    return target_domain in url


class RankResolver:
    """Resolves the target domain's rank for a keyword"""

    def __init__(self, fetcher: ResultPageFetcher, max_pages: int = DEFAULT_MAX_PAGES):
        if max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {max_pages}")
        self.fetcher = fetcher
        self.max_pages = max_pages

    async def resolve(
        self, keyword: str, target_domain: str, max_pages: int | None = None
    ) -> KeywordOutcome:
        """
        Resolve the rank of target_domain for keyword.

        Pages are fetched in order and ranked contiguously. Paging stops on
        the first page that contains a match, so top10_count reflects the
        entries seen up to that page. When no match appears within
        max_pages the rank is "not found". A FetchError on any page gives
        an "error" outcome instead of raising.
        """
        if not keyword:
            raise ValueError("keyword must not be empty")
        if not target_domain:
            raise ValueError("target_domain must not be empty")
        if max_pages is None:
            max_pages = self.max_pages
        if max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {max_pages}")

        entries: list[ResultEntry] = []
        found: ResultEntry | None = None
        top10_count = 0
        pages_fetched = 0

        try:
            async with self.fetcher.session() as session:
                for page_index in range(1, max_pages + 1):
                    page_entries = await session.fetch(keyword, page_index)
                    pages_fetched += 1

                    offset = len(entries)
                    entries.extend(
                        ResultEntry(title=e.title, url=e.url, rank=offset + i + 1)
                        for i, e in enumerate(page_entries)
                    )

                    top10_count = sum(
                        1
                        for e in entries
                        if e.rank <= PAGE_SIZE and matches_domain(e.url, target_domain)
                    )

                    found = next(
                        (e for e in entries if matches_domain(e.url, target_domain)),
                        None,
                    )
                    if found is not None:
                        break

                    logger.debug(
                        f"'{keyword}': no match on page {page_index} "
                        f"({len(page_entries)} entries)"
                    )

        except FetchError as e:
            logger.warning(f"Failed to resolve rank for '{keyword}': {e}")
            return KeywordOutcome.error(keyword, str(e))

        if found is None:
            logger.info(
                f"'{keyword}': {target_domain} not found in {pages_fetched} pages"
            )
            return KeywordOutcome.not_found(keyword, entries, pages_fetched)

        logger.info(
            f"'{keyword}': {target_domain} at rank {found.rank} "
            f"(top 10 count: {top10_count})"
        )
        return KeywordOutcome(
            keyword=keyword,
            rank=found.rank,
            source_url=found.url,
            top10_count=top10_count,
            entries=entries,
            pages_fetched=pages_fetched,
        )
