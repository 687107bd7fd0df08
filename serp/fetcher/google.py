"""
Google result page fetcher
Uses Playwright to render the results page in headless Chromium and
reads (title, url) pairs from each result container.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import quote

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from ..core.exceptions import BrowserLaunchError, ExtractionError, NavigationError
from ..core.types import PAGE_SIZE, FetcherConfig, PageEntry

logger = logging.getLogger(__name__)

# Hide the automation flag before the page content is read
HIDE_WEBDRIVER_JS = """() => {
    Object.defineProperty(navigator, "webdriver", { get: () => false });
}"""

EXTRACT_RESULTS_JS = """(selectors) => {
    return Array.from(document.querySelectorAll(selectors.result)).map((el) => {
        const heading = el.querySelector(selectors.title);
        const link = el.querySelector(selectors.link);
        return {
            title: heading ? heading.innerText : "",
            url: link ? link.href : ""
        };
    });
}"""


def build_search_url(endpoint: str, keyword: str, page_index: int) -> str:
    """Results URL for a keyword and 1-based page index"""
    start = (page_index - 1) * PAGE_SIZE
    return f"{endpoint}?q={quote(keyword, safe='')}&start={start}"


def parse_entries(raw: Any) -> list[PageEntry]:
    """
    Convert raw extracted items into page entries.

    Items with neither a title nor a url (sidebar widgets, "people also ask"
    blocks and the like) are dropped. Anything that is not a mapping is
    ignored.
    """
    if not isinstance(raw, list):
        return []

    entries = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        title = (item.get("title") or "").strip()
        url = (item.get("url") or "").strip()
        if not title and not url:
            continue
        entries.append(PageEntry(title=title, url=url))
    return entries


class GoogleResultSession:
    """One open browser page, reused for every result page of a keyword"""

    def __init__(self, page: Page, config: FetcherConfig):
        self.page = page
        self.config = config

    async def fetch(self, keyword: str, page_index: int) -> list[PageEntry]:
        if not keyword:
            raise ValueError("keyword must not be empty")
        if page_index < 1:
            raise ValueError(f"page_index must be >= 1, got {page_index}")

        url = build_search_url(self.config.endpoint, keyword, page_index)
        logger.debug(f"Navigating to {url}")

        try:
            await self.page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.config.navigation_timeout_ms,
            )
            if self.config.settle_ms > 0:
                await self.page.wait_for_timeout(self.config.settle_ms)
        except PlaywrightError as e:
            raise NavigationError(str(e), keyword, page_index) from e

        try:
            await self.page.evaluate(HIDE_WEBDRIVER_JS)
            raw = await self.page.evaluate(
                EXTRACT_RESULTS_JS,
                {
                    "result": self.config.result_selector,
                    "title": self.config.title_selector,
                    "link": self.config.link_selector,
                },
            )
        except PlaywrightError as e:
            raise ExtractionError(str(e), keyword, page_index) from e

        entries = parse_entries(raw)
        logger.debug(
            f"Page {page_index} for '{keyword}': {len(entries)} entries"
        )
        return entries


class GooglePageFetcher:
    """Fetches Google result pages through headless Chromium"""

    def __init__(self, config: FetcherConfig | None = None):
        self.config = config or FetcherConfig()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[GoogleResultSession]:
        """Start the browser, yield a session, always shut the browser down"""
        try:
            playwright = await async_playwright().start()
        except Exception as e:
            raise BrowserLaunchError(f"Failed to start Playwright: {e}") from e

        try:
            try:
                browser = await playwright.chromium.launch(
                    headless=self.config.headless,
                    args=self.config.launch_args,
                )
            except PlaywrightError as e:
                raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

            try:
                try:
                    context = await browser.new_context(
                        user_agent=self.config.user_agent,
                        locale=self.config.locale,
                    )
                    page = await context.new_page()
                except PlaywrightError as e:
                    raise BrowserLaunchError(f"Failed to open page: {e}") from e
                yield GoogleResultSession(page, self.config)
            finally:
                # A failing close must not replace the error from the body
                try:
                    await browser.close()
                except PlaywrightError as e:
                    logger.warning(f"Failed to close browser: {e}")
        finally:
            try:
                await playwright.stop()
            except PlaywrightError as e:
                logger.warning(f"Failed to stop Playwright: {e}")
