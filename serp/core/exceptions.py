"""Custom exceptions for the search result layer"""


class SerpError(Exception):
    """Base exception for the search result layer"""

    pass


class FetchError(SerpError):
    """One result page could not be fetched or read"""

    def __init__(
        self,
        message: str,
        keyword: str | None = None,
        page_index: int | None = None,
    ):
        self.keyword = keyword
        self.page_index = page_index
        self.reason = message
        where = ""
        if keyword is not None:
            where = f" (keyword: {keyword!r}"
            if page_index is not None:
                where += f", page: {page_index}"
            where += ")"
        super().__init__(f"{message}{where}")


class BrowserLaunchError(FetchError):
    """Browser automation process could not be started"""

    pass


class NavigationError(FetchError):
    """Navigation to the results endpoint failed or timed out"""

    pass


class ExtractionError(FetchError):
    """Result entries could not be read from the rendered page"""

    pass
