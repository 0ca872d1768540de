from typing import Optional


class PageChatError(RuntimeError):
    pass


class FetchError(PageChatError):
    """A page could not be fetched (network error, timeout, bad status)."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class InvalidUrlError(FetchError):
    """The page URL is malformed or does not use http/https."""


class FetchTimeoutError(FetchError):
    pass


class FetchStatusError(FetchError):
    def __init__(self, message: str, url: Optional[str] = None, status_code: int = 0):
        super().__init__(message, url=url)
        self.status_code = status_code


class LinkResolutionError(PageChatError):
    """A single href could not be resolved to an absolute http(s) URL."""

    def __init__(self, message: str, href: Optional[str] = None):
        super().__init__(message)
        self.href = href


class EmbeddingServiceError(PageChatError):
    pass


class StorageServiceError(PageChatError):
    pass


class ChatServiceError(PageChatError):
    pass
