import logging
from typing import Optional

import httpx

from pagechat.config import SCRAPER
from pagechat.core.exceptions import (
    FetchError,
    FetchStatusError,
    FetchTimeoutError,
    InvalidUrlError,
    LinkResolutionError,
)
from pagechat.ingestion.urls import canonicalize

logger = logging.getLogger(__name__)


def ensure_http_url(url: str) -> str:
    """Reject anything that is not an http(s) URL before touching the network."""
    if not isinstance(url, str) or not url.lower().startswith(("http://", "https://")):
        raise InvalidUrlError(f"Invalid URL: must start with http/https: {url!r}", url=url)
    return url


def canonical_page_url(url: str) -> str:
    """Return the canonical form of a page URL, the key used for visited checks."""
    ensure_http_url(url)
    try:
        return canonicalize(url, url).url
    except LinkResolutionError as e:
        raise InvalidUrlError(f"Invalid URL: {e}", url=url) from e


class PageFetcher:
    def __init__(
        self,
        timeout: float = SCRAPER["timeout_seconds"],
        user_agent: str = SCRAPER["user_agent"],
        client: Optional[httpx.Client] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._http = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    def fetch(self, url: str) -> str:
        """Return the page body as text.

        Raises InvalidUrlError, FetchTimeoutError, FetchStatusError, or
        FetchError for any other transport failure.
        """
        ensure_http_url(url)
        logger.debug("GET %s (timeout=%ss)", url, self.timeout)

        try:
            resp = self._http.get(url)
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(f"Timed out after {self.timeout}s fetching {url}", url=url) from e
        except httpx.InvalidURL as e:
            raise InvalidUrlError(f"Invalid URL {url!r}: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Network error fetching {url}: {type(e).__name__}: {e}", url=url) from e

        if not resp.is_success:
            raise FetchStatusError(
                f"HTTP {resp.status_code} fetching {url}", url=url, status_code=resp.status_code
            )

        ct = resp.headers.get("content-type", "")
        if ct and "html" not in ct and "text/plain" not in ct:
            logger.warning("Unexpected content-type %r for %s, parsing anyway", ct, url)
        return resp.text

    def close(self) -> None:
        self._http.close()
