"""
URL canonicalization and internal/external link classification.

A canonical URL is absolute, uses http/https, has no fragment and no
trailing slash. Nothing else is normalized: query strings keep their
parameter order and paths keep their case, so two URLs that differ only
in query order stay distinct.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import urldefrag, urljoin, urlsplit

from pagechat.core.exceptions import LinkResolutionError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}

_WHITESPACE = re.compile(r"\s")

ExcludePredicate = Callable[[str], bool]


@dataclass(frozen=True)
class CanonicalUrl:
    url: str
    internal: bool


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` with the host lower-cased and default ports dropped."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise LinkResolutionError(f"Cannot parse URL: {url} ({e})", href=url) from e

    scheme = parts.scheme.lower()
    host = parts.hostname
    if scheme not in ALLOWED_SCHEMES or not host:
        raise LinkResolutionError(f"Not an absolute http(s) URL: {url}", href=url)

    if ":" in host:
        host = f"[{host}]"
    if port is None or port == DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def canonicalize(href: str, base_url: str) -> CanonicalUrl:
    """Resolve ``href`` against the origin of ``base_url`` and classify it.

    Raises:
        LinkResolutionError: the href cannot be resolved to an absolute
            http(s) URL (unparseable, embedded whitespace, or a non-web
            scheme such as ``mailto:`` or ``javascript:``).
    """
    base_origin = origin_of(base_url)
    href = href.strip()

    try:
        resolved = urljoin(base_origin + "/", href)
    except ValueError as e:
        raise LinkResolutionError(f"Cannot resolve href: {href} ({e})", href=href) from e

    if _WHITESPACE.search(resolved):
        raise LinkResolutionError(f"Whitespace in href: {href!r}", href=href)

    normalized = urldefrag(resolved).url.rstrip("/")
    link_origin = origin_of(normalized)
    return CanonicalUrl(url=normalized, internal=link_origin == base_origin)


def exclude_path_prefixes(*prefixes: str) -> ExcludePredicate:
    """Build a predicate matching URLs whose path is, or sits below, one of ``prefixes``."""
    cleaned = [p.rstrip("/") for p in prefixes if p and p.strip("/")]

    def _excluded(url: str) -> bool:
        path = urlsplit(url).path
        return any(path == p or path.startswith(p + "/") for p in cleaned)

    return _excluded


def classify_links(
    hrefs: Iterable[Optional[str]],
    base_url: str,
    exclude: Optional[ExcludePredicate] = None,
) -> Tuple[List[str], List[str]]:
    """Split hrefs into (internal, external) canonical URLs.

    Each list keeps first-seen order without duplicates. Hrefs that fail to
    resolve are logged and skipped.
    """
    internal: dict = {}
    external: dict = {}

    for href in hrefs:
        if not href:
            continue
        try:
            link = canonicalize(href, base_url)
        except LinkResolutionError as e:
            logger.warning("Invalid URL found: %s (%s)", href, e)
            continue

        if link.internal:
            if exclude is not None and exclude(link.url):
                logger.debug("Excluded internal link: %s", link.url)
                continue
            internal.setdefault(link.url, None)
        else:
            external.setdefault(link.url, None)

    return list(internal), list(external)
