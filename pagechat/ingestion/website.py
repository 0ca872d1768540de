"""
Web Page Scraper
================
Turns one fetched HTML page into a structured PageRecord.

Extraction policy:
- head: first <title>, every <meta> (name/content kept verbatim, absent
  attributes stay None), description and keywords meta content
- body: visible text of <body> (or of the document minus its head when
  there is no <body>) with script/style/noscript removed and all
  whitespace runs collapsed to a single space
- links: every <a href>, canonicalized and split into internal/external
  relative to the page origin; unresolvable hrefs are logged and skipped

No deduplication against previously visited pages happens here.
"""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from pagechat.config import SCRAPER
from pagechat.ingestion.base import MetaEntry, PageHead, PageRecord
from pagechat.ingestion.fetcher import PageFetcher, canonical_page_url
from pagechat.ingestion.urls import ExcludePredicate, classify_links, exclude_path_prefixes

logger = logging.getLogger(__name__)

STRIPPED_TAGS = ["script", "style", "noscript"]

_WHITESPACE_RUN = re.compile(r"\s+")


def _attr(el, name: str) -> Optional[str]:
    value = el.get(name)
    if isinstance(value, list):
        # bs4 returns multi-valued attributes (e.g. class) as lists
        value = " ".join(value)
    return value


class WebPageScraper:
    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        exclude: Optional[ExcludePredicate] = None,
    ):
        self.fetcher = fetcher or PageFetcher()
        if exclude is None and SCRAPER.get("exclude_internal_prefixes"):
            exclude = exclude_path_prefixes(*SCRAPER["exclude_internal_prefixes"])
        self.exclude = exclude

    def scrape(self, url: str) -> PageRecord:
        """Fetch ``url`` and extract it. The URL is validated before any request."""
        url = canonical_page_url(url)
        html = self.fetcher.fetch(url)
        return self.extract(html, url)

    def extract(self, html: str, source_url: str) -> PageRecord:
        source_url = canonical_page_url(source_url)
        soup = BeautifulSoup(html or "", "html.parser")

        head = self._extract_head(soup)
        body = self._extract_body(soup)

        hrefs = [_attr(a, "href") for a in soup.find_all("a")]
        internal, external = classify_links(hrefs, source_url, exclude=self.exclude)

        logger.info(
            "Scraped %s: title=%r, %d body chars, %d internal / %d external links",
            source_url, head.title[:80], len(body), len(internal), len(external),
        )
        return PageRecord(
            source_url=source_url,
            head=head,
            body_text=body,
            internal_links=internal,
            external_links=external,
        )

    def _extract_head(self, soup: BeautifulSoup) -> PageHead:
        title_el = soup.find("title")
        title = title_el.get_text() if title_el else ""

        meta: List[MetaEntry] = [
            MetaEntry(name=_attr(el, "name"), content=_attr(el, "content"))
            for el in soup.find_all("meta")
        ]

        return PageHead(
            title=title,
            meta=meta,
            description=self._named_meta(soup, "description"),
            keywords=self._named_meta(soup, "keywords"),
        )

    @staticmethod
    def _named_meta(soup: BeautifulSoup, name: str) -> str:
        el = soup.find("meta", attrs={"name": name})
        if el is None:
            return ""
        return _attr(el, "content") or ""

    @staticmethod
    def _extract_body(soup: BeautifulSoup) -> str:
        root = soup.body
        if root is None:
            # html.parser does not imply a <body>; drop the head so its text stays out
            root = soup
            for name in ("head", "title"):
                for el in root.find_all(name):
                    el.decompose()
        for el in root.find_all(STRIPPED_TAGS):
            el.decompose()
        text = root.get_text(" ")
        return _WHITESPACE_RUN.sub(" ", text).strip()
