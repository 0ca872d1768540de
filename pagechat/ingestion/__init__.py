from pagechat.ingestion.base import (
    BaseIngester,
    Chunk,
    ChunkRole,
    IngestResult,
    IngestStatus,
    PageRecord,
    StoredEntry,
)
from pagechat.ingestion.chunker import chunk_fixed_window, chunk_text, get_chunker
from pagechat.ingestion.fetcher import PageFetcher, canonical_page_url, ensure_http_url
from pagechat.ingestion.pipeline import WebPageIngester
from pagechat.ingestion.urls import canonicalize, classify_links, exclude_path_prefixes
from pagechat.ingestion.visited import VisitedSet
from pagechat.ingestion.website import WebPageScraper

__all__ = [
    "BaseIngester",
    "Chunk",
    "ChunkRole",
    "IngestResult",
    "IngestStatus",
    "PageRecord",
    "StoredEntry",
    "chunk_fixed_window",
    "chunk_text",
    "get_chunker",
    "PageFetcher",
    "canonical_page_url",
    "ensure_http_url",
    "WebPageIngester",
    "canonicalize",
    "classify_links",
    "exclude_path_prefixes",
    "VisitedSet",
    "WebPageScraper",
]
