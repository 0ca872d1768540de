"""
Single-page ingestion: admission, extraction, chunking, embedding, storage.

Every stored entry gets a fresh id (url + epoch millis + random suffix), so
ingesting the same URL twice in different sessions adds a second set of
entries rather than overwriting the first. Internal links found on a page
are returned to the caller and never followed automatically.
"""

import logging
import random
import string
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from pagechat.config import CHUNKING, EMBEDDING
from pagechat.core.exceptions import PageChatError
from pagechat.ingestion.base import (
    BaseIngester,
    Chunk,
    ChunkRole,
    IngestResult,
    IngestStatus,
    StoredEntry,
)
from pagechat.ingestion.chunker import Chunker, get_chunker
from pagechat.ingestion.fetcher import canonical_page_url
from pagechat.ingestion.visited import VisitedSet

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def make_entry_id(url: str) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{url}-{int(time.time() * 1000)}-{suffix}"


class WebPageIngester(BaseIngester):
    def __init__(
        self,
        scraper,
        embedder,
        vector_store,
        visited: Optional[VisitedSet] = None,
        chunk_size: int = CHUNKING["size"],
        chunker: Optional[Chunker] = None,
        embed_workers: int = EMBEDDING["workers"],
    ):
        self.scraper = scraper
        self.embedder = embedder
        self.vector_store = vector_store
        self.visited = visited if visited is not None else VisitedSet()
        self.chunk_size = chunk_size
        self.chunker = chunker or get_chunker(CHUNKING["strategy"])
        self.embed_workers = max(1, embed_workers)

    def ingest(self, source_path: str) -> IngestResult:
        """Ingest one page. Failures are logged and reported, never raised."""
        try:
            url = canonical_page_url(source_path)
        except PageChatError as e:
            logger.error("Rejected %s: %s", source_path, e)
            return IngestResult(url=str(source_path), status=IngestStatus.FAILED, error=str(e))

        if not self.visited.mark(url):
            logger.info("Already ingested in this session, skipping: %s", url)
            return IngestResult(url=url, status=IngestStatus.SKIPPED)

        logger.info("Ingesting %s", url)
        try:
            record = self.scraper.scrape(url)
        except PageChatError as e:
            logger.error("Failed to scrape %s: %s", url, e)
            return IngestResult(url=url, status=IngestStatus.FAILED, error=str(e))

        head_string = record.head.serialize()
        chunks = [Chunk(text=c, role=ChunkRole.HEAD, parent_url=url)
                  for c in self.chunker(head_string, self.chunk_size)]
        chunks += [Chunk(text=c, role=ChunkRole.BODY, parent_url=url)
                   for c in self.chunker(record.body_text, self.chunk_size)]
        logger.info("Found internal links: %d", len(record.internal_links))

        result = IngestResult(
            url=url,
            status=IngestStatus.INGESTED,
            internal_links=list(record.internal_links),
            external_links=list(record.external_links),
        )
        entries = self._embed_entries(chunks, head_string)
        try:
            for entry in entries:
                self.vector_store.upsert(entry)
                result.entry_ids.append(entry.id)
        except PageChatError as e:
            logger.error(
                "Failed to ingest %s after %d of %d entries: %s",
                url, len(result.entry_ids), len(chunks), e,
            )
            result.status = IngestStatus.FAILED
            result.error = str(e)
            return result
        finally:
            entries.close()

        result.ingested_at = self._get_timestamp()
        logger.info("Stored %d entries for %s", len(result.entry_ids), url)
        return result

    def ingest_many(self, urls: Iterable[str]) -> List[IngestResult]:
        return [self.ingest(url) for url in urls]

    def reset_session(self) -> None:
        self.visited.clear()

    def _to_entry(self, chunk: Chunk, head_string: str) -> StoredEntry:
        embedding = self.embedder.embed(chunk.text)
        if chunk.role is ChunkRole.HEAD:
            head, body = chunk.text, ""
        else:
            # body entries carry the whole head so a body match can surface page metadata
            head, body = head_string, chunk.text
        return StoredEntry(
            id=make_entry_id(chunk.parent_url),
            embedding=embedding,
            url=chunk.parent_url,
            head=head,
            body=body,
        )

    def _embed_entries(self, chunks: List[Chunk], head_string: str):
        if self.embed_workers == 1 or len(chunks) < 2:
            for chunk in chunks:
                yield self._to_entry(chunk, head_string)
            return

        # map() yields in chunk order; the first failure surfaces on iteration
        with ThreadPoolExecutor(max_workers=self.embed_workers) as pool:
            yield from pool.map(lambda c: self._to_entry(c, head_string), chunks)
