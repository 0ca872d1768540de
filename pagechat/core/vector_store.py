import logging
import os
from typing import Any, Dict, List, Optional

from pymilvus import MilvusClient, MilvusException

from pagechat.config import VECTOR_DB
from pagechat.core.exceptions import StorageServiceError
from pagechat.ingestion.base import SearchHit, StoredEntry

logger = logging.getLogger(__name__)

METADATA_FIELDS = ["url", "head", "body"]


class VectorStore:
    """All ingested pages live in one Milvus collection.

    Entries are only ever inserted, never upserted in place: every entry id
    is unique, so ingesting the same URL again adds entries next to the old
    ones instead of replacing them.
    """

    def __init__(self, client: Optional[MilvusClient] = None, collection: Optional[str] = None):
        self.collection = collection or VECTOR_DB["collection"]
        self.dimensions = VECTOR_DB["dimensions"]
        self.metric_type = VECTOR_DB["distance"]
        try:
            self.client = client or MilvusClient(
                uri=os.getenv("MILVUS_URI", "http://localhost:19530"),
                token=os.getenv("MILVUS_TOKEN", ""),
            )
            self._create_collection()
        except MilvusException as e:
            raise StorageServiceError(f"Cannot open collection {self.collection}: {e}") from e

    def _create_collection(self):
        if not self.client.has_collection(self.collection):
            logger.info("Creating collection %s (%d dims, %s)", self.collection, self.dimensions, self.metric_type)
            self.client.create_collection(
                collection_name=self.collection,
                dimension=self.dimensions,
                metric_type=self.metric_type,
                id_type="str",
                auto_id=False,
                max_length=VECTOR_DB["max_text_length"],
            )
        self.client.load_collection(self.collection)

    def upsert(self, entry: StoredEntry) -> None:
        """Store one entry under its own id."""
        if len(entry.embedding) != self.dimensions:
            raise StorageServiceError(
                f"Embedding has {len(entry.embedding)} dims, collection expects {self.dimensions}"
            )

        row = {"id": entry.id, "vector": entry.embedding}
        row.update(entry.metadata)
        try:
            self.client.insert(collection_name=self.collection, data=[row])
        except MilvusException as e:
            raise StorageServiceError(f"Insert of {entry.id} failed: {e}") from e
        logger.debug("Inserted %s into %s", entry.id, self.collection)

    def nearest_neighbors(self, query_vector: List[float], k: int) -> List[SearchHit]:
        """Return up to ``k`` hits, best match first.

        Hits are sorted by similarity here so callers can rely on the order.
        """
        try:
            results = self.client.search(
                collection_name=self.collection,
                data=[query_vector],
                limit=k,
                output_fields=METADATA_FIELDS,
                search_params={"metric_type": self.metric_type},
            )
        except MilvusException as e:
            raise StorageServiceError(f"Search on {self.collection} failed: {e}") from e

        hits = [self._to_hit(hit) for hit in (results[0] if results else [])]
        # COSINE and IP are similarities; L2 is a distance
        similarity = self.metric_type != "L2"
        worst = float("-inf") if similarity else float("inf")
        hits.sort(key=lambda h: worst if h.score is None else h.score, reverse=similarity)
        logger.debug("Search on %s returned %d hits", self.collection, len(hits))
        return hits

    def list_all(self, limit: Optional[int] = None) -> List[SearchHit]:
        try:
            rows = self.client.query(
                collection_name=self.collection,
                filter="",
                output_fields=METADATA_FIELDS,
                limit=limit or VECTOR_DB["list_limit"],
            )
        except MilvusException as e:
            raise StorageServiceError(f"Query on {self.collection} failed: {e}") from e
        return [self._to_hit(row) for row in rows]

    def count(self) -> int:
        try:
            stats = self.client.get_collection_stats(self.collection)
        except MilvusException as e:
            raise StorageServiceError(f"Stats for {self.collection} failed: {e}") from e
        return int(stats.get("row_count", 0))

    @staticmethod
    def _to_hit(hit: Dict[str, Any]) -> SearchHit:
        # search() nests fields under "entity"; query() returns flat rows
        entity = hit.get("entity") if isinstance(hit.get("entity"), dict) else hit
        score = hit.get("distance")
        return SearchHit(
            id=str(hit.get("id")),
            metadata={f: entity.get(f, "") for f in METADATA_FIELDS},
            score=float(score) if score is not None else None,
        )
