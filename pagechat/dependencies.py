from functools import lru_cache

from pagechat.config import CHUNKING, EMBEDDING
from pagechat.core.embedder import Embedder
from pagechat.core.llm import LLMWrapper
from pagechat.core.retriever import Retriever
from pagechat.core.vector_store import VectorStore
from pagechat.ingestion.chunker import get_chunker
from pagechat.ingestion.pipeline import WebPageIngester
from pagechat.ingestion.website import WebPageScraper


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


@lru_cache
def get_vector_store() -> VectorStore:
    return VectorStore()


@lru_cache
def get_llm() -> LLMWrapper:
    return LLMWrapper()


@lru_cache
def get_ingester() -> WebPageIngester:
    """One ingester per process, so its visited set spans the whole session."""
    return WebPageIngester(
        scraper=WebPageScraper(),
        embedder=get_embedder(),
        vector_store=get_vector_store(),
        chunk_size=CHUNKING["size"],
        chunker=get_chunker(CHUNKING["strategy"]),
        embed_workers=EMBEDDING["workers"],
    )


@lru_cache
def get_retriever() -> Retriever:
    return Retriever(embedder=get_embedder(), vector_store=get_vector_store(), llm=get_llm())
