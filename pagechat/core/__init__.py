from pagechat.core.embedder import Embedder
from pagechat.core.vector_store import VectorStore
from pagechat.core.llm import LLMWrapper
from pagechat.core.retriever import Retriever

__all__ = ["Embedder", "VectorStore", "LLMWrapper", "Retriever"]
