import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pagechat.config import RETRIEVAL
from pagechat.ingestion.base import SearchHit

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that can answer questions about the web page. "
    "Answer only from the provided web page content. If it does not contain the "
    "answer, say that you don't know."
)

USER_PROMPT_TEMPLATE = """Query: {query}
Web Page URL: {urls}
Web Page Head: {head}
Web Page Body: {body}"""


@dataclass
class RetrievalContext:
    head_text: str = ""
    body_text: str = ""
    url_list: str = ""


@dataclass
class AnswerRequest:
    query: str
    system_prompt: str
    user_prompt: str
    context: RetrievalContext


def _field(hit: SearchHit, name: str) -> str:
    value = hit.metadata.get(name)
    return "" if value is None else str(value)


class Retriever:
    """Assembles answering context from nearest-neighbour results.

    Hits are used in the order the vector store returns them (best match
    first); nothing is re-ranked or deduplicated here.
    """

    def __init__(self, embedder, vector_store, llm=None, top_k: int = RETRIEVAL["top_k"]):
        self.embedder = embedder
        self.vector_store = vector_store
        self.llm = llm
        self.top_k = top_k

    def search(self, query: str, top_k: Optional[int] = None) -> List[SearchHit]:
        k = self.top_k if top_k is None else top_k
        if k < 1:
            raise ValueError(f"top_k must be >= 1, got {k}")

        query_embedding = self.embedder.embed_query(query)
        hits = self.vector_store.nearest_neighbors(query_embedding, k)
        logger.info("Vector search for %r found %d results", query[:80], len(hits))
        return hits

    @staticmethod
    def build_context(hits: List[SearchHit]) -> RetrievalContext:
        heads = [_field(h, "head") for h in hits]
        bodies = [b for b in (_field(h, "body") for h in hits) if b != ""]
        urls = [_field(h, "url") for h in hits]
        return RetrievalContext(
            head_text="\n".join(heads),
            body_text="\n".join(bodies),
            url_list="\n".join(urls),
        )

    def build_request(self, query: str, top_k: Optional[int] = None) -> AnswerRequest:
        hits = self.search(query, top_k=top_k)
        if not hits:
            logger.warning("No stored entries matched %r; answering with empty context", query[:80])

        context = self.build_context(hits)
        user_prompt = USER_PROMPT_TEMPLATE.format(
            query=query,
            urls=context.url_list,
            head=context.head_text,
            body=context.body_text,
        )
        return AnswerRequest(
            query=query,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=user_prompt,
            context=context,
        )

    def answer(self, query: str, top_k: Optional[int] = None) -> str:
        return self.answer_with_context(query, top_k=top_k)[0]

    def answer_with_context(self, query: str, top_k: Optional[int] = None) -> Tuple[str, AnswerRequest]:
        """Answer ``query`` and return the request the answer was generated from."""
        if self.llm is None:
            raise RuntimeError("Retriever was built without a chat model")
        request = self.build_request(query, top_k=top_k)
        return self.llm.complete(request.system_prompt, request.user_prompt), request
