import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from pagechat.core.exceptions import PageChatError
from pagechat.core.retriever import Retriever
from pagechat.dependencies import get_retriever

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


class ChatRequest(BaseModel):
    query: str = Field(..., min_length=1)
    top_k: Optional[int] = Field(None, ge=1, le=100)


class ChatResponse(BaseModel):
    answer: str
    urls: List[str]


@router.post("", response_model=ChatResponse)
def chat(request: ChatRequest, retriever: Retriever = Depends(get_retriever)):
    """Answer a question from the ingested pages."""
    try:
        answer, answer_request = retriever.answer_with_context(request.query, top_k=request.top_k)
    except PageChatError as e:
        logger.error("Chat failed for %r: %s", request.query[:80], e)
        raise HTTPException(status_code=502, detail=str(e))

    urls = answer_request.context.url_list
    return ChatResponse(answer=answer, urls=list(dict.fromkeys(u for u in urls.split("\n") if u)))
