from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from pagechat.dependencies import get_ingester
from pagechat.ingestion.base import IngestResult
from pagechat.ingestion.pipeline import WebPageIngester

router = APIRouter(prefix="/ingest", tags=["ingestion"])


class IngestRequest(BaseModel):
    url: str


class BatchIngestRequest(BaseModel):
    urls: List[str] = Field(..., min_length=1)


class IngestResponse(BaseModel):
    url: str
    status: str
    entries_created: int
    entry_ids: List[str]
    internal_links: List[str]
    external_links: List[str]
    error: Optional[str] = None
    ingested_at: Optional[str] = None


def _to_response(result: IngestResult) -> IngestResponse:
    return IngestResponse(
        url=result.url,
        status=result.status.value,
        entries_created=len(result.entry_ids),
        entry_ids=result.entry_ids,
        internal_links=result.internal_links,
        external_links=result.external_links,
        error=result.error,
        ingested_at=result.ingested_at,
    )


@router.post("", response_model=IngestResponse)
def ingest_page(request: IngestRequest, ingester: WebPageIngester = Depends(get_ingester)):
    """Ingest one web page. Internal links are reported, not followed."""
    return _to_response(ingester.ingest(request.url.strip()))


@router.post("/batch", response_model=List[IngestResponse])
def ingest_batch(request: BatchIngestRequest, ingester: WebPageIngester = Depends(get_ingester)):
    """Ingest pages one after another; a failing page does not stop the rest."""
    results = ingester.ingest_many(u.strip() for u in request.urls)
    return [_to_response(r) for r in results]
