import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, List

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from pagechat.core.exceptions import StorageServiceError
from pagechat.core.vector_store import VectorStore
from pagechat.dependencies import get_vector_store
from pagechat.logging_config import configure_logging
from pagechat.routers import chat_router, ingest_router

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting up Web Page Chatbot API...")
    yield


class EntryItem(BaseModel):
    id: str
    metadata: Dict[str, str]


class EntriesResponse(BaseModel):
    total: int
    entries: List[EntryItem]


def create_app() -> FastAPI:
    app = FastAPI(
        title="Web Page Chatbot API",
        description="Ingest web pages and ask questions about them",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # must be False when allow_origins=["*"]
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ingest_router, prefix="/api")
    app.include_router(chat_router, prefix="/api")

    @app.get("/api/entries", response_model=EntriesResponse)
    def list_entries(
        limit: int = Query(100, ge=1, le=1000),
        vector_store: VectorStore = Depends(get_vector_store),
    ):
        """Inspect what is stored in the collection."""
        try:
            hits = vector_store.list_all(limit=limit)
        except StorageServiceError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return EntriesResponse(
            total=len(hits),
            entries=[
                EntryItem(id=h.id, metadata={k: str(v or "") for k, v in h.metadata.items()})
                for h in hits
            ],
        )

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
