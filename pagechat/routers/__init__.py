from pagechat.routers.chat import router as chat_router
from pagechat.routers.ingest import router as ingest_router

__all__ = ["chat_router", "ingest_router"]
