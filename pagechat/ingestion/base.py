import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass
class MetaEntry:
    # None means the attribute was absent on the <meta> tag
    name: Optional[str] = None
    content: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {}
        if self.name is not None:
            data["name"] = self.name
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class PageHead:
    title: str = ""
    meta: List[MetaEntry] = field(default_factory=list)
    description: str = ""
    keywords: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "meta": [entry.to_dict() for entry in self.meta],
            "description": self.description,
            "keywords": self.keywords,
        }

    def serialize(self) -> str:
        """Compact JSON with a fixed field order; absent meta attributes are omitted."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))


@dataclass
class PageRecord:
    source_url: str
    head: PageHead
    body_text: str = ""
    internal_links: List[str] = field(default_factory=list)
    external_links: List[str] = field(default_factory=list)


class ChunkRole(str, Enum):
    HEAD = "head"
    BODY = "body"


@dataclass
class Chunk:
    text: str
    role: ChunkRole
    parent_url: str


@dataclass
class StoredEntry:
    id: str
    embedding: List[float]
    url: str
    head: str = ""
    body: str = ""

    @property
    def metadata(self) -> Dict[str, str]:
        return {"url": self.url, "head": self.head, "body": self.body}


@dataclass
class SearchHit:
    id: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    score: Optional[float] = None


class IngestStatus(str, Enum):
    INGESTED = "ingested"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class IngestResult:
    url: str
    status: IngestStatus
    entry_ids: List[str] = field(default_factory=list)
    internal_links: List[str] = field(default_factory=list)
    external_links: List[str] = field(default_factory=list)
    error: Optional[str] = None
    ingested_at: Optional[str] = None


class BaseIngester(ABC):
    @abstractmethod
    def ingest(self, source_path: str) -> IngestResult:
        """Ingest a source and report what was stored."""
        pass

    def _get_timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()
