import logging
import os
from typing import List, Optional

import httpx

from pagechat.config import EMBEDDING
from pagechat.core.exceptions import EmbeddingServiceError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class Embedder:
    """Maps text to a fixed-length vector through an OpenAI-compatible embeddings API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise RuntimeError("Missing OPENAI_API_KEY environment variable")

        base_url = (base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self._endpoint = f"{base_url}/embeddings"
        self._http = client or httpx.Client(
            timeout=httpx.Timeout(EMBEDDING["timeout_seconds"], connect=10.0)
        )
        self.model = EMBEDDING["model"]
        self.dimensions = EMBEDDING["dimensions"]

    def embed(self, text: str) -> List[float]:
        """Embed one text. One request, one vector."""
        payload = {
            "model": self.model,
            "input": text,
            "dimensions": self.dimensions,
            "encoding_format": "float",
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = self._http.post(self._endpoint, headers=headers, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            raise EmbeddingServiceError(
                f"Embeddings API returned {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise EmbeddingServiceError(f"Embeddings request failed: {type(e).__name__}: {e}") from e

        try:
            vec = body["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise EmbeddingServiceError("Unexpected embeddings response format") from e
        if not isinstance(vec, list) or not vec:
            raise EmbeddingServiceError("Unexpected embeddings response format")

        logger.debug("Embedded %d chars -> %d dims", len(text), len(vec))
        return vec

    def embed_query(self, query: str) -> List[float]:
        return self.embed(query)

    def close(self) -> None:
        self._http.close()
