import logging
import os
from typing import Optional

import httpx

from pagechat.config import LLM
from pagechat.core.embedder import DEFAULT_BASE_URL
from pagechat.core.exceptions import ChatServiceError

logger = logging.getLogger(__name__)


class LLMWrapper:
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
        self._endpoint = f"{base_url}/chat/completions"
        self._http = client or httpx.Client(timeout=LLM["timeout_seconds"])
        self.model = LLM["model"]
        self.max_tokens = LLM["max_tokens"]
        self.temperature = LLM["temperature"]

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Generate a non-streaming answer."""
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        logger.debug("Chat request to %s (%d prompt chars)", self._endpoint, len(user_prompt))
        try:
            resp = self._http.post(
                self._endpoint,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            raise ChatServiceError(
                f"Chat API returned {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ChatServiceError(f"Chat request failed: {type(e).__name__}: {e}") from e

        try:
            return body["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ChatServiceError("Unexpected chat response format") from e

    def close(self) -> None:
        self._http.close()
