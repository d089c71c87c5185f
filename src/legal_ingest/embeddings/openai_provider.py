"""OpenAI embedding provider: text-embedding-3-small/large.

Requires an API key via ``OPENAI_API_KEY`` env var or the ``api_key``
argument. The SDK's own retries are disabled; ``EmbeddingClient`` owns the
retry policy.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import openai

from legal_ingest.embeddings.base import EmbeddingProvider, as_vector
from legal_ingest.errors import ConfigurationError, EmbeddingError, RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-3-small"

_DIMENSION_MAP = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embed text via the OpenAI Embeddings API."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        dimensions: int | None = None,
        timeout: float = 60.0,
    ):
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError("OpenAI API key not configured")

        self.model = model
        self._dimensions = dimensions or _DIMENSION_MAP.get(model, 1536)
        self._client: Any = openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def embed_text(self, text: str) -> list[float]:
        try:
            resp = self._client.embeddings.create(model=self.model, input=text)
        except openai.RateLimitError as exc:
            raise RateLimitError(f"OpenAI rate limit: {exc.message}") from exc
        except openai.APIStatusError as exc:
            raise EmbeddingError(
                f"OpenAI API error {exc.status_code}: {exc.message}",
                status_code=exc.status_code,
            ) from exc
        except openai.OpenAIError as exc:
            raise EmbeddingError(f"OpenAI request failed: {exc}") from exc

        try:
            value = resp.data[0].embedding
        except (AttributeError, IndexError, TypeError) as exc:
            raise EmbeddingError("Malformed embedding response from OpenAI") from exc
        return as_vector(value, "OpenAI")

    @property
    def dimension(self) -> int:
        return self._dimensions
