"""Ollama embedding provider: local-first, no API keys needed.

Uses the Ollama REST API (http://localhost:11434) with models like
``nomic-embed-text``, ``mxbai-embed-large``, etc.
"""

from __future__ import annotations

import logging

import httpx

from legal_ingest.embeddings.base import EmbeddingProvider, as_vector
from legal_ingest.errors import EmbeddingError, RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "nomic-embed-text"
DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_DIM = 768


class OllamaEmbeddingProvider(EmbeddingProvider):
    """Embed text via a local Ollama server."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        dimension: int = DEFAULT_DIM,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ):
        self.model = model
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._dimension = dimension
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def embed_text(self, text: str) -> list[float]:
        try:
            resp = self._client.post(
                "/api/embed",
                json={"model": self.model, "input": text},
            )
        except httpx.HTTPError as exc:
            raise EmbeddingError(f"Ollama request failed: {exc}") from exc

        if resp.status_code == 429:
            raise RateLimitError(f"Ollama rate limit: {resp.text}")
        if resp.is_error:
            raise EmbeddingError(
                f"Ollama error {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        try:
            value = resp.json()["embeddings"][0]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise EmbeddingError("Malformed embedding response from Ollama") from exc
        return as_vector(value, "Ollama")

    @property
    def dimension(self) -> int:
        return self._dimension
