"""Embedding client: one provider request per chunk, one retry on 429."""

from __future__ import annotations

import logging

from legal_ingest.embeddings.base import EmbeddingProvider
from legal_ingest.embeddings.retry import RetryPolicy

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Wrap an ``EmbeddingProvider`` with the rate-limit retry policy."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        policy: RetryPolicy | None = None,
    ):
        self.provider = provider
        self.policy = policy or RetryPolicy()

    def embed(self, text: str) -> list[float]:
        """Return the embedding for *text* or raise ``EmbeddingError``."""
        return self.policy.call(self.provider.embed_text, text)

    @property
    def dimension(self) -> int:
        return self.provider.dimension
