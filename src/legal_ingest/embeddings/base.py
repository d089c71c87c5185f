"""Abstract base class for embedding providers."""

from __future__ import annotations

import numbers
from abc import ABC, abstractmethod
from typing import Any

from legal_ingest.errors import EmbeddingError


def as_vector(value: Any, source: str) -> list[float]:
    """Return *value* as a list of floats or raise ``EmbeddingError``.

    A vector must be a non-empty list (or tuple) of real numbers.
    """
    if not isinstance(value, (list, tuple)) or not value:
        raise EmbeddingError(f"Malformed embedding response from {source}: expected a vector")
    if not all(isinstance(x, numbers.Real) and not isinstance(x, bool) for x in value):
        raise EmbeddingError(f"Malformed embedding response from {source}: non-numeric values")
    return [float(x) for x in value]


class EmbeddingProvider(ABC):
    """Interface for text embedding models."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Embed a single chunk of text with one provider request.

        Args:
            text: The chunk text.

        Returns:
            Embedding vector.

        Raises:
            RateLimitError: The provider answered HTTP 429.
            EmbeddingError: Any other provider or payload failure.
        """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimensionality."""

    @classmethod
    def provider_name(cls) -> str:
        """Return human-readable provider name."""
        return cls.__name__
