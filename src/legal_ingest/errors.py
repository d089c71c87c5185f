"""Exception hierarchy for the ingestion pipeline.

Fatal errors (configuration, authentication, document insert) propagate to
the caller. ``EmbeddingError`` is per-chunk: the coordinator records it and
moves on to the next chunk.
"""

from __future__ import annotations


class IngestError(Exception):
    """Base class for ingestion failures."""


class ConfigurationError(IngestError):
    """A required setting or credential is missing or invalid."""


class AuthenticationError(IngestError):
    """The caller identity is missing or invalid."""


class DocumentInsertError(IngestError):
    """The parent document record could not be persisted."""


class EmbeddingError(IngestError):
    """The embedding provider failed for a single chunk."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(EmbeddingError):
    """The embedding provider answered HTTP 429."""

    def __init__(self, message: str = "Rate limited by embedding provider"):
        super().__init__(message, status_code=429)
