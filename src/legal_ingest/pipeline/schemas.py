"""Data models for the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from legal_ingest.chunking.schemas import PageText


@dataclass
class IngestRequest:
    """A document handed over by the upload / extraction layer."""

    file_name: str
    content: str
    file_type: str = ""
    file_size: int = 0
    title: str | None = None
    pages: list[PageText] | None = None
    user_id: str | None = None


@dataclass(frozen=True)
class ChunkFailure:
    """A chunk that was dropped after its embedding or write failed."""

    chunk_index: int
    error: str


@dataclass
class IngestResult:
    """Outcome of the chunk-embed-store loop for one document."""

    document_id: str
    total_chunks: int = 0
    chunks_attempted: int = 0
    chunks_succeeded: int = 0
    failures: list[ChunkFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def chunks_failed(self) -> int:
        return self.chunks_attempted - self.chunks_succeeded


@dataclass
class ProcessResult:
    """Document-level verdict returned to the caller."""

    success: bool
    document_id: str
    message: str
    chunks_attempted: int = 0
    chunks_succeeded: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "document_id": self.document_id,
            "message": self.message,
            "embeddings_created": self.chunks_succeeded,
            "total_chunks": self.chunks_attempted,
        }
