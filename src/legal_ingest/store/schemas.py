"""Data models for persisted documents and chunk/embedding records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from legal_ingest.chunking.schemas import Chunk, ChunkMetadata, PageText


@dataclass
class DocumentRecord:
    """A parent document row. Chunks reference it by ``id``."""

    title: str
    file_name: str
    file_type: str = ""
    file_size: int = 0
    content: str = ""
    pages: list[PageText] = field(default_factory=list)
    user_id: str | None = None
    id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ChunkRecord:
    """A chunk together with its embedding, written as one unit."""

    document_id: str
    chunk_index: int
    text: str
    embedding: list[float]
    metadata: ChunkMetadata
    page_number: int | None = None
    line_start: int | None = None
    line_end: int | None = None

    @property
    def key(self) -> tuple[str, int]:
        return (self.document_id, self.chunk_index)

    @classmethod
    def from_chunk(cls, document_id: str, chunk: Chunk, embedding: list[float]) -> ChunkRecord:
        if isinstance(embedding, (str, bytes)):
            raise ValueError("Embedding must be a sequence of numbers")
        return cls(
            document_id=document_id,
            chunk_index=chunk.chunk_index,
            text=chunk.text,
            embedding=[float(x) for x in embedding],
            metadata=chunk.metadata,
            page_number=chunk.page_number,
            line_start=chunk.line_start,
            line_end=chunk.line_end,
        )
