"""Data models for chunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChunkMetadata:
    """Metadata carried by each chunk and stored alongside its embedding."""

    document_name: str
    client: str | None = None
    matter: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"documentName": self.document_name}
        if self.client:
            d["client"] = self.client
        if self.matter:
            d["matter"] = self.matter
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChunkMetadata:
        return cls(
            document_name=data.get("documentName", ""),
            client=data.get("client"),
            matter=data.get("matter"),
        )


@dataclass
class Chunk:
    """A single embeddable piece of a document.

    ``page_number``, ``line_start`` and ``line_end`` are only set when the
    source was page-structured. Line numbers are 1-based within the page.
    """

    text: str
    chunk_index: int
    metadata: ChunkMetadata
    page_number: int | None = None
    line_start: int | None = None
    line_end: int | None = None


@dataclass(frozen=True)
class PageText:
    """One page of a page-structured extraction."""

    page_number: int
    full_text: str = field(repr=False)
