"""Data models for document loading."""

from __future__ import annotations

from dataclasses import dataclass, field

from legal_ingest.chunking.schemas import PageText


@dataclass
class LoadResult:
    """Result of loading a single document file.

    Attributes:
        text: Full extracted text.
        pages: Per-page text (for PDFs). Empty for non-paged formats.
        source_path: Filesystem path or identifier.
        format: File extension used (pdf, docx, txt).
        page_count: Number of pages (PDFs).
        char_count: Length of ``text``.
        warnings: Non-fatal issues encountered during loading.
    """

    text: str
    pages: list[PageText] = field(default_factory=list)
    source_path: str | None = None
    format: str = ""
    page_count: int | None = None
    char_count: int = 0
    warnings: list[str] = field(default_factory=list)
