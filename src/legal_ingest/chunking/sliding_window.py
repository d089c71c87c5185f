"""Fixed-window chunker with sentence / word boundary snapping.

Each text unit (the whole document, or each page of a page-structured
extraction) is cut into windows of ``chunk_size`` characters. A window that
is not the last one is pulled back to the last period, or failing that the
last space, provided the boundary lies in the final
``1 - boundary_ratio`` share of the window.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from legal_ingest.chunking.base import BaseChunker
from legal_ingest.chunking.metadata import extract_metadata
from legal_ingest.chunking.schemas import Chunk, ChunkMetadata, PageText

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1000
OVERLAP = 200
MIN_CHUNK_LENGTH = 50
BOUNDARY_RATIO = 0.8


class SlidingWindowChunker(BaseChunker):
    """Overlapping, boundary-aware character windows."""

    def __init__(
        self,
        chunk_size: int = CHUNK_SIZE,
        overlap: int = OVERLAP,
        min_chunk_length: int = MIN_CHUNK_LENGTH,
        boundary_ratio: float = BOUNDARY_RATIO,
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= overlap < chunk_size:
            raise ValueError("overlap must be in [0, chunk_size)")
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.min_chunk_length = min_chunk_length
        self.boundary_ratio = boundary_ratio

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chunk(self, text: str, file_name: str) -> list[Chunk]:
        meta = extract_metadata(file_name)
        chunks: list[Chunk] = []
        self._split(text, meta, chunks)

        logger.info(
            "SlidingWindowChunker produced %d chunks from %d chars",
            len(chunks), len(text),
        )
        return chunks

    def chunk_pages(self, pages: Sequence[PageText], file_name: str) -> list[Chunk]:
        meta = extract_metadata(file_name)
        chunks: list[Chunk] = []
        for page in pages:
            self._split(page.full_text, meta, chunks, page_number=page.page_number)

        logger.info(
            "SlidingWindowChunker produced %d chunks from %d pages",
            len(chunks), len(pages),
        )
        return chunks

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _split(
        self,
        text: str,
        meta: ChunkMetadata,
        out: list[Chunk],
        page_number: int | None = None,
    ) -> None:
        """Append the chunks of one text unit to *out*.

        Indices continue from ``len(out)`` so they stay contiguous across
        pages.
        """
        length = len(text)
        start = 0

        while start < length:
            end = min(start + self.chunk_size, length)
            if end < length:
                end = self._snap_end(text, start, end)

            raw = text[start:end]
            piece = raw.strip()

            if len(piece) > self.min_chunk_length:
                chunk = Chunk(text=piece, chunk_index=len(out), metadata=meta)
                if page_number is not None:
                    # Line numbers refer to the first non-blank character
                    offset = start + len(raw) - len(raw.lstrip())
                    line_start = text.count("\n", 0, offset) + 1
                    chunk.page_number = page_number
                    chunk.line_start = line_start
                    chunk.line_end = line_start + piece.count("\n")
                out.append(chunk)

            next_start = max(start + self.chunk_size - self.overlap, end)
            if next_start <= start:
                break
            start = next_start

    def _snap_end(self, text: str, start: int, end: int) -> int:
        threshold = start + self.chunk_size * self.boundary_ratio

        # A period sitting exactly at the cut still closes this chunk
        period = text.rfind(".", start, end + 1)
        if period != -1 and period >= threshold:
            return period + 1

        space = text.rfind(" ", start, end)
        if space != -1 and space >= threshold:
            return space

        return end
