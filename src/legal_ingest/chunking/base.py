"""Abstract base class for chunkers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from legal_ingest.chunking.schemas import Chunk, PageText


class BaseChunker(ABC):
    """Interface for document chunking strategies."""

    @abstractmethod
    def chunk(self, text: str, file_name: str) -> list[Chunk]:
        """Split flat document text into chunks.

        Args:
            text: Full document text.
            file_name: Source file name, used for chunk metadata.

        Returns:
            List of ``Chunk`` objects with contiguous indices from 0.
        """

    @abstractmethod
    def chunk_pages(self, pages: Sequence[PageText], file_name: str) -> list[Chunk]:
        """Split page-structured text into chunks carrying page/line info."""

    @classmethod
    def strategy_name(cls) -> str:
        """Return human-readable strategy name."""
        return cls.__name__
