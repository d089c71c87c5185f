"""Abstract base class for document / embedding stores."""

from __future__ import annotations

from abc import ABC, abstractmethod

from legal_ingest.store.schemas import ChunkRecord, DocumentRecord


class DocumentStore(ABC):
    """Interface for persistence backends."""

    @abstractmethod
    def insert_document(self, record: DocumentRecord) -> str:
        """Persist a document record and return its id.

        An id is generated when ``record.id`` is ``None``.
        """

    @abstractmethod
    def get_document(self, document_id: str) -> DocumentRecord | None:
        """Return the document, or ``None`` if it does not exist."""

    @abstractmethod
    def add_chunk(self, record: ChunkRecord) -> None:
        """Persist one chunk with its embedding, all or nothing.

        Raises:
            KeyError: The parent document does not exist.
            ValueError: The ``(document_id, chunk_index)`` key is taken or
                the embedding is unusable.
        """

    @abstractmethod
    def list_chunks(self, document_id: str) -> list[ChunkRecord]:
        """Return a document's chunks ordered by ``chunk_index``."""

    @abstractmethod
    def delete_chunks(self, document_id: str) -> int:
        """Delete every chunk of a document.

        Returns:
            Number of chunks deleted.
        """

    @abstractmethod
    def delete_document(self, document_id: str) -> bool:
        """Delete a document and, by cascade, its chunks."""

    @abstractmethod
    def count(self, document_id: str | None = None) -> int:
        """Return the number of chunk records, optionally for one document."""

    @abstractmethod
    def clear(self) -> None:
        """Delete all records."""

    def save(self, path: str) -> None:
        """Persist the store to disk (optional)."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support save()")

    def load(self, path: str) -> None:
        """Load the store from disk (optional)."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support load()")

    @classmethod
    def store_name(cls) -> str:
        """Return human-readable store name."""
        return cls.__name__
