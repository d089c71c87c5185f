"""In-process store: dict tables, no infrastructure."""

from __future__ import annotations

import logging
import uuid

from legal_ingest.store.base import DocumentStore
from legal_ingest.store.schemas import ChunkRecord, DocumentRecord

logger = logging.getLogger(__name__)


class MemoryStore(DocumentStore):
    """Documents and chunk records held in dictionaries."""

    def __init__(self):
        self._documents: dict[str, DocumentRecord] = {}
        self._chunks: dict[tuple[str, int], ChunkRecord] = {}

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def insert_document(self, record: DocumentRecord) -> str:
        if record.id is None:
            record.id = str(uuid.uuid4())
        if record.id in self._documents:
            raise ValueError(f"Document {record.id} already exists")
        self._documents[record.id] = record
        return record.id

    def get_document(self, document_id: str) -> DocumentRecord | None:
        return self._documents.get(document_id)

    def delete_document(self, document_id: str) -> bool:
        if document_id not in self._documents:
            return False
        self.delete_chunks(document_id)
        del self._documents[document_id]
        return True

    # ------------------------------------------------------------------
    # Chunks
    # ------------------------------------------------------------------

    def add_chunk(self, record: ChunkRecord) -> None:
        self._check_chunk(record)
        self._chunks[record.key] = record

    def list_chunks(self, document_id: str) -> list[ChunkRecord]:
        rows = [r for (doc_id, _), r in self._chunks.items() if doc_id == document_id]
        return sorted(rows, key=lambda r: r.chunk_index)

    def delete_chunks(self, document_id: str) -> int:
        keys = [k for k in self._chunks if k[0] == document_id]
        for k in keys:
            del self._chunks[k]
        return len(keys)

    def count(self, document_id: str | None = None) -> int:
        if document_id is None:
            return len(self._chunks)
        return sum(1 for doc_id, _ in self._chunks if doc_id == document_id)

    def clear(self) -> None:
        self._documents.clear()
        self._chunks.clear()

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _check_chunk(self, record: ChunkRecord) -> None:
        if record.document_id not in self._documents:
            raise KeyError(f"Unknown document {record.document_id}")
        if record.key in self._chunks:
            raise ValueError(
                f"Chunk {record.chunk_index} of document {record.document_id} already exists"
            )
        if not record.embedding:
            raise ValueError("Chunk record has an empty embedding")
