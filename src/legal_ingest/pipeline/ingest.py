"""Ingestion pipeline: insert, chunk, embed, store, one chunk at a time.

Chunks are embedded strictly in index order with a pacing delay between
provider calls. A failing chunk is logged and skipped; it never aborts the
document. Each chunk is written together with its embedding or not at all.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from typing import Any

from legal_ingest.chunking.base import BaseChunker
from legal_ingest.chunking.schemas import PageText
from legal_ingest.chunking.sliding_window import SlidingWindowChunker
from legal_ingest.config import Settings
from legal_ingest.embeddings.client import EmbeddingClient
from legal_ingest.errors import (
    AuthenticationError,
    DocumentInsertError,
    EmbeddingError,
    IngestError,
)
from legal_ingest.pipeline.schemas import (
    ChunkFailure,
    IngestRequest,
    IngestResult,
    ProcessResult,
)
from legal_ingest.store.base import DocumentStore
from legal_ingest.store.schemas import ChunkRecord, DocumentRecord

logger = logging.getLogger(__name__)

PACING_DELAY_SECONDS = 0.2
PLACEHOLDER_MARKERS = (
    "requires server-side processing",
    "requires specialized processing",
)


class IngestPipeline:
    """Orchestrates document ingestion: insert, chunk, embed, store."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        store: DocumentStore,
        chunker: BaseChunker | None = None,
        pacing_delay: float = PACING_DELAY_SECONDS,
        placeholder_markers: Sequence[str] = PLACEHOLDER_MARKERS,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        self.embedding_client = embedding_client
        self.store = store
        self.chunker = chunker or SlidingWindowChunker()
        self.pacing_delay = pacing_delay
        self.placeholder_markers = tuple(placeholder_markers)
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        embedding_client: EmbeddingClient,
        store: DocumentStore,
    ) -> IngestPipeline:
        chunking = settings.chunking
        return cls(
            embedding_client=embedding_client,
            store=store,
            chunker=SlidingWindowChunker(
                chunk_size=chunking.chunk_size,
                overlap=chunking.overlap,
                min_chunk_length=chunking.min_chunk_length,
                boundary_ratio=chunking.boundary_ratio,
            ),
            pacing_delay=settings.ingestion.pacing_delay_seconds,
            placeholder_markers=settings.ingestion.placeholder_markers,
        )

    # ------------------------------------------------------------------
    # Document-level operations
    # ------------------------------------------------------------------

    def ingest_document(
        self,
        request: IngestRequest,
        cancel: threading.Event | None = None,
    ) -> ProcessResult:
        """Insert the document record, then embed its chunks.

        Raises:
            AuthenticationError: ``request.user_id`` is missing.
            DocumentInsertError: The document row could not be written.
        """
        if not request.user_id:
            raise AuthenticationError("User not authenticated")

        logger.info(
            "Processing document: %s (type=%s, size=%d, content length=%d)",
            request.file_name, request.file_type, request.file_size, len(request.content),
        )

        record = DocumentRecord(
            title=request.title or request.file_name,
            file_name=request.file_name,
            file_type=request.file_type,
            file_size=request.file_size,
            content=request.content,
            pages=list(request.pages or []),
            user_id=request.user_id,
        )
        try:
            document_id = self.store.insert_document(record)
        except Exception as exc:
            raise DocumentInsertError(f"Error inserting document: {exc}") from exc

        logger.info("Document inserted with ID: %s", document_id)

        if self._is_placeholder(request.content):
            logger.warning("Skipping embedding generation for placeholder content")
            return ProcessResult(
                success=True,
                document_id=document_id,
                message="Document uploaded successfully (embeddings skipped for placeholder content)",
            )

        result = self.process(
            document_id, request.content, request.file_name,
            pages=request.pages, cancel=cancel,
        )
        return ProcessResult(
            success=True,
            document_id=document_id,
            message="Document processed successfully",
            chunks_attempted=result.chunks_attempted,
            chunks_succeeded=result.chunks_succeeded,
        )

    def reembed_document(
        self,
        document_id: str,
        cancel: threading.Event | None = None,
    ) -> ProcessResult:
        """Drop a stored document's chunks and embed its content again."""
        document = self.store.get_document(document_id)
        if document is None:
            raise IngestError(f"Document {document_id} not found")

        if not _has_text(document.content, document.pages):
            logger.info("No content found for document: %s", document_id)
            return ProcessResult(
                success=True,
                document_id=document_id,
                message="No content to process for embeddings",
            )

        deleted = self.store.delete_chunks(document_id)
        logger.info("Deleted %d existing chunks for document %s", deleted, document_id)

        result = self.process(
            document_id, document.content, document.file_name or document.title,
            pages=document.pages or None, cancel=cancel,
        )
        return ProcessResult(
            success=True,
            document_id=document_id,
            message="Embeddings updated successfully",
            chunks_attempted=result.chunks_attempted,
            chunks_succeeded=result.chunks_succeeded,
        )

    # ------------------------------------------------------------------
    # Chunk loop
    # ------------------------------------------------------------------

    def process(
        self,
        document_id: str,
        content: str,
        file_name: str,
        pages: Sequence[PageText] | None = None,
        cancel: threading.Event | None = None,
    ) -> IngestResult:
        """Chunk *content* (or *pages*) and persist every embeddable chunk.

        Setting *cancel* stops scheduling further chunks; chunks already
        written stay valid.
        """
        result = IngestResult(document_id=document_id)

        if not _has_text(content, pages):
            logger.info("No content to process for embeddings")
            return result

        if pages:
            chunks = self.chunker.chunk_pages(pages, file_name)
        else:
            chunks = self.chunker.chunk(content, file_name)
        result.total_chunks = len(chunks)
        logger.info("Split content into %d chunks", len(chunks))

        for position, chunk in enumerate(chunks):
            if cancel is not None and cancel.is_set():
                logger.warning(
                    "Ingestion of %s cancelled after %d/%d chunks",
                    document_id, position, len(chunks),
                )
                result.cancelled = True
                break

            if position > 0 and self.pacing_delay > 0:
                self._sleep(self.pacing_delay)

            logger.debug("Processing chunk %d/%d", position + 1, len(chunks))
            result.chunks_attempted += 1

            try:
                embedding = self.embedding_client.embed(chunk.text)
            except EmbeddingError as exc:
                logger.error("Embedding failed for chunk %d: %s", chunk.chunk_index, exc)
                result.failures.append(ChunkFailure(chunk.chunk_index, str(exc)))
                continue

            try:
                self.store.add_chunk(ChunkRecord.from_chunk(document_id, chunk, embedding))
            except (KeyError, ValueError, TypeError, OSError) as exc:
                logger.error("Error storing embedding for chunk %d: %s", chunk.chunk_index, exc)
                result.failures.append(ChunkFailure(chunk.chunk_index, str(exc)))
                continue

            result.chunks_succeeded += 1

        logger.info(
            "Embedding generation complete. %d/%d embeddings created successfully.",
            result.chunks_succeeded, result.chunks_attempted,
        )
        if result.chunks_attempted and not result.chunks_succeeded:
            logger.warning("No embeddings were created successfully for %s", document_id)

        return result

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _is_placeholder(self, content: str) -> bool:
        return any(marker in content for marker in self.placeholder_markers)


def _has_text(content: str, pages: Sequence[PageText] | None) -> bool:
    if pages:
        return any(p.full_text.strip() for p in pages)
    return bool(content and content.strip())
