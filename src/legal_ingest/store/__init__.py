"""Persistence for documents and chunk embeddings: memory and FAISS."""

from legal_ingest.store.base import DocumentStore
from legal_ingest.store.factory import available_stores, get_store
from legal_ingest.store.schemas import ChunkRecord, DocumentRecord

__all__ = [
    "ChunkRecord",
    "DocumentRecord",
    "DocumentStore",
    "available_stores",
    "get_store",
]
