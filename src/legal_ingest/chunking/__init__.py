"""Boundary-aware document chunking."""

from legal_ingest.chunking.base import BaseChunker
from legal_ingest.chunking.metadata import extract_client, extract_matter, extract_metadata
from legal_ingest.chunking.schemas import Chunk, ChunkMetadata, PageText
from legal_ingest.chunking.sliding_window import SlidingWindowChunker

__all__ = [
    "BaseChunker",
    "Chunk",
    "ChunkMetadata",
    "PageText",
    "SlidingWindowChunker",
    "extract_client",
    "extract_matter",
    "extract_metadata",
]
