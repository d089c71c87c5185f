"""Ingestion pipeline: insert, chunk, embed, store."""

from legal_ingest.pipeline.ingest import IngestPipeline
from legal_ingest.pipeline.schemas import (
    ChunkFailure,
    IngestRequest,
    IngestResult,
    ProcessResult,
)

__all__ = [
    "ChunkFailure",
    "IngestPipeline",
    "IngestRequest",
    "IngestResult",
    "ProcessResult",
]
