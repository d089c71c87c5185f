"""Embedding providers (OpenAI, Ollama) and the retrying client."""

from legal_ingest.embeddings.base import EmbeddingProvider
from legal_ingest.embeddings.client import EmbeddingClient
from legal_ingest.embeddings.factory import (
    available_providers,
    build_embedding_client,
    get_embedding_provider,
)
from legal_ingest.embeddings.retry import RetryPolicy

__all__ = [
    "EmbeddingClient",
    "EmbeddingProvider",
    "RetryPolicy",
    "available_providers",
    "build_embedding_client",
    "get_embedding_provider",
]
