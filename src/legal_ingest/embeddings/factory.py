"""Embedding provider factory: registry, lazy import, singleton cache."""

from __future__ import annotations

import importlib
import logging

from legal_ingest.config import EmbeddingSettings
from legal_ingest.embeddings.base import EmbeddingProvider
from legal_ingest.embeddings.client import EmbeddingClient
from legal_ingest.embeddings.retry import RetryPolicy
from legal_ingest.errors import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provider registry: (provider_key, module_path, class_name)
# ---------------------------------------------------------------------------

_PROVIDER_REGISTRY: list[tuple[str, str, str]] = [
    ("openai", "legal_ingest.embeddings.openai_provider", "OpenAIEmbeddingProvider"),
    ("ollama", "legal_ingest.embeddings.ollama_provider", "OllamaEmbeddingProvider"),
]

# Singleton cache
_provider_cache: dict[str, EmbeddingProvider] = {}


def get_embedding_provider(
    provider: str = "openai",
    **kwargs,
) -> EmbeddingProvider:
    """Get an embedding provider by name.

    Args:
        provider: One of ``openai``, ``ollama``.
        **kwargs: Passed to the provider constructor.

    Returns:
        An ``EmbeddingProvider`` instance.
    """
    key = provider.lower()

    if not kwargs and key in _provider_cache:
        return _provider_cache[key]

    for reg_key, module_path, cls_name in _PROVIDER_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            instance = cls(**kwargs)
            if not kwargs:
                _provider_cache[key] = instance
            return instance

    available = [k for k, _, _ in _PROVIDER_REGISTRY]
    raise ConfigurationError(f"Unknown embedding provider '{provider}'. Available: {available}")


def build_embedding_client(settings: EmbeddingSettings) -> EmbeddingClient:
    """Build a provider from settings and wrap it with the retry policy."""
    kwargs: dict = {"model": settings.model, "timeout": settings.timeout}
    if settings.base_url:
        kwargs["base_url"] = settings.base_url
    if settings.provider.lower() == "ollama":
        kwargs["dimension"] = settings.dimension
    else:
        kwargs["dimensions"] = settings.dimension

    provider = get_embedding_provider(settings.provider, **kwargs)
    policy = RetryPolicy(
        max_attempts=settings.max_attempts,
        backoff_seconds=settings.backoff_seconds,
    )
    logger.info(
        "Embedding client: %s (%s, dim=%d)",
        provider.provider_name(), settings.model, provider.dimension,
    )
    return EmbeddingClient(provider, policy=policy)


def available_providers() -> list[str]:
    """Return names of registered embedding providers."""
    return [k for k, _, _ in _PROVIDER_REGISTRY]


def clear_cache() -> None:
    """Clear singleton cache (for testing)."""
    _provider_cache.clear()
