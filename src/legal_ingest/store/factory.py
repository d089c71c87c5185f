"""Store factory: registry, lazy import, singleton cache."""

from __future__ import annotations

import importlib
import logging

from legal_ingest.errors import ConfigurationError
from legal_ingest.store.base import DocumentStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Store registry: (store_key, module_path, class_name)
# ---------------------------------------------------------------------------

_STORE_REGISTRY: list[tuple[str, str, str]] = [
    ("memory", "legal_ingest.store.memory_store", "MemoryStore"),
    ("faiss", "legal_ingest.store.faiss_store", "FAISSStore"),
]

# Singleton cache
_store_cache: dict[str, DocumentStore] = {}


def get_store(
    backend: str = "memory",
    **kwargs,
) -> DocumentStore:
    """Get a store by name.

    Args:
        backend: One of ``memory``, ``faiss``.
        **kwargs: Passed to the store constructor.

    Returns:
        A ``DocumentStore`` instance.
    """
    key = backend.lower()

    if not kwargs and key in _store_cache:
        return _store_cache[key]

    for reg_key, module_path, cls_name in _STORE_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            instance = cls(**kwargs)
            if not kwargs:
                _store_cache[key] = instance
            return instance

    available = [k for k, _, _ in _STORE_REGISTRY]
    raise ConfigurationError(f"Unknown store backend '{backend}'. Available: {available}")


def available_stores() -> list[str]:
    """Return names of registered stores."""
    return [k for k, _, _ in _STORE_REGISTRY]


def clear_cache() -> None:
    """Clear singleton cache (for testing)."""
    _store_cache.clear()
