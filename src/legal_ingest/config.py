"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class EmbeddingSettings(BaseModel):
    provider: str = "openai"
    model: str = "text-embedding-3-small"
    base_url: str | None = None
    dimension: int = 1536
    timeout: float = 60.0
    max_attempts: int = Field(default=2, ge=1)
    backoff_seconds: float = Field(default=5.0, ge=0.0)


class ChunkingSettings(BaseModel):
    chunk_size: int = Field(default=1000, gt=0)
    overlap: int = Field(default=200, ge=0)
    min_chunk_length: int = Field(default=50, ge=0)
    boundary_ratio: float = Field(default=0.8, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def _overlap_below_size(self) -> ChunkingSettings:
        if self.overlap >= self.chunk_size:
            raise ValueError("overlap must be smaller than chunk_size")
        return self


class IngestionSettings(BaseModel):
    pacing_delay_seconds: float = Field(default=0.2, ge=0.0)
    placeholder_markers: list[str] = Field(
        default_factory=lambda: [
            "requires server-side processing",
            "requires specialized processing",
        ]
    )
    supported_formats: list[str] = Field(
        default_factory=lambda: [".txt", ".pdf", ".docx"]
    )
    max_file_size_mb: int = 50


class StoreSettings(BaseModel):
    backend: str = "memory"
    path: str = "local_data/store"


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv("LEGAL_INGEST_PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML file, falling back to defaults.

    ``EMBEDDING_PROVIDER`` and ``STORE_BACKEND`` override the file values.
    """
    path = Path(path) if path is not None else _find_settings_file()
    raw: dict = {}
    if path is not None:
        with open(path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}

    settings = Settings(**raw)

    provider = os.getenv("EMBEDDING_PROVIDER")
    if provider:
        settings.embedding.provider = provider
    backend = os.getenv("STORE_BACKEND")
    if backend:
        settings.store.backend = backend
    return settings
