"""FAISS-backed store: local, zero infrastructure.

Chunk vectors go into a FAISS inner-product index (cosine after
normalisation) with a parallel record table. Raw vectors are kept in the
table so deletes can rebuild the index.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

import numpy as np

from legal_ingest.chunking.schemas import ChunkMetadata, PageText
from legal_ingest.store.memory_store import MemoryStore
from legal_ingest.store.schemas import ChunkRecord, DocumentRecord

logger = logging.getLogger(__name__)


class FAISSStore(MemoryStore):
    """Memory tables plus a FAISS index kept in step with the chunk table."""

    def __init__(self, dimension: int = 1536):
        try:
            import faiss
        except ImportError as exc:
            raise ImportError(
                "faiss-cpu required: pip install legal-doc-ingest[faiss]"
            ) from exc

        super().__init__()
        self._faiss = faiss
        self._dimension = dimension
        self._index = faiss.IndexFlatIP(dimension)
        self._positions: list[tuple[str, int]] = []  # index row -> chunk key

    @property
    def dimension(self) -> int:
        return self._dimension

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_chunk(self, record: ChunkRecord) -> None:
        self._check_chunk(record)
        if len(record.embedding) != self._dimension:
            raise ValueError(
                f"Embedding has dimension {len(record.embedding)}, "
                f"store expects {self._dimension}"
            )

        self._index.add(self._normalized([record.embedding]))
        self._chunks[record.key] = record
        self._positions.append(record.key)

    def delete_chunks(self, document_id: str) -> int:
        deleted = super().delete_chunks(document_id)
        if deleted:
            self._rebuild()
        return deleted

    def clear(self) -> None:
        super().clear()
        self._index = self._faiss.IndexFlatIP(self._dimension)
        self._positions = []

    def index_size(self) -> int:
        """Number of vectors in the FAISS index."""
        return self._index.ntotal

    def save(self, path: str) -> None:
        """Save FAISS index and record tables to disk."""
        p = Path(path)
        p.mkdir(parents=True, exist_ok=True)

        self._faiss.write_index(self._index, str(p / "index.faiss"))

        documents = []
        for doc in self._documents.values():
            d = asdict(doc)
            d["created_at"] = doc.created_at.isoformat()
            documents.append(d)

        chunks = []
        for key in self._positions:
            rec = self._chunks[key]
            d = asdict(rec)
            d["metadata"] = rec.metadata.to_dict()
            chunks.append(d)

        with open(p / "records.json", "w", encoding="utf-8") as f:
            json.dump(
                {"dimension": self._dimension, "documents": documents, "chunks": chunks},
                f,
            )

        logger.info("FAISSStore saved to %s (%d chunks)", path, self.count())

    def load(self, path: str) -> None:
        """Load FAISS index and record tables from disk."""
        p = Path(path)

        with open(p / "records.json", encoding="utf-8") as f:
            data = json.load(f)

        if data.get("dimension", self._dimension) != self._dimension:
            raise ValueError(
                f"Stored dimension {data['dimension']} does not match {self._dimension}"
            )

        self._documents = {}
        for d in data["documents"]:
            d["pages"] = [PageText(**page) for page in d.get("pages", [])]
            d["created_at"] = datetime.fromisoformat(d["created_at"])
            doc = DocumentRecord(**d)
            self._documents[doc.id] = doc

        self._chunks = {}
        self._positions = []
        for d in data["chunks"]:
            d["metadata"] = ChunkMetadata.from_dict(d["metadata"])
            rec = ChunkRecord(**d)
            self._chunks[rec.key] = rec
            self._positions.append(rec.key)

        self._index = self._faiss.read_index(str(p / "index.faiss"))
        if self._index.ntotal != len(self._positions):
            logger.warning("FAISS index out of step with records in %s, rebuilding", path)
            self._rebuild()

        logger.info("FAISSStore loaded from %s (%d chunks)", path, self.count())

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _normalized(self, vectors: list[list[float]]) -> np.ndarray:
        arr = np.array(vectors, dtype=np.float32)
        self._faiss.normalize_L2(arr)
        return arr

    def _rebuild(self) -> None:
        # IndexFlatIP has no native delete; re-add surviving vectors in order
        self._positions = [k for k in self._positions if k in self._chunks]
        self._index = self._faiss.IndexFlatIP(self._dimension)
        if self._positions:
            self._index.add(
                self._normalized([self._chunks[k].embedding for k in self._positions])
            )
