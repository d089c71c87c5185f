"""Document loading: text extraction from uploaded files."""

from legal_ingest.documents.loader import DocumentLoader
from legal_ingest.documents.schemas import LoadResult

__all__ = ["DocumentLoader", "LoadResult"]
