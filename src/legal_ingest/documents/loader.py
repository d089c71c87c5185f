"""Unified document loader: PDF, DOCX, TXT.

Supports both filesystem paths and in-memory bytes for uploads. Extraction
problems become warnings on the result, never exceptions.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from pathlib import Path

from legal_ingest.chunking.schemas import PageText
from legal_ingest.config import IngestionSettings
from legal_ingest.documents.schemas import LoadResult

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".txt", ".pdf", ".docx"}

_MB = 1024 * 1024

MIME_TYPES = {
    ".txt": "text/plain",
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class DocumentLoader:
    """Load documents into a structured ``LoadResult``.

    Args:
        supported_formats: Extensions accepted for upload. Only formats the
            loader can extract are honoured.
        max_file_size_mb: Upload size limit; ``None`` disables the check.
    """

    def __init__(
        self,
        supported_formats: Iterable[str] | None = None,
        max_file_size_mb: float | None = None,
    ):
        formats = SUPPORTED_EXTENSIONS if supported_formats is None else supported_formats
        self.supported_formats = {f.lower() for f in formats} & SUPPORTED_EXTENSIONS
        self.max_file_size_mb = max_file_size_mb

    @classmethod
    def from_settings(cls, settings: IngestionSettings) -> DocumentLoader:
        return cls(
            supported_formats=settings.supported_formats,
            max_file_size_mb=settings.max_file_size_mb,
        )

    def check_upload(self, filename: str, size_bytes: int) -> str:
        """Validate an upload by name and size, returning its extension.

        Raises:
            ValueError: Unsupported extension or file over the size limit.
        """
        ext = Path(filename).suffix.lower()
        if ext not in self.supported_formats:
            raise ValueError(
                f"Unsupported format '{ext}'. Supported: {sorted(self.supported_formats)}"
            )
        if self.max_file_size_mb is not None and size_bytes > self.max_file_size_mb * _MB:
            raise ValueError(
                f"File too large: {size_bytes / _MB:.1f} MB exceeds {self.max_file_size_mb} MB limit"
            )
        return ext

    def load_file(self, path: str | Path) -> LoadResult:
        """Load a document from a filesystem path."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        ext = self.check_upload(path.name, path.stat().st_size)
        result = self._dispatch(path.read_bytes(), ext)
        result.source_path = str(path)
        return result

    def load_bytes(self, data: bytes, filename: str) -> LoadResult:
        """Load a document from in-memory bytes."""
        ext = self.check_upload(filename, len(data))
        result = self._dispatch(data, ext)
        result.source_path = filename
        return result

    # ------------------------------------------------------------------
    # Private dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, data: bytes, ext: str) -> LoadResult:
        handlers = {
            ".txt": self._load_txt,
            ".pdf": self._load_pdf,
            ".docx": self._load_docx,
        }
        result = handlers[ext](data)
        result.format = ext.lstrip(".")
        result.char_count = len(result.text)
        for warning in result.warnings:
            logger.warning("%s: %s", ext, warning)
        return result

    # ------------------------------------------------------------------
    # Format-specific loaders
    # ------------------------------------------------------------------

    @staticmethod
    def _load_txt(data: bytes) -> LoadResult:
        for encoding in ("utf-8", "cp1252"):
            try:
                return LoadResult(text=data.decode(encoding))
            except UnicodeDecodeError:
                continue
        return LoadResult(
            text=data.decode("utf-8", errors="replace"),
            warnings=["Encoding detection fell back to utf-8 with replacements"],
        )

    @staticmethod
    def _load_pdf(data: bytes) -> LoadResult:
        import pdfplumber

        warnings: list[str] = []
        pages: list[PageText] = []

        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for number, page in enumerate(pdf.pages, start=1):
                    pages.append(PageText(page_number=number, full_text=page.extract_text() or ""))
        except Exception as exc:
            warnings.append(f"PDF extraction error: {exc}")
            return LoadResult(text="", warnings=warnings)

        full_text = "\n\n".join(p.full_text for p in pages)
        if not full_text.strip():
            warnings.append("PDF contains no extractable text (may be scanned/image-only)")

        return LoadResult(
            text=full_text,
            pages=pages,
            page_count=len(pages),
            warnings=warnings,
        )

    @staticmethod
    def _load_docx(data: bytes) -> LoadResult:
        from docx import Document

        try:
            doc = Document(io.BytesIO(data))
            paragraphs = [p.text for p in doc.paragraphs if p.text.strip()]
        except Exception as exc:
            return LoadResult(text="", warnings=[f"DOCX extraction error: {exc}"])

        return LoadResult(text="\n\n".join(paragraphs))
