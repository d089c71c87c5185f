"""Shared fixtures for tests: synthetic legal documents, no network calls."""

from __future__ import annotations

import hashlib
import textwrap
from pathlib import Path

import pytest

from legal_ingest.chunking.schemas import PageText
from legal_ingest.embeddings.base import EmbeddingProvider
from legal_ingest.errors import EmbeddingError, RateLimitError

DIM = 16


# ---------------------------------------------------------------------------
# Mock embedding providers
# ---------------------------------------------------------------------------


class HashEmbedder(EmbeddingProvider):
    """Deterministic embeddings derived from a SHA-256 of the text."""

    def __init__(self, dimension: int = DIM):
        self._dim = dimension
        self.calls: list[str] = []

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        h = hashlib.sha256(text.encode()).digest()
        return [(h[i % len(h)] / 255.0) * 2 - 1 for i in range(self._dim)]

    @property
    def dimension(self) -> int:
        return self._dim


class ScriptedProvider(HashEmbedder):
    """Raises the scripted errors in order, then embeds normally."""

    def __init__(self, errors: list[Exception], dimension: int = DIM):
        super().__init__(dimension)
        self._errors = list(errors)

    def embed_text(self, text: str) -> list[float]:
        if self._errors:
            self.calls.append(text)
            raise self._errors.pop(0)
        return super().embed_text(text)


class FailingProvider(HashEmbedder):
    """Fails every request."""

    def __init__(self, error: Exception | None = None, dimension: int = DIM):
        super().__init__(dimension)
        self._error = error or EmbeddingError("provider down", status_code=500)

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        raise self._error


@pytest.fixture
def hash_embedder() -> HashEmbedder:
    return HashEmbedder()


@pytest.fixture
def rate_limit_once() -> ScriptedProvider:
    return ScriptedProvider([RateLimitError()])


# ---------------------------------------------------------------------------
# Synthetic document content
# ---------------------------------------------------------------------------


@pytest.fixture
def settlement_text() -> str:
    """A few thousand characters of sentence-structured legal prose."""
    paragraph = textwrap.dedent("""\
        The parties agree that the marital residence located at 14 Elm Street
        shall be sold within ninety days of the entry of this order. The net
        proceeds of the sale shall be divided equally between the petitioner
        and the respondent after payment of the outstanding mortgage balance.
        Each party shall bear their own attorney fees incurred in connection
        with this proceeding.
    """)
    return "\n".join([paragraph] * 9)


@pytest.fixture
def pages(settlement_text: str) -> list[PageText]:
    return [
        PageText(page_number=1, full_text=settlement_text[:1500]),
        PageText(page_number=2, full_text="   \n  "),
        PageText(page_number=3, full_text=settlement_text[:2500]),
    ]


@pytest.fixture
def sample_txt_file(tmp_path: Path, settlement_text: str) -> Path:
    p = tmp_path / "Smith_Divorce_2023.txt"
    p.write_text(settlement_text, encoding="utf-8")
    return p


@pytest.fixture
def sample_pdf_file(tmp_path: Path) -> Path:
    """Create a minimal two-page PDF using fpdf2."""
    from fpdf import FPDF

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)

    pdf.add_page()
    pdf.set_font("Helvetica", size=12)
    pdf.multi_cell(0, 10, text=(
        "Settlement Agreement\n\n"
        "This agreement is entered into by Jane Smith and John Smith "
        "to resolve all claims arising from the dissolution of marriage."
    ))

    pdf.add_page()
    pdf.multi_cell(0, 10, text=(
        "Custody\n\n"
        "The parties shall share joint legal custody of the minor child, "
        "with primary physical custody awarded to the petitioner."
    ))

    p = tmp_path / "Smith_Settlement.pdf"
    pdf.output(str(p))
    return p


@pytest.fixture
def sample_docx_file(tmp_path: Path) -> Path:
    from docx import Document

    doc = Document()
    doc.add_heading("Lease Agreement", level=1)
    doc.add_paragraph(
        "The tenant shall pay monthly rent of $2,400 on the first day of "
        "each calendar month."
    )
    doc.add_paragraph("")
    doc.add_paragraph("The landlord is responsible for structural repairs.")

    p = tmp_path / "Jones-Lease.docx"
    doc.save(str(p))
    return p
