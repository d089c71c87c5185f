"""CLI entry point: Typer app for legal-ingest commands.

Usage:
    legal-ingest ingest Smith_Divorce_2023.pdf --store faiss
    legal-ingest reembed 6f1c2d3e-... --store faiss
    legal-ingest status
"""

from __future__ import annotations

import getpass
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

app = typer.Typer(
    name="legal-ingest",
    help="Legal document ingestion: chunk, embed, store.",
    no_args_is_help=True,
)

console = Console()

_INGEST_PATH = typer.Argument(..., help="Path to the document to ingest")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build(store_backend: str | None, embedding_provider: str | None):
    """Return (settings, store, pipeline) for the requested backends."""
    from legal_ingest.config import load_settings
    from legal_ingest.embeddings.factory import build_embedding_client
    from legal_ingest.pipeline.ingest import IngestPipeline
    from legal_ingest.store.factory import get_store

    settings = load_settings()
    if embedding_provider:
        settings.embedding.provider = embedding_provider
    if store_backend:
        settings.store.backend = store_backend

    client = build_embedding_client(settings.embedding)

    if settings.store.backend == "faiss":
        store = get_store("faiss", dimension=client.dimension)
        if (Path(settings.store.path) / "records.json").exists():
            store.load(settings.store.path)
    else:
        store = get_store(settings.store.backend)

    pipeline = IngestPipeline.from_settings(settings, embedding_client=client, store=store)
    return settings, store, pipeline


def _login_name() -> str:
    from legal_ingest.errors import AuthenticationError

    try:
        return getpass.getuser()
    except (OSError, KeyError) as exc:
        raise AuthenticationError("Cannot determine the current user; pass --user") from exc


def _persist(settings, store) -> None:
    if settings.store.backend == "faiss":
        store.save(settings.store.path)


@app.command()
def ingest(
    path: Annotated[Path, _INGEST_PATH],
    title: str | None = typer.Option(
        None, "--title", help="Document title (defaults to file name)",
    ),
    embedding_provider: str | None = typer.Option(
        None, "--embedding", "-e", help="Embedding provider",
    ),
    store_backend: str | None = typer.Option(
        None, "--store", "-s", help="Store backend",
    ),
    user: str | None = typer.Option(
        None, "--user", "-u", help="Document owner (default: login name)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Extract, chunk and embed a document."""
    from legal_ingest.config import load_settings
    from legal_ingest.documents.loader import MIME_TYPES, DocumentLoader
    from legal_ingest.errors import IngestError
    from legal_ingest.pipeline.schemas import IngestRequest

    _configure_logging(verbose)

    loader = DocumentLoader.from_settings(load_settings().ingestion)
    try:
        loaded = loader.load_file(path)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc
    for w in loaded.warnings:
        console.print(f"  [yellow]Warning:[/] {w}")

    try:
        user = user or _login_name()
        settings, store, pipeline = _build(store_backend, embedding_provider)
        result = pipeline.ingest_document(IngestRequest(
            file_name=path.name,
            content=loaded.text,
            file_type=MIME_TYPES.get(path.suffix.lower(), ""),
            file_size=path.stat().st_size,
            title=title,
            pages=loaded.pages or None,
            user_id=user,
        ))
    except IngestError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    _persist(settings, store)

    console.print(f"\n[bold green]Ingested:[/] {path.name}")
    console.print(f"  Document: {result.document_id}")
    console.print(f"  Chunks attempted: {result.chunks_attempted}")
    console.print(f"  Embedded: {result.chunks_succeeded}")
    console.print(f"  {result.message}")


@app.command()
def reembed(
    document_id: str = typer.Argument(..., help="Stored document id"),
    embedding_provider: str | None = typer.Option(
        None, "--embedding", "-e", help="Embedding provider",
    ),
    store_backend: str | None = typer.Option(
        None, "--store", "-s", help="Store backend",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Delete a document's chunks and embed its stored content again."""
    from legal_ingest.errors import IngestError

    _configure_logging(verbose)

    try:
        settings, store, pipeline = _build(store_backend, embedding_provider)
        result = pipeline.reembed_document(document_id)
    except IngestError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    _persist(settings, store)

    console.print(f"\n[bold green]{result.message}[/]")
    console.print(f"  Embedded: {result.chunks_succeeded}/{result.chunks_attempted}")


@app.command()
def status() -> None:
    """Show system status (providers, stores, chunking config)."""
    from legal_ingest.config import load_settings
    from legal_ingest.embeddings.factory import available_providers
    from legal_ingest.store.factory import available_stores

    settings = load_settings()

    console.print("\n[bold green]legal-doc-ingest[/] v0.1.0\n")

    table = Table(title="Available Components")
    table.add_column("Layer", style="cyan")
    table.add_column("Available")

    table.add_row("Embedding Providers", ", ".join(available_providers()))
    table.add_row("Stores", ", ".join(available_stores()))
    table.add_row(
        "Chunking",
        f"size={settings.chunking.chunk_size} overlap={settings.chunking.overlap} "
        f"min={settings.chunking.min_chunk_length}",
    )
    table.add_row(
        "Configured",
        f"{settings.embedding.provider}/{settings.embedding.model} -> {settings.store.backend}",
    )

    console.print(table)


if __name__ == "__main__":
    app()
