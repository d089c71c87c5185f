"""Lambda handler for document processing: triggered by API Gateway.

Routes:
    POST /process-document    insert a document and embed its chunks
    POST /update-embeddings   re-embed a stored document

Thin wrapper around IngestPipeline. All business logic lives in src/legal_ingest/.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from legal_ingest.chunking.schemas import PageText
from legal_ingest.config import load_settings
from legal_ingest.documents.loader import DocumentLoader
from legal_ingest.embeddings.factory import build_embedding_client
from legal_ingest.errors import AuthenticationError, IngestError
from legal_ingest.pipeline.ingest import IngestPipeline
from legal_ingest.pipeline.schemas import IngestRequest
from legal_ingest.store.factory import get_store

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

# Initialize outside handler for Lambda warm-start reuse
_pipeline: IngestPipeline | None = None
_loader: DocumentLoader | None = None


def _get_loader() -> DocumentLoader:
    global _loader
    if _loader is None:
        _loader = DocumentLoader.from_settings(load_settings().ingestion)
    return _loader


def _get_pipeline() -> IngestPipeline:
    global _pipeline
    if _pipeline is not None:
        return _pipeline

    settings = load_settings()
    client = build_embedding_client(settings.embedding)
    if settings.store.backend == "faiss":
        store = get_store("faiss", dimension=client.dimension)
    else:
        store = get_store(settings.store.backend)
    _pipeline = IngestPipeline.from_settings(settings, embedding_client=client, store=store)
    return _pipeline


def _response(status: int, payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload),
    }


def _caller_id(event: dict[str, Any]) -> str | None:
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or {}
    return claims.get("sub") or authorizer.get("principalId")


def _parse_pages(raw: Any) -> list[PageText] | None:
    if not raw:
        return None
    if not isinstance(raw, list) or not all(isinstance(p, dict) for p in raw):
        raise IngestError("'pages' must be a list of objects")
    return [
        PageText(page_number=int(p["pageNumber"]), full_text=_text_field(p, "fullText"))
        for p in raw
    ]


def _text_field(body: dict[str, Any], name: str) -> str:
    value = body.get(name) or ""
    if not isinstance(value, str):
        raise IngestError(f"'{name}' must be a string")
    return value


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle API Gateway request: authenticate, run pipeline, return JSON."""
    try:
        body = json.loads(event.get("body") or "{}")
    except (json.JSONDecodeError, TypeError):
        return _response(400, {"error": "Request body must be JSON"})
    if not isinstance(body, dict):
        return _response(400, {"error": "Request body must be a JSON object"})

    try:
        user_id = _caller_id(event)
        if not user_id:
            raise AuthenticationError("User not authenticated")

        pipeline = _get_pipeline()

        if event.get("path", "").endswith("/update-embeddings"):
            document_id = body.get("documentId")
            if not document_id:
                raise IngestError("Document ID is required")
            result = pipeline.reembed_document(document_id)
        else:
            file_name = _text_field(body, "fileName")
            if not file_name:
                raise IngestError("Missing 'fileName' field")
            content = _text_field(body, "content")
            file_size = int(body.get("fileSize") or len(content.encode("utf-8")))
            _get_loader().check_upload(file_name, file_size)
            result = pipeline.ingest_document(IngestRequest(
                file_name=file_name,
                content=content,
                file_type=_text_field(body, "fileType"),
                file_size=file_size,
                title=_text_field(body, "title") or None,
                pages=_parse_pages(body.get("pages")),
                user_id=user_id,
            ))
    except AuthenticationError as exc:
        logger.error("Rejected request: %s", exc)
        return _response(401, {"error": str(exc)})
    except (IngestError, KeyError, ValueError, TypeError, AttributeError) as exc:
        logger.error("Error processing document: %s", exc)
        return _response(400, {"error": str(exc)})

    return _response(200, result.to_dict())
