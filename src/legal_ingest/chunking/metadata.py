"""Best-effort client / matter labels from a file name.

Rule order is significant: the underscore rule wins over the hyphen rule,
which wins over the dot rule.
"""

from __future__ import annotations

import re

from legal_ingest.chunking.schemas import ChunkMetadata

_CLIENT_PATTERNS = [
    re.compile(r"^([^_]+)_"),
    re.compile(r"^([^-]+)-"),
    re.compile(r"^([^.]+)\."),
]

MATTER_TYPES = (
    "divorce",
    "custody",
    "settlement",
    "contract",
    "agreement",
    "estate",
    "lease",
    "employment",
)


def extract_client(file_name: str) -> str | None:
    for pattern in _CLIENT_PATTERNS:
        m = pattern.match(file_name)
        if m:
            client = re.sub(r"[_-]", " ", m.group(1)).strip()
            if client:
                return client
    return None


def extract_matter(file_name: str) -> str | None:
    lower = file_name.lower()
    for term in MATTER_TYPES:
        if term in lower:
            return term
    return None


def extract_metadata(file_name: str) -> ChunkMetadata:
    """Build the metadata shared by every chunk of *file_name*."""
    return ChunkMetadata(
        document_name=file_name,
        client=extract_client(file_name),
        matter=extract_matter(file_name),
    )
