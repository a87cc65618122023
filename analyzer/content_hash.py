"""analyzer/content_hash.py — klucz cache analizy."""

from __future__ import annotations

import hashlib

from .config import ANALYZER_VERSION


def compute_content_hash(reference_text: str, candidate_text: str, version: str = ANALYZER_VERSION) -> str:
    """SHA-256 (hex) z tekstów obu stron i wersji analizatora, rozdzielonych NUL."""
    digest = hashlib.sha256()
    for part in (reference_text, candidate_text, version):
        digest.update(part.encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()
