"""
analyzer/config.py — stałe analizatora.

Progi są skalibrowane pod rapidfuzz.fuzz.ratio (similarity.approx_similarity)
— zmiana miary podobieństwa wymaga ponownej kalibracji.

Zmienna środowiskowa:
  WDRIFT_CACHE_TTL_HOURS   nadpisuje CACHE_TTL_HOURS (liczba całkowita)
"""

from __future__ import annotations

import os

ANALYZER_VERSION = "wikidrift-analyzer/1.0"

CACHE_TTL_HOURS = 72
SHINGLE_SIZE = 4

# Zdania
REWORD_THRESHOLD = 0.65
MIN_SENTENCE_LENGTH = 20
SENTENCE_MATCH_THRESHOLD = 0.75
HALLUCINATION_BAND = (0.15, 0.6)

# Alignment
SECTION_ALIGN_THRESHOLD = 0.7
CLAIM_ALIGN_THRESHOLD = 0.65

# Rozbieżności liczbowe / encje / claimy
NUMERIC_REPORT_THRESHOLD = 0.05
NUMERIC_ERROR_THRESHOLD = 0.2
ENTITY_ERROR_MIN_DIFF = 2
SEMANTIC_DIVERGENCE_MAX = 0.3

# Diff / highlights
DIFF_CONTEXT = 2
DIFF_MAX_LINES = 120
DIFF_TRUNCATED_MARKER = "... (diff truncated)"
HIGHLIGHT_WINDOW = 3

# Hybrydowy pass klasyfikatora
SEMANTIC_BATCH_SIZE = 5
SEMANTIC_SAMPLE_RATIO = 0.1
SEMANTIC_SAMPLE_CAP = 50
SEMANTIC_CONFIRM_THRESHOLD = 0.5
SEMANTIC_NEUTRAL_THRESHOLD = 0.7

# Progi etykiet pewności: (sentence_similarity, ngram_overlap)
CLASSIFICATION_THRESHOLDS = {
    "aligned": (0.94, 0.88),
    "possible": (0.85, 0.78),
}

META_SECTION_HEADINGS = frozenset({
    "references",
    "external links",
    "notes",
    "bibliography",
    "sources",
    "further reading",
    "see also",
    "citations",
    "footnotes",
})

SOURCE_NOTE = "Analyzed text reconstructed from structured sections, not raw article text"

_TTL_ENV = "WDRIFT_CACHE_TTL_HOURS"


def cache_ttl_hours() -> int:
    """TTL cache analizy; niepoprawna wartość zmiennej → domyślne 72 h."""
    raw = os.getenv(_TTL_ENV, "").strip()
    if not raw:
        return CACHE_TTL_HOURS
    try:
        value = int(raw)
    except ValueError:
        return CACHE_TTL_HOURS
    return value if value > 0 else CACHE_TTL_HOURS
