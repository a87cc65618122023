"""
Wspólne enumy i aliasy typów używane przez article, analysis i topics.

Wszystkie enumy są StrEnum — serializują się do JSON jako zwykłe stringi
(snake_case), dzięki czemu snapshoty pozostają zgodne z formatem plików.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Aliasy typów
# ---------------------------------------------------------------------------

# np. "c12"
type ClaimId = str
# np. "r_nasa", "r_auto_3", "r_link_1", "grokipedia_citation_moon"
type CitationId = str
# np. "m_full-moon-jpg"
type MediaId = str
# np. "sec-history", "sec-history-2"
type SectionId = str


# ---------------------------------------------------------------------------
# Źródło / tryb parsowania
# ---------------------------------------------------------------------------

class SourceKind(StrEnum):
    """Rodzaj źródła artykułu."""
    WIKIPEDIA  = "wikipedia"
    GROKIPEDIA = "grokipedia"


class ParseMode(StrEnum):
    """Składnia wejściowa parsera."""
    WIKI     = "wiki"
    MARKDOWN = "markdown"


class Side(StrEnum):
    """Strona porównania: artykuł referencyjny albo kandydat."""
    REFERENCE = "reference"
    CANDIDATE = "candidate"


# ---------------------------------------------------------------------------
# Media / przypisy
# ---------------------------------------------------------------------------

class MediaType(StrEnum):
    IMAGE   = "image"
    AUDIO   = "audio"
    VIDEO   = "video"
    UNKNOWN = "unknown"


class MediaOrigin(StrEnum):
    INFOBOX = "infobox"
    BODY    = "body"


class ReferenceKind(StrEnum):
    """Znormalizowany typ przypisu (nazwa szablonu {{cite …}} lub 'web' dla linków)."""
    WEB     = "web"
    NEWS    = "news"
    JOURNAL = "journal"
    BOOK    = "book"
    REPORT  = "report"
    OTHER   = "other"

    @classmethod
    def from_template(cls, name: str) -> ReferenceKind:
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.OTHER


# ---------------------------------------------------------------------------
# Analiza
# ---------------------------------------------------------------------------

class DiscrepancyType(StrEnum):
    MISSING_CONTEXT  = "missing_context"
    ADDED_CLAIM      = "added_claim"
    SECTION_MISSING  = "section_missing"
    SECTION_EXTRA    = "section_extra"
    MISSING_CITATION = "missing_citation"
    ADDED_CITATION   = "added_citation"
    BIAS_SHIFT       = "bias_shift"
    HALLUCINATION    = "hallucination"
    FACTUAL_ERROR    = "factual_error"
    REWORDED_CLAIM   = "reworded_claim"


class DiscrepancyCategory(StrEnum):
    REWORDING     = "rewording"
    STRUCTURE     = "structure"
    CITATION      = "citation"
    BIAS          = "bias"
    HALLUCINATION = "hallucination"
    FACTUAL       = "factual"


class BiasCategoryId(StrEnum):
    """Kategorie słownika 'words to watch'."""
    PUFFERY              = "puffery"
    CONTENTIOUS_LABELS   = "contentious_labels"
    WEASEL_WORDS         = "weasel_words"
    EXPRESSIONS_OF_DOUBT = "expressions_of_doubt"
    EDITORIALIZING       = "editorializing"


class ConfidenceLabel(StrEnum):
    ALIGNED              = "aligned"
    POSSIBLE_DIVERGENCE  = "possible_divergence"
    SUSPECTED_DIVERGENCE = "suspected_divergence"


class HighlightTag(StrEnum):
    MISSING       = "missing"
    EXTRA         = "extra"
    BIAS          = "bias"
    HALLUCINATION = "hallucination"
