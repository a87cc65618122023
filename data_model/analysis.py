"""
data_model/analysis.py — wynik porównania dwóch artykułów (AnalysisPayload).

Payload jest tworzony od nowa przy każdym uruchomieniu analizatora
i zapisywany jako `analysis/<topic>.json` przez warstwę CLI.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .article import Claim, NumberValue
from .common import (
    ClaimId,
    ConfidenceLabel,
    DiscrepancyCategory,
    DiscrepancyType,
    HighlightTag,
    SectionId,
    Side,
)


# ---------------------------------------------------------------------------
# Rozbieżności / zdarzenia
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Evidence:
    """Fragmenty tekstu po obu stronach, na których opiera się rozbieżność."""
    reference: str | None = None
    candidate: str | None = None


@dataclass(slots=True)
class DiscrepancyRecord:
    """
    Ujednolicony rekord rozbieżności.

    Ten sam typ opisuje rozbieżności strukturalne (brakujące zdania, sekcje,
    przypisy) oraz zdarzenia bias / hallucination / factual_error.
    """
    type: DiscrepancyType
    description: str
    evidence: Evidence
    severity: int | None = None
    category: DiscrepancyCategory | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(slots=True)
class RewordedPair:
    reference: str
    candidate: str
    similarity: float


# ---------------------------------------------------------------------------
# Alignment + detektory rozbieżności
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SectionRef:
    section_id: SectionId
    heading: str


@dataclass(slots=True)
class SectionAlignment:
    reference: SectionRef | None
    candidate: SectionRef | None
    similarity: float


@dataclass(slots=True)
class ClaimAlignment:
    reference: Claim | None
    candidate: Claim | None
    similarity: float


@dataclass(slots=True)
class NumericDiscrepancy:
    reference_claim_id: ClaimId
    candidate_claim_id: ClaimId
    reference_value: NumberValue
    candidate_value: NumberValue
    relative_difference: float
    description: str


@dataclass(slots=True)
class EntityDiscrepancy:
    reference_claim_id: ClaimId
    candidate_claim_id: ClaimId
    reference_entities: list[str]
    candidate_entities: list[str]
    description: str


@dataclass(slots=True)
class BiasMetrics:
    subjectivity_delta: float
    polarity_delta: float
    loaded_terms_reference: dict[str, int] = field(default_factory=dict)
    loaded_terms_candidate: dict[str, int] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Ocena / podsumowanie
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ConfidenceSummary:
    label: ConfidenceLabel
    score: float
    rationale: list[str] = field(default_factory=list)


@dataclass(slots=True)
class HighlightSnippet:
    source: Side
    tag: HighlightTag
    text: str
    preview: str


@dataclass(slots=True)
class Highlights:
    missing: list[HighlightSnippet] = field(default_factory=list)
    extra: list[HighlightSnippet] = field(default_factory=list)


@dataclass(slots=True)
class SimilarityRatio:
    word: float
    sentence: float


@dataclass(slots=True)
class AnalysisStats:
    reference_char_count: int
    candidate_char_count: int
    similarity_ratio: SimilarityRatio
    reference_sentence_count: int
    candidate_sentence_count: int
    missing_sentence_total: int
    extra_sentence_total: int
    reworded_sentence_count: int
    truly_missing_count: int
    agreement_count: int


@dataclass(slots=True)
class CitationDiff:
    missing: list[str] = field(default_factory=list)
    extra: list[str] = field(default_factory=list)


@dataclass(slots=True)
class AnalysisWindow:
    reference_analyzed_chars: int
    candidate_analyzed_chars: int
    source_note: str


@dataclass(slots=True)
class AnalysisMeta:
    analyzer_version: str
    content_hash: str
    generated_at: str            # ISO 8601, UTC
    cache_ttl_hours: int
    shingle_size: int
    analysis_window: AnalysisWindow
    semantic_bias: bool = False


# ---------------------------------------------------------------------------
# AnalysisPayload
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class AnalysisPayload:
    topic_id: str
    title: str
    stats: AnalysisStats
    ngram_overlap: float
    missing_sentences: list[str]
    extra_sentences: list[str]
    reworded_sentences: list[RewordedPair]
    truly_missing_sentences: list[str]
    agreed_sentences: list[str]
    sections_missing: list[str]
    sections_extra: list[str]
    citations: CitationDiff
    diff_sample: list[str]
    discrepancies: list[DiscrepancyRecord]
    bias_events: list[DiscrepancyRecord]
    hallucination_events: list[DiscrepancyRecord]
    factual_errors: list[DiscrepancyRecord]
    confidence: ConfidenceSummary
    highlights: Highlights
    meta: AnalysisMeta
    section_alignment: list[SectionAlignment]
    claim_alignment: list[ClaimAlignment]
    numeric_discrepancies: list[NumericDiscrepancy]
    entity_discrepancies: list[EntityDiscrepancy]
    bias_metrics: BiasMetrics


def payload_to_dict(payload: AnalysisPayload) -> dict[str, Any]:
    return asdict(payload)
