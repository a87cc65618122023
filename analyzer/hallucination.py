"""
analyzer/hallucination.py — spekulatywny język w zdaniach dodanych przez kandydata.

Zdanie jest zgłaszane gdy zawiera znacznik niepewności ORAZ
  - referencja nie ma żadnych claimów (> MIN_SENTENCE_LENGTH znaków), albo
  - któryś claim referencji ma podobieństwo w przedziale (0.15, 0.6):
    "prawdopodobnie o tym samym fakcie, ale nie do potwierdzenia".
"""

from __future__ import annotations

from data_model.analysis import DiscrepancyRecord, Evidence
from data_model.article import Claim
from data_model.common import DiscrepancyCategory, DiscrepancyType

from .config import HALLUCINATION_BAND, MIN_SENTENCE_LENGTH
from .similarity import approx_similarity, normalize_sentence

SPECULATIVE_MARKERS = (
    "apparently",
    "reportedly",
    "rumored",
    "rumoured",
    "supposedly",
    "allegedly",
    "unverified",
    "unconfirmed",
    "citation needed",
    "claimed to be",
    "claims to be",
    "some say",
    "some believe",
    "it is said",
    "it is believed",
    "according to rumors",
    "according to rumours",
    "may have",
    "might have",
    "possibly",
    "perhaps",
    "uncertain",
)


def has_speculative_language(sentence: str) -> bool:
    lowered = sentence.lower()
    return any(marker in lowered for marker in SPECULATIVE_MARKERS)


def detect_hallucinations(extra_sentences: list[str], reference_claims: list[Claim]) -> list[DiscrepancyRecord]:
    low, high = HALLUCINATION_BAND
    facts = [
        fact for fact in (normalize_sentence(c.text) for c in reference_claims)
        if len(fact) > MIN_SENTENCE_LENGTH
    ]
    events: list[DiscrepancyRecord] = []
    for sentence in extra_sentences:
        if not has_speculative_language(sentence):
            continue
        normalized = normalize_sentence(sentence)
        ambiguous = any(low < approx_similarity(normalized, fact) < high for fact in facts)
        if facts and not ambiguous:
            continue
        events.append(DiscrepancyRecord(
            type=DiscrepancyType.HALLUCINATION,
            description="Candidate uses speculative or unverified language.",
            evidence=Evidence(candidate=sentence),
            severity=4,
            category=DiscrepancyCategory.HALLUCINATION,
            tags=["speculative_language"],
        ))
    return events
