"""
analyzer/bias_metrics.py — proste miary tonu (heurystyka słownikowa).

  subjectivity = (pozytywne + negatywne) / liczba tokenów
  polarity     = (pozytywne − negatywne) / liczba tokenów
  delty        = kandydat − referencja, zaokrąglone do 3 miejsc
"""

from __future__ import annotations

import re

from data_model.analysis import BiasMetrics

LOADED_TERMS = (
    "alarmist",
    "agenda",
    "bias",
    "woke",
    "skeptic",
    "critics say",
    "so-called",
    "mainstream media",
    "propaganda",
    "controversial",
    "exaggerated",
    "allegedly",
    "reportedly",
    "rumored",
)
POSITIVE_WORDS = frozenset({"reliable", "credible", "scientific", "robust", "well-established", "trusted"})
NEGATIVE_WORDS = frozenset({"fraud", "hoax", "fake", "biased", "corrupt", "politicized"})

_NON_TOKEN_RE = re.compile(r"[^a-z0-9\s'-]")
_LOADED_RES = {
    term: re.compile(r"\b" + re.escape(term).replace(r"\ ", r"\s+") + r"\b", re.IGNORECASE)
    for term in LOADED_TERMS
}


def _tokens(text: str) -> list[str]:
    return _NON_TOKEN_RE.sub(" ", text.lower()).split()


def polarity(tokens: list[str]) -> float:
    score = sum(1 for t in tokens if t in POSITIVE_WORDS) - sum(1 for t in tokens if t in NEGATIVE_WORDS)
    return score / max(len(tokens), 1)


def subjectivity(tokens: list[str]) -> float:
    hits = sum(1 for t in tokens if t in POSITIVE_WORDS or t in NEGATIVE_WORDS)
    return hits / max(len(tokens), 1)


def count_loaded_terms(text: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for term, regex in _LOADED_RES.items():
        found = len(regex.findall(text))
        if found:
            counts[term] = found
    return counts


def compute_bias_metrics(reference_text: str, candidate_text: str) -> BiasMetrics:
    ref_tokens = _tokens(reference_text)
    cand_tokens = _tokens(candidate_text)
    return BiasMetrics(
        subjectivity_delta=round(subjectivity(cand_tokens) - subjectivity(ref_tokens), 3),
        polarity_delta=round(polarity(cand_tokens) - polarity(ref_tokens), 3),
        loaded_terms_reference=count_loaded_terms(reference_text),
        loaded_terms_candidate=count_loaded_terms(candidate_text),
    )
