"""
analyzer/similarity.py — miary podobieństwa i diff.

Miary:
  approx_similarity(a, b)         rapidfuzz.fuzz.ratio / 100 (Indel: 2·LCS / (|a|+|b|))
  word_similarity(ref, cand)      udział tokenów referencji obecnych w kandydacie
  sentence_similarity(ref, cand)  średnia najlepszych dopasowań zdań ≥ 0.75
  shingle_overlap(ref, cand, k)   Jaccard zbiorów k-gramów tokenów

Wszystkie miary są w [0, 1]; dwa puste wejścia → 1, jedno puste → 0.
"""

from __future__ import annotations

import difflib
import re
from collections.abc import Iterable

from rapidfuzz import fuzz

from .config import (
    DIFF_CONTEXT,
    DIFF_MAX_LINES,
    DIFF_TRUNCATED_MARKER,
    SENTENCE_MATCH_THRESHOLD,
    SHINGLE_SIZE,
)

_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE   = re.compile(r"[^\w\s]")
_NON_TOKEN_RE  = re.compile(r"[^a-z0-9\s-]")


# ---------------------------------------------------------------------------
# Normalizacja
# ---------------------------------------------------------------------------

def normalize_whitespace(text: str) -> str:
    """Escape'y Markdown (\\- , \\\\) i ciągi białych znaków → pojedyncza spacja."""
    text = text.replace("\\-", "-").replace("\\\\", "\\")
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_sentence(sentence: str) -> str:
    """Małe litery, bez interpunkcji — klucz porównań zdań."""
    return _NON_WORD_RE.sub("", sentence.strip().lower())


def tokenize_words(text: str) -> list[str]:
    return _NON_TOKEN_RE.sub(" ", text.lower()).split()


def normalize_key(value: str) -> str:
    return value.strip().lower()


# ---------------------------------------------------------------------------
# Miary
# ---------------------------------------------------------------------------

def approx_similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return fuzz.ratio(a, b) / 100.0


def word_similarity(reference_text: str, candidate_text: str) -> float:
    ref_tokens = tokenize_words(reference_text)
    cand_tokens = tokenize_words(candidate_text)
    if not ref_tokens and not cand_tokens:
        return 1.0
    if not ref_tokens or not cand_tokens:
        return 0.0
    cand_set = set(cand_tokens)
    matched = sum(1 for token in ref_tokens if token in cand_set)
    return round(matched / len(ref_tokens), 4)


def sentence_similarity(reference: list[str], candidate: list[str]) -> float:
    """
    Dla każdego zdania referencji bierze najlepsze podobieństwo do zdań
    kandydata; liczą się tylko dopasowania ≥ SENTENCE_MATCH_THRESHOLD.
    Suma dzielona przez liczbę zdań referencji.
    """
    if not reference and not candidate:
        return 1.0
    if not reference or not candidate:
        return 0.0
    cand_norm = [c.lower().strip() for c in candidate]
    total = 0.0
    for ref_sentence in reference:
        ref_norm = ref_sentence.lower().strip()
        best = max(approx_similarity(ref_norm, c) for c in cand_norm)
        if best >= SENTENCE_MATCH_THRESHOLD:
            total += best
    return round(total / len(reference), 4)


def shingles(tokens: list[str], size: int = SHINGLE_SIZE) -> set[str]:
    if not tokens:
        return set()
    if len(tokens) <= size:
        return {" ".join(tokens)}
    return {" ".join(tokens[i:i + size]) for i in range(len(tokens) - size + 1)}


def shingle_overlap(reference_text: str, candidate_text: str, size: int = SHINGLE_SIZE) -> float:
    ref_tokens = tokenize_words(reference_text)
    cand_tokens = tokenize_words(candidate_text)
    if not ref_tokens and not cand_tokens:
        return 1.0
    ref_set = shingles(ref_tokens, size)
    cand_set = shingles(cand_tokens, size)
    union = ref_set | cand_set
    if not union:
        return 0.0
    return round(len(ref_set & cand_set) / len(union), 4)


# ---------------------------------------------------------------------------
# Listy nazw (sekcje, przypisy)
# ---------------------------------------------------------------------------

def unique_list(values: Iterable[str]) -> list[str]:
    """Dedup bez wielkości liter i białych znaków; zachowuje pierwsze wystąpienie."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = normalize_key(value)
        if key in seen:
            continue
        seen.add(key)
        result.append(value.strip())
    return result


def difference(a: list[str], b: list[str]) -> list[str]:
    """Elementy a nieobecne w b (porównanie bez wielkości liter)."""
    keys_b = {normalize_key(v) for v in b}
    return [v for v in a if normalize_key(v) not in keys_b]


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------

def diff_sample(reference_lines: list[str], candidate_lines: list[str], topic_id: str) -> list[str]:
    """Unified diff (kontekst 2 linie) przycięty do DIFF_MAX_LINES."""
    lines = list(difflib.unified_diff(
        reference_lines,
        candidate_lines,
        fromfile=f"{topic_id}-reference",
        tofile=f"{topic_id}-candidate",
        n=DIFF_CONTEXT,
        lineterm="",
    ))
    if len(lines) > DIFF_MAX_LINES:
        return [*lines[:DIFF_MAX_LINES], DIFF_TRUNCATED_MARKER]
    return lines
