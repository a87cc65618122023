"""
article_parser/sentence_splitter.py — podział tekstu na zdania z filtrami.

split_sentences(text) -> list[SentenceSpan]

Granica zdania: [.!?] (plus ewentualny cudzysłów/nawias zamykający), po
którym następuje biały znak i wielka litera, albo koniec tekstu.
Offsety odnoszą się do przekazanego tekstu — parser dopasowuje po nich
markery przypisów i mediów.

Odrzucane fragmenty (w tej kolejności):
  - krótsze niż 5 znaków albo złożone z samej interpunkcji
  - mniej niż 2 słowa zawierające znaki alfanumeryczne
  - znaki alfanumeryczne + spacje < 50% długości
  - zaczynające się od spójnika/przyimka (until/from/and/or/but)
  - "See ..." oraz linie z samym rozszerzeniem pliku (ogg, jpg, ...)
  - w całości wielkimi literami (wyciek nagłówka/podpisu)
  - "Retrieved/Archived/Accessed ..." i cytowania "Autor, A. (Month D, YYYY)"
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_BOUNDARY_RE = re.compile(r"[.!?]+['\"”’)\]]*(?=\s+[\"“(]?[A-Z]|\s*$)")

_ONLY_PUNCT_RE       = re.compile(r"^[,;:\s.!?]+$")
_HAS_ALNUM_RE        = re.compile(r"[a-zA-Z0-9]")
_NON_ALNUM_SPACE_RE  = re.compile(r"[^a-zA-Z0-9\s]")
_DANGLING_START_RE   = re.compile(r"^(until|from|and|or|but)\s+", re.IGNORECASE)
_SEE_ALSO_RE         = re.compile(r"^See\s+", re.IGNORECASE)
_MEDIA_EXT_RE        = re.compile(r"^(ogg|jpg|png|svg|gif|webm|mp4)\s*[,;.]", re.IGNORECASE)
_RETRIEVED_RE        = re.compile(r"^(Retrieved|Archived|Accessed)\s+", re.IGNORECASE)
_CITATION_LINE_RE    = re.compile(r"^\w+,\s+\w+\.?\s+\(\w+\s+\d+,\s+\d{4}\)")

MIN_SENTENCE_CHARS = 5
MIN_WORDS = 2
MIN_ALNUM_RATIO = 0.5


@dataclass(frozen=True, slots=True)
class SentenceSpan:
    text: str
    start_offset: int    # indeks pierwszego znaku w tekście wejściowym
    end_offset: int      # indeks tuż za ostatnim znakiem


def is_rejected(sentence: str) -> bool:
    """True gdy fragment nie jest zdaniem treści (szum, nagłówek, cytowanie)."""
    if len(sentence) < MIN_SENTENCE_CHARS:
        return True
    if _ONLY_PUNCT_RE.match(sentence):
        return True
    words = [w for w in sentence.split() if _HAS_ALNUM_RE.search(w)]
    if len(words) < MIN_WORDS:
        return True
    alnum_count = len(_NON_ALNUM_SPACE_RE.sub("", sentence))
    if alnum_count < len(sentence) * MIN_ALNUM_RATIO:
        return True
    if _DANGLING_START_RE.match(sentence):
        return True
    if _SEE_ALSO_RE.match(sentence):
        return True
    if _MEDIA_EXT_RE.match(sentence):
        return True
    if sentence.isupper() and len(sentence) > 3:
        return True
    if _RETRIEVED_RE.match(sentence) or _CITATION_LINE_RE.match(sentence):
        return True
    return False


def _raw_segments(text: str) -> list[tuple[int, int]]:
    segments: list[tuple[int, int]] = []
    start = 0
    for m in _BOUNDARY_RE.finditer(text):
        segments.append((start, m.end()))
        start = m.end()
    if text[start:].strip():
        segments.append((start, len(text)))
    return segments


def split_sentences(text: str) -> list[SentenceSpan]:
    spans: list[SentenceSpan] = []
    for seg_start, seg_end in _raw_segments(text):
        raw = text[seg_start:seg_end]
        trimmed = raw.strip()
        if not trimmed or is_rejected(trimmed):
            continue
        leading = len(raw) - len(raw.lstrip())
        start = seg_start + leading
        spans.append(SentenceSpan(trimmed, start, start + len(trimmed)))
    return spans
