"""
analyzer/confidence.py — ocena niezależności kandydata i etykieta pewności.

score startuje od 1 − sentence_similarity i jest korygowany przez:
  - poziom podobieństwa zdań (kary za kopiowanie, premia za niezależność)
  - rozjazd słowa/zdania (parafraza) lub niskie podobieństwo słów
  - średnie dopasowanie sekcji
  - liczby zdań zgodnych / dodanych / pominiętych
  - liczby błędów faktograficznych, zdarzeń bias i hallucination
Każda korekta dopisuje uzasadnienie. Wynik przycięty do [0, 1].

Etykieta zależy wyłącznie od progów (sentence_similarity, ngram_overlap)
oraz liczby błędów faktograficznych — nie od score.
"""

from __future__ import annotations

from dataclasses import dataclass

from data_model.analysis import ConfidenceSummary
from data_model.common import ConfidenceLabel

from .config import CLASSIFICATION_THRESHOLDS


@dataclass(slots=True)
class ConfidenceInputs:
    word_similarity: float
    sentence_similarity: float
    ngram_overlap: float
    truly_missing_count: int
    extra_count: int
    bias_events: int
    hallucination_events: int
    factual_errors: int
    agreement_count: int
    section_alignment: float


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def confidence_label(sentence_similarity: float, ngram_overlap: float, factual_errors: int) -> ConfidenceLabel:
    aligned_sim, aligned_ngram = CLASSIFICATION_THRESHOLDS["aligned"]
    possible_sim, possible_ngram = CLASSIFICATION_THRESHOLDS["possible"]
    if sentence_similarity >= aligned_sim and ngram_overlap >= aligned_ngram and factual_errors == 0:
        return ConfidenceLabel.ALIGNED
    if sentence_similarity >= possible_sim and ngram_overlap >= possible_ngram:
        return ConfidenceLabel.POSSIBLE_DIVERGENCE
    return ConfidenceLabel.SUSPECTED_DIVERGENCE


def classify_document(inputs: ConfidenceInputs) -> ConfidenceSummary:
    rationale: list[str] = []
    sent = inputs.sentence_similarity
    word = inputs.word_similarity
    sections = inputs.section_alignment

    score = 1.0 - sent

    if sent > 0.95:
        score -= (sent - 0.95) * 2
        rationale.append(f"Extreme sentence similarity ({_pct(sent)}) indicates blatant copying")
    elif sent > 0.8:
        score -= sent - 0.8
        rationale.append(f"Very high sentence similarity ({_pct(sent)}) suggests extensive copying")
    elif sent > 0.5:
        score -= (sent - 0.5) * 0.5
        rationale.append(f"High sentence similarity ({_pct(sent)}) indicates significant overlap")
    elif sent < 0.1:
        score += min(0.3, (0.1 - sent) * 2)
        rationale.append(f"Very low sentence similarity ({_pct(sent)}) shows strong independence")

    if word > 0.95 and sent < 0.5:
        score -= (word - 0.95) * 0.5
        rationale.append(
            f"Extreme word similarity ({_pct(word)}) despite low sentence match suggests paraphrasing"
        )
    elif word < 0.5:
        score += min(0.1, (0.5 - word) * 0.3)
        rationale.append(f"Low word similarity ({_pct(word)}) shows original vocabulary")

    if sections >= 0.95:
        score -= min(0.05, (sections - 0.9) * 0.5)
        rationale.append(f"Identical section structure ({_pct(sections)}) suggests copying")
    elif sections < 0.3:
        score += min(0.05, (0.3 - sections) * 0.2)
        rationale.append(f"Different section structure ({_pct(sections)}) shows independence")

    if inputs.agreement_count > 100:
        score -= min(0.15, inputs.agreement_count * 0.0003)
        rationale.append(f"{inputs.agreement_count} identical sentences suggest extensive copying")

    if inputs.extra_count > 50:
        score += min(0.1, inputs.extra_count * 0.0001)
        rationale.append(f"{inputs.extra_count} unique candidate sentences show original content")

    if inputs.truly_missing_count > 50:
        score += min(0.05, inputs.truly_missing_count * 0.00005)
        rationale.append(
            f"{inputs.truly_missing_count} reference sentences omitted (shows editorial independence)"
        )

    if inputs.factual_errors > 0:
        score -= inputs.factual_errors * 0.03
        rationale.append(f"{inputs.factual_errors} factual errors detected")

    if inputs.bias_events > 0:
        score -= inputs.bias_events * 0.01
        rationale.append(f"{inputs.bias_events} bias cues detected")

    if inputs.hallucination_events > 0:
        score -= inputs.hallucination_events * 0.025
        rationale.append(f"{inputs.hallucination_events} hallucination cues detected")

    label = confidence_label(sent, inputs.ngram_overlap, inputs.factual_errors)
    if label is ConfidenceLabel.ALIGNED and not rationale:
        rationale.append("High similarity and n-gram overlap")

    return ConfidenceSummary(
        label=label,
        score=round(max(0.0, min(1.0, score)), 3),
        rationale=rationale,
    )
