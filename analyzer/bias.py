"""
analyzer/bias.py — wykrywanie stronniczości w zdaniach dodanych przez kandydata.

Tryby:
  keyword  — słownik bias_lexicon; wzorzec trafiony także w tekście
             referencji jest tłumiony (wspólne sformułowanie to nie sygnał)
  hybrid   — keyword + klasyfikator zero-shot (ZeroShotClassifier):
               * zdania oznaczone słownikiem: potwierdzenie / odrzucenie /
                 obniżenie severity o 1
               * losowa próbka nieoznaczonych zdań (10%, max 50):
                 nowe zdarzenie gdy klasyfikator jest pewny
             Błąd klasyfikatora → ostrzeżenie w logu i wynik keyword.

Klasyfikator jest synchroniczny; wywołania idą przez asyncio.to_thread
w partiach po SEMANTIC_BATCH_SIZE, kolejność wyników = kolejność zdań.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Protocol

from data_model.analysis import DiscrepancyRecord, Evidence
from data_model.common import DiscrepancyCategory, DiscrepancyType

from .bias_lexicon import BIAS_CATEGORIES, lexicon_hits, pattern_key
from .config import (
    SEMANTIC_BATCH_SIZE,
    SEMANTIC_CONFIRM_THRESHOLD,
    SEMANTIC_NEUTRAL_THRESHOLD,
    SEMANTIC_SAMPLE_CAP,
    SEMANTIC_SAMPLE_RATIO,
)

logger = logging.getLogger(__name__)

# Etykiety NPOV przekazywane klasyfikatorowi → krótka nazwa typu.
NPOV_LABELS: dict[str, str] = {
    "neutral encyclopedic tone": "neutral",
    "promotional or biased language": "promotional",
    "emotional or subjective tone": "emotional",
    "unverified or speculative claims": "speculative",
    "loaded or contentious labels": "contentious",
}
NEUTRAL = "neutral"


class ZeroShotClassifier(Protocol):
    """Zewnętrzny klasyfikator: zdanie + zestaw etykiet → wynik dla każdej etykiety."""

    def classify(self, sentence: str, labels: Sequence[str]) -> dict[str, float]:
        ...


@dataclass(slots=True)
class SemanticBiasResult:
    sentence: str
    scores: dict[str, float] = field(default_factory=dict)   # neutral, promotional, ...
    predicted_bias_type: str | None = None
    confidence: float = 0.0


# ---------------------------------------------------------------------------
# Keyword
# ---------------------------------------------------------------------------

def detect_bias_keyword(extra_sentences: list[str], reference_text: str) -> list[DiscrepancyRecord]:
    if not extra_sentences:
        return []
    reference_hits = lexicon_hits(reference_text)
    seen: set[str] = set()
    events: list[DiscrepancyRecord] = []
    for sentence in extra_sentences:
        for category in BIAS_CATEGORIES:
            for pattern in category.patterns:
                key = pattern_key(category, pattern)
                if key in reference_hits or not pattern.regex.search(sentence):
                    continue
                event_key = f"{key}:{sentence}"
                if event_key in seen:
                    continue
                seen.add(event_key)
                events.append(DiscrepancyRecord(
                    type=DiscrepancyType.BIAS_SHIFT,
                    description=f"{category.label}: {category.description} ({category.reference})",
                    evidence=Evidence(candidate=sentence),
                    severity=category.severity,
                    category=DiscrepancyCategory.BIAS,
                    tags=[str(category.id), pattern.label],
                ))
    return events


# ---------------------------------------------------------------------------
# Klasyfikator
# ---------------------------------------------------------------------------

def score_sentence(classifier: ZeroShotClassifier, sentence: str) -> SemanticBiasResult:
    """Mapuje wyniki etykiet NPOV na typy i wybiera dominujący typ stronniczości."""
    raw = classifier.classify(sentence, list(NPOV_LABELS))
    scores = {short: float(raw.get(label, 0.0)) for label, short in NPOV_LABELS.items()}
    neutral = scores[NEUTRAL]
    bias_type, bias_score = max(
        ((name, value) for name, value in scores.items() if name != NEUTRAL),
        key=lambda item: item[1],
    )
    if bias_score > SEMANTIC_CONFIRM_THRESHOLD and bias_score > neutral:
        return SemanticBiasResult(sentence, scores, bias_type, bias_score)
    return SemanticBiasResult(sentence, scores, None, neutral)


async def classify_batch(
    classifier: ZeroShotClassifier,
    sentences: list[str],
    batch_size: int = SEMANTIC_BATCH_SIZE,
) -> list[SemanticBiasResult]:
    results: list[SemanticBiasResult] = []
    for start in range(0, len(sentences), batch_size):
        batch = sentences[start:start + batch_size]
        results.extend(await asyncio.gather(*(
            asyncio.to_thread(score_sentence, classifier, sentence) for sentence in batch
        )))
    return results


def sample_unflagged(extra_sentences: list[str], flagged: set[str], rng: random.Random) -> list[str]:
    size = min(SEMANTIC_SAMPLE_CAP, math.ceil(len(extra_sentences) * SEMANTIC_SAMPLE_RATIO))
    pool = [s for s in extra_sentences if s not in flagged]
    return rng.sample(pool, min(size, len(pool)))


def merge_semantic_results(
    keyword_events: list[DiscrepancyRecord],
    results: list[SemanticBiasResult],
) -> list[DiscrepancyRecord]:
    by_sentence: dict[str, SemanticBiasResult] = {}
    for result in results:
        by_sentence.setdefault(result.sentence, result)

    verified: list[DiscrepancyRecord] = []
    processed: set[str] = set()

    for event in keyword_events:
        sentence = event.evidence.candidate or ""
        result = by_sentence.get(sentence)
        if result is None:
            verified.append(event)
            processed.add(sentence)
            continue
        if result.predicted_bias_type and result.confidence > SEMANTIC_CONFIRM_THRESHOLD:
            verified.append(replace(
                event,
                description=(
                    f"{event.description} [Semantic: {result.predicted_bias_type}, "
                    f"{result.confidence * 100:.0f}% confidence]"
                ),
                tags=[*event.tags, "semantic_verified"],
            ))
            processed.add(sentence)
        elif result.scores.get(NEUTRAL, 0.0) > SEMANTIC_NEUTRAL_THRESHOLD:
            # klasyfikator uznał zdanie za neutralne, zdarzenie odpada
            continue
        else:
            verified.append(replace(
                event,
                severity=max(1, (event.severity or 2) - 1),
                tags=[*event.tags, "semantic_uncertain"],
            ))
            processed.add(sentence)

    for result in results:
        if result.sentence in processed:
            continue
        if result.predicted_bias_type and result.confidence > SEMANTIC_CONFIRM_THRESHOLD:
            processed.add(result.sentence)
            verified.append(DiscrepancyRecord(
                type=DiscrepancyType.BIAS_SHIFT,
                description=(
                    f"Semantic bias detected: {result.predicted_bias_type} "
                    f"({result.confidence * 100:.0f}% confidence)"
                ),
                evidence=Evidence(candidate=result.sentence),
                severity=3 if result.confidence > 0.8 else 2,
                category=DiscrepancyCategory.BIAS,
                tags=["semantic_only", result.predicted_bias_type],
            ))
    return verified


async def detect_bias_hybrid(
    extra_sentences: list[str],
    reference_text: str,
    classifier: ZeroShotClassifier,
    rng: random.Random,
) -> list[DiscrepancyRecord]:
    if not extra_sentences:
        return []
    keyword_events = detect_bias_keyword(extra_sentences, reference_text)
    flagged = list(dict.fromkeys(e.evidence.candidate or "" for e in keyword_events))
    to_check = [*flagged, *sample_unflagged(extra_sentences, set(flagged), rng)]
    results = await classify_batch(classifier, to_check)
    return merge_semantic_results(keyword_events, results)


async def detect_bias_events(
    extra_sentences: list[str],
    reference_text: str,
    classifier: ZeroShotClassifier | None = None,
    rng: random.Random | None = None,
) -> list[DiscrepancyRecord]:
    """Hybryda gdy podano klasyfikator, w przeciwnym razie sam słownik."""
    if classifier is None:
        return detect_bias_keyword(extra_sentences, reference_text)
    try:
        return await detect_bias_hybrid(extra_sentences, reference_text, classifier, rng or random.Random())
    except Exception as exc:
        logger.warning("Klasyfikator stronniczości niedostępny (%s), wynik tylko ze słownika.", exc)
        return detect_bias_keyword(extra_sentences, reference_text)
