"""
analyzer/analyzer.py — porównanie artykułu referencyjnego z kandydatem.

Publiczne API:
  analyze(topic, reference, candidate, content_hash=None)                 -> AnalysisPayload
  analyze_async(topic, reference, candidate, classifier, content_hash)    -> AnalysisPayload
  analyze_articles(topic, reference_article, candidate_article, ...)      -> AnalysisPayload

Kolejność kroków:
  1. shingle overlap + podobieństwo słów na tekście płaskim
  2. zbiory zdań: missing / extra / agreed / reworded / truly_missing
  3. różnice sekcji i przypisów
  4. alignment sekcji i claimów → rozbieżności liczbowe / encji
  5. bias (słownik, opcjonalnie klasyfikator) + hallucination + factual
  6. diff, ocena pewności, highlights, meta (hash treści)

analyze() jest synchroniczne i używa wyłącznie słownika; jedyną granicą
async jest analyze_async() z klasyfikatorem zero-shot.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass

from data_model.analysis import (
    AnalysisMeta,
    AnalysisPayload,
    AnalysisStats,
    AnalysisWindow,
    CitationDiff,
    ClaimAlignment,
    DiscrepancyRecord,
    EntityDiscrepancy,
    Evidence,
    HighlightSnippet,
    Highlights,
    NumericDiscrepancy,
    RewordedPair,
    SectionAlignment,
    SimilarityRatio,
)
from data_model.article import StructuredArticle
from data_model.common import DiscrepancyCategory, DiscrepancyType, HighlightTag, Side
from data_model.topics import Topic

from .alignment import align_claims, align_sections
from .bias import ZeroShotClassifier, detect_bias_events, detect_bias_keyword
from .bias_metrics import compute_bias_metrics
from .cache import utc_now_iso
from .confidence import ConfidenceInputs, classify_document
from .config import (
    ANALYZER_VERSION,
    HIGHLIGHT_WINDOW,
    MIN_SENTENCE_LENGTH,
    REWORD_THRESHOLD,
    SHINGLE_SIZE,
    SOURCE_NOTE,
    cache_ttl_hours,
)
from .content_hash import compute_content_hash
from .discrepancies import (
    detect_entity_discrepancies,
    detect_factual_errors,
    detect_numeric_discrepancies,
)
from .hallucination import detect_hallucinations
from .similarity import (
    approx_similarity,
    diff_sample,
    difference,
    normalize_sentence,
    sentence_similarity,
    shingle_overlap,
    word_similarity,
)
from .source import AnalyzerSource, prepare_analyzer_source

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Zbiory zdań
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SentenceSets:
    missing: list[str]
    extra: list[str]
    agreed: list[str]
    reworded: list[RewordedPair]
    truly_missing: list[str]


def _has_counterpart(norm: str, others: list[str]) -> bool:
    return any(other == norm or norm in other or other in norm for other in others)


def detect_reworded(missing: list[str], candidate: list[str]) -> list[RewordedPair]:
    """Najlepsze dopasowanie o podobieństwie w [REWORD_THRESHOLD, 1) dla zdań > 20 znaków."""
    valid_cand = [(c, normalize_sentence(c)) for c in candidate if len(c) > MIN_SENTENCE_LENGTH]
    pairs: list[RewordedPair] = []
    for ref in missing:
        if len(ref) <= MIN_SENTENCE_LENGTH:
            continue
        ref_norm = normalize_sentence(ref)
        best: tuple[float, str] | None = None
        for cand, cand_norm in valid_cand:
            similarity = approx_similarity(ref_norm, cand_norm)
            if REWORD_THRESHOLD <= similarity < 1.0 and (best is None or similarity > best[0]):
                best = (similarity, cand)
        if best is not None:
            pairs.append(RewordedPair(reference=ref, candidate=best[1], similarity=round(best[0], 3)))
    return pairs


def detect_agreed(reference: list[str], candidate: list[str]) -> list[str]:
    cand_set = {normalize_sentence(c) for c in candidate if len(c) > MIN_SENTENCE_LENGTH}
    return [
        r for r in reference
        if len(r) > MIN_SENTENCE_LENGTH and normalize_sentence(r) in cand_set
    ]


def compare_sentences(reference: list[str], candidate: list[str]) -> SentenceSets:
    ref_norm = [normalize_sentence(s) for s in reference]
    cand_norm = [normalize_sentence(s) for s in candidate]
    missing = [s for s, n in zip(reference, ref_norm) if not _has_counterpart(n, cand_norm)]
    extra = [s for s, n in zip(candidate, cand_norm) if not _has_counterpart(n, ref_norm)]
    reworded = detect_reworded(missing, candidate)
    reworded_refs = {pair.reference for pair in reworded}
    return SentenceSets(
        missing=missing,
        extra=extra,
        agreed=detect_agreed(reference, candidate),
        reworded=reworded,
        truly_missing=[s for s in missing if s not in reworded_refs],
    )


# ---------------------------------------------------------------------------
# Rozbieżności / highlights
# ---------------------------------------------------------------------------

def build_discrepancies(
    sets: SentenceSets,
    sections_missing: list[str],
    sections_extra: list[str],
    citations: CitationDiff,
    bias: list[DiscrepancyRecord],
    hallucinations: list[DiscrepancyRecord],
    factual: list[DiscrepancyRecord],
) -> list[DiscrepancyRecord]:
    issues: list[DiscrepancyRecord] = []
    for sentence in sets.truly_missing:
        issues.append(DiscrepancyRecord(
            type=DiscrepancyType.MISSING_CONTEXT,
            description="Sentence present in the reference but truly absent from the candidate.",
            evidence=Evidence(reference=sentence),
        ))
    for sentence in sets.extra:
        issues.append(DiscrepancyRecord(
            type=DiscrepancyType.ADDED_CLAIM,
            description="Sentence present in the candidate but absent from the reference.",
            evidence=Evidence(candidate=sentence),
        ))
    for pair in sets.reworded:
        issues.append(DiscrepancyRecord(
            type=DiscrepancyType.REWORDED_CLAIM,
            description=f"Sentence reworded ({pair.similarity * 100:.0f}% similar).",
            evidence=Evidence(reference=pair.reference, candidate=pair.candidate),
            severity=2,
            category=DiscrepancyCategory.REWORDING,
        ))
    for heading in sections_missing:
        issues.append(DiscrepancyRecord(
            type=DiscrepancyType.SECTION_MISSING,
            description=f'Section "{heading}" exists in the reference but not in the candidate.',
            evidence=Evidence(reference=heading),
            category=DiscrepancyCategory.STRUCTURE,
        ))
    for heading in sections_extra:
        issues.append(DiscrepancyRecord(
            type=DiscrepancyType.SECTION_EXTRA,
            description=f'Candidate adds a section "{heading}" not found in the reference.',
            evidence=Evidence(candidate=heading),
            category=DiscrepancyCategory.STRUCTURE,
        ))
    for citation in citations.missing:
        issues.append(DiscrepancyRecord(
            type=DiscrepancyType.MISSING_CITATION,
            description="Citation present in the reference is missing from the candidate.",
            evidence=Evidence(reference=citation),
            category=DiscrepancyCategory.CITATION,
        ))
    for citation in citations.extra:
        issues.append(DiscrepancyRecord(
            type=DiscrepancyType.ADDED_CITATION,
            description="Candidate introduces a reference not present in the reference article.",
            evidence=Evidence(candidate=citation),
            category=DiscrepancyCategory.CITATION,
        ))
    return [*issues, *bias, *hallucinations, *factual]


def make_preview(sentence: str) -> str:
    """Pierwsze i ostatnie HIGHLIGHT_WINDOW słów: 'a b c … x y z'."""
    words = sentence.split()
    if len(words) <= HIGHLIGHT_WINDOW * 2:
        return sentence
    return f"{' '.join(words[:HIGHLIGHT_WINDOW])} … {' '.join(words[-HIGHLIGHT_WINDOW:])}"


def _snippets(sentences: list[str], source: Side, tag: HighlightTag) -> list[HighlightSnippet]:
    return [HighlightSnippet(source=source, tag=tag, text=s, preview=make_preview(s)) for s in sentences]


def build_highlights(
    sets: SentenceSets,
    bias: list[DiscrepancyRecord],
    hallucinations: list[DiscrepancyRecord],
) -> Highlights:
    bias_sentences = [e.evidence.candidate for e in bias if e.evidence.candidate]
    hallucination_sentences = [e.evidence.candidate for e in hallucinations if e.evidence.candidate]
    return Highlights(
        missing=_snippets(sets.missing, Side.REFERENCE, HighlightTag.MISSING),
        extra=[
            *_snippets(sets.extra, Side.CANDIDATE, HighlightTag.EXTRA),
            *_snippets(bias_sentences, Side.CANDIDATE, HighlightTag.BIAS),
            *_snippets(hallucination_sentences, Side.CANDIDATE, HighlightTag.HALLUCINATION),
        ],
    )


# ---------------------------------------------------------------------------
# Orkiestracja
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class _Comparison:
    """Wszystko poza zdarzeniami bias — wspólne dla ścieżki sync i async."""
    ngram: float
    word: float
    sentence: float
    sets: SentenceSets
    sections_missing: list[str]
    sections_extra: list[str]
    citations: CitationDiff
    section_alignment: list[SectionAlignment]
    claim_alignment: list[ClaimAlignment]
    numeric: list[NumericDiscrepancy]
    entities: list[EntityDiscrepancy]
    hallucinations: list[DiscrepancyRecord]
    factual: list[DiscrepancyRecord]


def _compare(reference: AnalyzerSource, candidate: AnalyzerSource) -> _Comparison:
    ref_sentences = reference.content.sentences
    cand_sentences = candidate.content.sentences
    sets = compare_sentences(ref_sentences, cand_sentences)

    claim_alignment = align_claims(reference.article, candidate.article)
    numeric = detect_numeric_discrepancies(claim_alignment)
    entities = detect_entity_discrepancies(claim_alignment)

    return _Comparison(
        ngram=shingle_overlap(reference.text, candidate.text),
        word=word_similarity(reference.text, candidate.text),
        sentence=sentence_similarity(ref_sentences, cand_sentences),
        sets=sets,
        sections_missing=difference(reference.content.sections, candidate.content.sections),
        sections_extra=difference(candidate.content.sections, reference.content.sections),
        citations=CitationDiff(
            missing=difference(reference.content.citations, candidate.content.citations),
            extra=difference(candidate.content.citations, reference.content.citations),
        ),
        section_alignment=align_sections(reference.article, candidate.article),
        claim_alignment=claim_alignment,
        numeric=numeric,
        entities=entities,
        hallucinations=detect_hallucinations(sets.extra, reference.content.claims),
        factual=detect_factual_errors(claim_alignment, numeric, entities),
    )


def _assemble(
    topic: Topic,
    reference: AnalyzerSource,
    candidate: AnalyzerSource,
    cmp: _Comparison,
    bias: list[DiscrepancyRecord],
    content_hash: str,
    semantic: bool,
) -> AnalysisPayload:
    sets = cmp.sets
    section_avg = (
        sum(r.similarity for r in cmp.section_alignment) / len(cmp.section_alignment)
        if cmp.section_alignment else 0.0
    )
    confidence = classify_document(ConfidenceInputs(
        word_similarity=cmp.word,
        sentence_similarity=cmp.sentence,
        ngram_overlap=cmp.ngram,
        truly_missing_count=len(sets.truly_missing),
        extra_count=len(sets.extra),
        bias_events=len(bias),
        hallucination_events=len(cmp.hallucinations),
        factual_errors=len(cmp.factual),
        agreement_count=len(sets.agreed),
        section_alignment=section_avg,
    ))

    return AnalysisPayload(
        topic_id=topic.id,
        title=topic.title,
        stats=AnalysisStats(
            reference_char_count=len(reference.text),
            candidate_char_count=len(candidate.text),
            similarity_ratio=SimilarityRatio(word=cmp.word, sentence=cmp.sentence),
            reference_sentence_count=len(reference.content.sentences),
            candidate_sentence_count=len(candidate.content.sentences),
            missing_sentence_total=len(sets.missing),
            extra_sentence_total=len(sets.extra),
            reworded_sentence_count=len(sets.reworded),
            truly_missing_count=len(sets.truly_missing),
            agreement_count=len(sets.agreed),
        ),
        ngram_overlap=cmp.ngram,
        missing_sentences=sets.missing,
        extra_sentences=sets.extra,
        reworded_sentences=sets.reworded,
        truly_missing_sentences=sets.truly_missing,
        agreed_sentences=sets.agreed,
        sections_missing=cmp.sections_missing,
        sections_extra=cmp.sections_extra,
        citations=cmp.citations,
        diff_sample=diff_sample(reference.content.sentences, candidate.content.sentences, topic.id),
        discrepancies=build_discrepancies(
            sets, cmp.sections_missing, cmp.sections_extra, cmp.citations,
            bias, cmp.hallucinations, cmp.factual,
        ),
        bias_events=bias,
        hallucination_events=cmp.hallucinations,
        factual_errors=cmp.factual,
        confidence=confidence,
        highlights=build_highlights(sets, bias, cmp.hallucinations),
        meta=AnalysisMeta(
            analyzer_version=ANALYZER_VERSION,
            content_hash=content_hash,
            generated_at=utc_now_iso(),
            cache_ttl_hours=cache_ttl_hours(),
            shingle_size=SHINGLE_SIZE,
            analysis_window=AnalysisWindow(
                reference_analyzed_chars=len(reference.text),
                candidate_analyzed_chars=len(candidate.text),
                source_note=SOURCE_NOTE,
            ),
            semantic_bias=semantic,
        ),
        section_alignment=cmp.section_alignment,
        claim_alignment=cmp.claim_alignment,
        numeric_discrepancies=cmp.numeric,
        entity_discrepancies=cmp.entities,
        bias_metrics=compute_bias_metrics(reference.text, candidate.text),
    )


def analyze(
    topic: Topic,
    reference: AnalyzerSource,
    candidate: AnalyzerSource,
    content_hash: str | None = None,
) -> AnalysisPayload:
    cmp = _compare(reference, candidate)
    bias = detect_bias_keyword(cmp.sets.extra, reference.text)
    digest = content_hash or compute_content_hash(reference.text, candidate.text)
    return _assemble(topic, reference, candidate, cmp, bias, digest, semantic=False)


async def analyze_async(
    topic: Topic,
    reference: AnalyzerSource,
    candidate: AnalyzerSource,
    classifier: ZeroShotClassifier | None = None,
    content_hash: str | None = None,
) -> AnalysisPayload:
    """
    Jak analyze(), ale z hybrydowym passem klasyfikatora.

    Próbka zdań dla klasyfikatora jest losowana generatorem zasianym
    hashem treści — te same dane dają tę samą próbkę.
    """
    cmp = _compare(reference, candidate)
    digest = content_hash or compute_content_hash(reference.text, candidate.text)
    bias = await detect_bias_events(
        cmp.sets.extra,
        reference.text,
        classifier=classifier,
        rng=random.Random(digest),
    )
    logger.debug("Zdarzenia bias: %d (klasyfikator: %s)", len(bias), classifier is not None)
    return _assemble(topic, reference, candidate, cmp, bias, digest, semantic=classifier is not None)


def analyze_articles(
    topic: Topic,
    reference_article: StructuredArticle,
    candidate_article: StructuredArticle,
    classifier: ZeroShotClassifier | None = None,
    content_hash: str | None = None,
) -> AnalysisPayload:
    """Przygotowuje źródła i uruchamia analyze / analyze_async (wejście dla CLI)."""
    reference = prepare_analyzer_source(reference_article)
    candidate = prepare_analyzer_source(candidate_article)
    if classifier is None:
        return analyze(topic, reference, candidate, content_hash)
    return asyncio.run(analyze_async(topic, reference, candidate, classifier, content_hash))
