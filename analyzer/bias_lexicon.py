"""
analyzer/bias_lexicon.py — słownik "words to watch" (Wikipedia MOS:WTW).

Pięć kategorii; każdy wzorzec to regex z granicami słów, bez wielkości liter.
Severity: 1 (kosmetyka) … 3 (etykieta wartościująca).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from data_model.common import BiasCategoryId


@dataclass(frozen=True, slots=True)
class BiasPattern:
    label: str
    regex: re.Pattern[str]


@dataclass(frozen=True, slots=True)
class BiasCategory:
    id: BiasCategoryId
    label: str
    description: str
    severity: int
    reference: str
    patterns: tuple[BiasPattern, ...]


def _words(*terms: str) -> tuple[BiasPattern, ...]:
    return tuple(
        BiasPattern(term, re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE))
        for term in terms
    )


BIAS_CATEGORIES: tuple[BiasCategory, ...] = (
    BiasCategory(
        id=BiasCategoryId.PUFFERY,
        label="Peacock / puffery terms",
        description="Replace promotional adjectives with sourced facts (Wikipedia MOS:PUFFERY).",
        severity=2,
        reference="MOS:PUFFERY",
        patterns=_words(
            "legendary", "iconic", "visionary", "outstanding", "celebrated",
            "award-winning", "landmark", "cutting-edge", "innovative",
            "revolutionary", "extraordinary", "brilliant", "renowned",
            "remarkable", "prestigious", "world-class", "virtuoso", "pioneering",
            "phenomenal", "prominent", "best", "greatest",
        ),
    ),
    BiasCategory(
        id=BiasCategoryId.CONTENTIOUS_LABELS,
        label="Contentious labels",
        description="Value-laden labels need neutral wording or attribution (Wikipedia MOS:LABEL).",
        severity=3,
        reference="MOS:LABEL",
        patterns=_words(
            "cult", "racist", "sexist", "homophobic", "transphobic",
            "misogynistic", "extremist", "denialist", "terrorist",
            "freedom fighter", "bigot", "myth", "neo-nazi", "controversial",
            "perverted", "fundamentalist", "heretic", "sect", "conspiracy",
        ) + (
            BiasPattern("-gate suffix", re.compile(r"\b[a-z0-9]+gate\b", re.IGNORECASE)),
            BiasPattern("pseudo- prefix", re.compile(r"\bpseudo[a-z0-9-]+\b", re.IGNORECASE)),
        ),
    ),
    BiasCategory(
        id=BiasCategoryId.WEASEL_WORDS,
        label="Weasel wording",
        description="Vague attributions should be replaced with concrete sourcing (Wikipedia MOS:WEASEL).",
        severity=2,
        reference="MOS:WEASEL",
        patterns=_words(
            "some people say", "many people", "many scholars", "it is believed",
            "many are of the opinion", "most feel", "experts declare",
            "it is widely thought", "it is often said", "scientists claim",
            "research has shown", "it is often reported", "officially",
            "widely regarded",
        ),
    ),
    BiasCategory(
        id=BiasCategoryId.EXPRESSIONS_OF_DOUBT,
        label="Expressions of doubt",
        description="Terms such as 'alleged' or 'so-called' should be sourced (Wikipedia MOS:ALLEGED).",
        severity=2,
        reference="MOS:ALLEGED",
        patterns=_words("supposed", "apparent", "purported", "alleged", "accused", "so-called"),
    ),
    BiasCategory(
        id=BiasCategoryId.EDITORIALIZING,
        label="Editorializing adverbs",
        description=(
            "Avoid instructive adverbs like 'clearly' or 'of course' unless quoting "
            "a source (Wikipedia MOS:EDITORIAL)."
        ),
        severity=1,
        reference="MOS:EDITORIAL",
        patterns=_words(
            "notably", "interestingly", "essentially", "utterly", "actually",
            "only", "clearly", "obviously", "naturally", "of course",
            "fortunately", "unfortunately", "happily", "sadly", "tragically",
            "arguably",
        ),
    ),
)


def pattern_key(category: BiasCategory, pattern: BiasPattern) -> str:
    """Klucz tłumienia: '<kategoria>:<wzorzec>' (małe litery)."""
    return f"{category.id}:{pattern.label.lower()}"


def lexicon_hits(text: str) -> set[str]:
    """Klucze wszystkich wzorców trafionych gdziekolwiek w tekście."""
    return {
        pattern_key(category, pattern)
        for category in BIAS_CATEGORIES
        for pattern in category.patterns
        if pattern.regex.search(text)
    }
