"""
article_parser/claims.py — ekstrakcja claimów (1 claim na zdanie).

Claim niesie:
  - entities: cele wiki-linków [[cel|etykieta]] (etykieta = alias lub cel);
              gdy zdanie nie ma linków — frazy z wielkiej litery (heurystyka)
  - time:     pierwszy wzorzec "<liczba> day(s)"
  - numbers:  liczby z opcjonalną notacją naukową i jednostką
              (tabela normalizacji jednostek w normalize_unit)

Numeracja c1, c2, ... biegnie przez lead i wszystkie sekcje w kolejności
dokumentu.
"""

from __future__ import annotations

import re

from data_model.article import Claim, Entity, Lead, NumberValue, Section, TimeValue

_WIKI_LINK_RE = re.compile(r"\[\[([^|\]]+)(?:\|([^\]]+))?\]\]")
_CAPITALIZED_RE = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\b")
_SHORT_CAP_RE = re.compile(r"^[A-Z][a-z]?$")
_DAYS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:day|days)\b", re.IGNORECASE)
_NUMBER_RE = re.compile(
    r"(\d{1,3}(?:[ ,]\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"
    r"(?:\s?[×xe]\s?10(?:\^|[-⁻])?(-?\d+))?"
    r"(?:\s?(km|kilometres?|kilometers?|miles?|mi|m|meters?|metres?|kg|kilograms?|g|grams?"
    r"|%|percent|degrees?\s?[cf]|°\s?[cf]|days?|years?)(?![a-z]))?",
    re.IGNORECASE,
)
_FLOAT_PREFIX_RE = re.compile(r"^\d+(?:\.\d+)?")

MAX_ENTITY_WORDS = 4


# ---------------------------------------------------------------------------
# Encje
# ---------------------------------------------------------------------------

def _fallback_entities(text: str) -> list[str]:
    seen: dict[str, None] = {}
    for m in _CAPITALIZED_RE.finditer(text):
        value = m.group(1).strip()
        if (
            len(value.split()) <= MAX_ENTITY_WORDS
            and len(value) > 2
            and not _SHORT_CAP_RE.match(value)
        ):
            seen.setdefault(value, None)
    return list(seen)


def extract_entities(raw: str, text: str) -> list[Entity]:
    """
    raw:  fragment zdania przed czyszczeniem (z [[linkami]])
    text: oczyszczony tekst zdania (dla heurystyki)
    """
    entities = [
        Entity(label=(m.group(2) or m.group(1)).strip())
        for m in _WIKI_LINK_RE.finditer(raw)
    ]
    if entities:
        return entities
    return [Entity(label=label) for label in _fallback_entities(text)]


# ---------------------------------------------------------------------------
# Czas / liczby
# ---------------------------------------------------------------------------

def detect_time(text: str) -> TimeValue | None:
    m = _DAYS_RE.search(text)
    if not m:
        return None
    return TimeValue(unit="day", value=float(m.group(1)))


def normalize_unit(unit: str | None) -> str | None:
    if not unit:
        return None
    cleaned = unit.strip().lower()
    if cleaned.startswith("kilomet") or cleaned == "km":
        return "km"
    if cleaned in ("m", "meter", "meters", "metre", "metres"):
        return "m"
    if cleaned == "mi" or "mile" in cleaned:
        return "mi"
    if cleaned == "kg" or "kilogram" in cleaned:
        return "kg"
    if cleaned == "g" or "gram" in cleaned:
        return "g"
    if cleaned in ("percent", "percentage", "%"):
        return "%"
    if cleaned in ("day", "days"):
        return "day"
    if "year" in cleaned:
        return "year"
    if "°" in cleaned or cleaned.startswith("degree"):
        if cleaned.endswith("c"):
            return "°C"
        if cleaned.endswith("f"):
            return "°F"
    return cleaned or None


def extract_numbers(text: str) -> list[NumberValue]:
    results: list[NumberValue] = []
    for m in _NUMBER_RE.finditer(text):
        base = re.sub(r"[\s,]", "", m.group(1))
        prefix = _FLOAT_PREFIX_RE.match(base)
        if not prefix:
            continue
        value = float(prefix.group())
        if m.group(2) is not None:
            value *= 10 ** int(m.group(2))
        results.append(NumberValue(
            raw=m.group(0).strip(),
            value=value,
            unit=normalize_unit(m.group(3)),
        ))
    return results


# ---------------------------------------------------------------------------
# Budowa claimów
# ---------------------------------------------------------------------------

def build_claims(lead: Lead, sections: list[Section], raw_by_sentence: dict[str, str]) -> list[Claim]:
    """
    Tworzy claim dla każdego niepustego zdania i wpisuje jego id
    do sentence.claim_ids.
    """
    claims: list[Claim] = []
    paragraphs = [*lead.paragraphs]
    for section in sections:
        paragraphs.extend(section.paragraphs)

    for paragraph in paragraphs:
        for sentence in paragraph.sentences:
            if not sentence.text.strip():
                continue
            claim_id = f"c{len(claims) + 1}"
            sentence.claim_ids = [claim_id]
            raw = raw_by_sentence.get(sentence.sentence_id, sentence.text)
            claims.append(Claim(
                claim_id=claim_id,
                text=sentence.text,
                normalized_text=sentence.normalized_text,
                entities=extract_entities(raw, sentence.text),
                time=detect_time(sentence.text),
                numbers=extract_numbers(sentence.text),
                citation_ids=list(sentence.citation_ids),
            ))
    return claims
