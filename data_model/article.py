"""
data_model/article.py — model ustrukturyzowanego artykułu (wynik parsera).

StructuredArticle jest drzewem: Lead → Paragraph → Sentence oraz
Section → Paragraph → Sentence. Zdania trzymają wyłącznie identyfikatory
przypisów, mediów i claimów; same obiekty żyją w płaskich listach
`references`, `media`, `claims` artykułu.

Format JSON (snake_case) jest formatem snapshotu `*.parsed.json`:
  article_to_dict(article)  -> dict
  article_from_dict(data)   -> StructuredArticle
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import asdict, dataclass, field
from typing import Any

from .common import (
    CitationId,
    ClaimId,
    MediaId,
    MediaOrigin,
    MediaType,
    ReferenceKind,
    SectionId,
    SourceKind,
)


# ---------------------------------------------------------------------------
# Metadane wejściowe
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ArticleMetadata:
    """
    Metadane przekazywane do parsera razem z surowym tekstem.

    - source:             rodzaj źródła (wikipedia / grokipedia)
    - page_id:            identyfikator strony, np. "en:Moon"
    - revision_id:        identyfikator rewizji (string; może być syntetyczny)
    - revision_timestamp: ISO 8601
    """
    source: SourceKind
    page_id: str
    title: str = ""
    lang: str = "en"
    canonical_url: str = ""
    revision_id: str = ""
    revision_timestamp: str = ""


@dataclass(slots=True)
class ExternalCitation:
    """Przypis dostarczony z zewnątrz (np. z API Grokipedii), nie z treści."""
    url: str
    id: str | None = None
    title: str | None = None
    description: str | None = None
    favicon: str | None = None


# ---------------------------------------------------------------------------
# Zdania / akapity / sekcje
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class TextRange:
    start_offset: int
    end_offset: int


@dataclass(slots=True)
class Sentence:
    sentence_id: str
    text: str
    normalized_text: str
    tokens: list[str]
    citation_ids: list[CitationId] = field(default_factory=list)
    media_ids: list[MediaId] = field(default_factory=list)
    claim_ids: list[ClaimId] = field(default_factory=list)


@dataclass(slots=True)
class Paragraph:
    para_id: str
    sentences: list[Sentence]


@dataclass(slots=True)
class Lead:
    text_range: TextRange
    paragraphs: list[Paragraph] = field(default_factory=list)


@dataclass(slots=True)
class Section:
    """
    Sekcja artykułu.

    parent_section_id wskazuje najbliższą wcześniejszą sekcję o ściśle
    niższym poziomie nagłówka (stos poziomów), a nie wskaźnik na obiekt.
    """
    section_id: SectionId
    heading: str
    level: int
    anchor: str
    parent_section_id: SectionId | None = None
    media_ids: list[MediaId] = field(default_factory=list)
    paragraphs: list[Paragraph] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Media / przypisy / claimy
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class MediaUsage:
    context: str                 # "body" | "thumb" | "infobox"
    section_id: SectionId | None
    sentence_id: str | None = None


@dataclass(slots=True)
class Media:
    media_id: MediaId
    title: str
    type: MediaType
    origin: MediaOrigin
    caption: str | None = None
    alt_text: str | None = None
    license: str | None = None
    usage: list[MediaUsage] = field(default_factory=list)


@dataclass(slots=True)
class NormalizedReference:
    type: ReferenceKind | None = None
    title: str | None = None
    publisher: str | None = None
    journal: str | None = None
    year: int | None = None
    url: str | None = None
    doi: str | None = None


@dataclass(slots=True)
class Reference:
    citation_id: CitationId
    name: str | None
    raw: str
    normalized: NormalizedReference = field(default_factory=NormalizedReference)


@dataclass(slots=True)
class Entity:
    label: str
    type: str | None = None
    qid: str | None = None


@dataclass(slots=True)
class TimeValue:
    unit: str
    value: float


@dataclass(slots=True)
class NumberValue:
    raw: str
    value: float
    unit: str | None = None


@dataclass(slots=True)
class Claim:
    claim_id: ClaimId
    text: str
    normalized_text: str
    entities: list[Entity] = field(default_factory=list)
    time: TimeValue | None = None
    numbers: list[NumberValue] = field(default_factory=list)
    citation_ids: list[CitationId] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Artykuł
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Revision:
    id: str
    timestamp: str


@dataclass(slots=True)
class StructuredArticle:
    source: SourceKind
    page_id: str
    lang: str
    title: str
    canonical_url: str
    revision: Revision
    lead: Lead
    sections: list[Section] = field(default_factory=list)
    media: list[Media] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)
    claims: list[Claim] = field(default_factory=list)

    def iter_paragraphs(self) -> Iterator[Paragraph]:
        """Akapity w kolejności dokumentu: lead, potem kolejne sekcje."""
        yield from self.lead.paragraphs
        for section in self.sections:
            yield from section.paragraphs

    def iter_sentences(self) -> Iterator[Sentence]:
        for paragraph in self.iter_paragraphs():
            yield from paragraph.sentences


def is_empty_article(article: StructuredArticle) -> bool:
    """True gdy parser nie wyprodukował treści (pusty lead i brak sekcji)."""
    return not article.lead.paragraphs and not article.sections


# ---------------------------------------------------------------------------
# Serializacja
# ---------------------------------------------------------------------------

def article_to_dict(article: StructuredArticle) -> dict[str, Any]:
    return asdict(article)


def _paragraphs_from(items: list[dict[str, Any]]) -> list[Paragraph]:
    return [
        Paragraph(
            para_id=p["para_id"],
            sentences=[
                Sentence(
                    sentence_id=s["sentence_id"],
                    text=s["text"],
                    normalized_text=s.get("normalized_text", s["text"].lower()),
                    tokens=list(s.get("tokens", [])),
                    citation_ids=list(s.get("citation_ids", [])),
                    media_ids=list(s.get("media_ids", [])),
                    claim_ids=list(s.get("claim_ids", [])),
                )
                for s in p.get("sentences", [])
            ],
        )
        for p in items
    ]


def _reference_from(r: dict[str, Any]) -> Reference:
    n = r.get("normalized") or {}
    kind = n.get("type")
    return Reference(
        citation_id=r["citation_id"],
        name=r.get("name"),
        raw=r.get("raw", ""),
        normalized=NormalizedReference(
            type=ReferenceKind.from_template(kind) if kind else None,
            title=n.get("title"),
            publisher=n.get("publisher"),
            journal=n.get("journal"),
            year=n.get("year"),
            url=n.get("url"),
            doi=n.get("doi"),
        ),
    )


def _media_from(m: dict[str, Any]) -> Media:
    license_value = m.get("license")
    if isinstance(license_value, dict):
        license_value = license_value.get("name")
    return Media(
        media_id=m["media_id"],
        title=m.get("title", ""),
        type=MediaType(m.get("type", MediaType.UNKNOWN)),
        origin=MediaOrigin(m.get("origin", MediaOrigin.BODY)),
        caption=m.get("caption"),
        alt_text=m.get("alt_text"),
        license=license_value,
        usage=[
            MediaUsage(
                context=u.get("context", "body"),
                section_id=u.get("section_id"),
                sentence_id=u.get("sentence_id"),
            )
            for u in m.get("usage", [])
        ],
    )


def _claim_from(c: dict[str, Any]) -> Claim:
    time = c.get("time")
    return Claim(
        claim_id=c["claim_id"],
        text=c["text"],
        normalized_text=c.get("normalized_text", c["text"].lower()),
        entities=[
            Entity(label=e["label"], type=e.get("type"), qid=e.get("qid"))
            for e in c.get("entities", [])
        ],
        time=TimeValue(unit=time["unit"], value=time["value"]) if time else None,
        numbers=[
            NumberValue(raw=n["raw"], value=n["value"], unit=n.get("unit"))
            for n in c.get("numbers", [])
        ],
        citation_ids=list(c.get("citation_ids", [])),
    )


def article_from_dict(data: dict[str, Any]) -> StructuredArticle:
    """
    Odtwarza StructuredArticle ze słownika snapshotu.

    Zakłada dane zgodne ze schematem (data_model.schema); brakujące pola
    opcjonalne dostają wartości domyślne.
    """
    lead = data.get("lead") or {}
    text_range = lead.get("text_range") or {"start_offset": 0, "end_offset": 0}
    revision = data.get("revision") or {}
    return StructuredArticle(
        source=SourceKind(data["source"]),
        page_id=data.get("page_id", ""),
        lang=data.get("lang") or "en",
        title=data.get("title", ""),
        canonical_url=data.get("canonical_url", ""),
        revision=Revision(
            id=str(revision.get("id", "")),
            timestamp=revision.get("timestamp", ""),
        ),
        lead=Lead(
            text_range=TextRange(
                start_offset=text_range["start_offset"],
                end_offset=text_range["end_offset"],
            ),
            paragraphs=_paragraphs_from(lead.get("paragraphs", [])),
        ),
        sections=[
            Section(
                section_id=s["section_id"],
                heading=s.get("heading", ""),
                level=s.get("level", 2),
                anchor=s.get("anchor", ""),
                parent_section_id=s.get("parent_section_id"),
                media_ids=list(s.get("media_ids") or []),
                paragraphs=_paragraphs_from(s.get("paragraphs", [])),
            )
            for s in data.get("sections", [])
        ],
        media=[_media_from(m) for m in data.get("media", [])],
        references=[_reference_from(r) for r in data.get("references", [])],
        claims=[_claim_from(c) for c in data.get("claims", [])],
    )
