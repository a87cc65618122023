"""
article_parser/parser.py — wikitekst / Markdown → StructuredArticle.

Publiczne API:
  parse_article(topic, raw_text, metadata, mode, citations=None) -> StructuredArticle
  parse_wiki_article(topic, wikitext, metadata)                  -> StructuredArticle
  parse_markdown_article(topic, markdown, metadata, citations)    -> StructuredArticle

Potok:
  1. czyszczenie całego tekstu (komentarze; dla wiki: szablony meta,
     infobox, tabele, linki [[:File:]]; dla Markdown: nagłówek z tytułem)
  2. granica lead / body (pierwszy nagłówek)
  3. sekcje ze stosem poziomów → parent_section_id
  4. akapity (pusta linia) → media i przypisy wycinane z offsetami
  5. podział na zdania, przypięcie przypisów/mediów po offsetach
  6. odrzucenie zdań-banerów, claimy dla każdego zdania

Parser nie rzuca wyjątków dla wadliwych znaczników — niedomknięte
konstrukcje przechodzą dalej jako zwykły tekst. Funkcja jest czysta:
ten sam input daje identyczny wynik.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from data_model.article import (
    ArticleMetadata,
    ExternalCitation,
    Lead,
    Paragraph,
    Revision,
    Section,
    Sentence,
    StructuredArticle,
    TextRange,
)
from data_model.common import MediaOrigin, MediaType, ParseMode
from data_model.topics import Topic

from .claims import build_claims
from .registries import MediaRegistry, ReferenceStore
from .sentence_splitter import SentenceSpan, split_sentences
from .text_cleaner import (
    anchorize,
    clean_sentence_text,
    normalize_text,
    slugify,
    split_markdown_lead,
    split_top_level,
    strip_file_links,
    strip_html_comments,
    strip_infobox,
    strip_leading_title_heading,
    strip_meta_templates,
    strip_tables,
    tokenize,
)

# ---------------------------------------------------------------------------
# Wzorce
# ---------------------------------------------------------------------------

_WIKI_HEADING_RE = re.compile(r"^(={2,6})\s*(.*?)\s*={2,6}\s*$", re.MULTILINE)
_MD_HEADING_RE   = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$", re.MULTILINE)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")

_WIKI_MEDIA_OPEN_RE = re.compile(r"\[\[\s*(?:File|Image)\s*:", re.IGNORECASE)
_MD_MEDIA_RE = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)(?:\s+\"[^\"]*\")?\)")
_WIKI_REF_RE = re.compile(
    r"<ref\b([^>]*?)/>|<ref\b([^>]*)>(.*?)</ref\s*>",
    re.IGNORECASE | re.DOTALL,
)
_MD_LINK_REF_RE = re.compile(r"(?<!!)\[([^\]]+)\]\((https?://[^\s)]+)\)")

# Parametry [[File:...]] bez treści podpisu.
CLEANUP_TOKENS = frozenset({
    "thumb", "thumbnail", "frameless", "frame", "border", "upright",
    "left", "right", "center", "centre", "none",
})
_SIZE_PARAM_RE = re.compile(r"^(?:x?\d+|\d+x\d+)\s*px$", re.IGNORECASE)
_SKIPPED_PARAM_PREFIXES = ("link=", "class=", "upright=", "page=", "lang=")

# Napisy z interfejsu Grokipedii, które trafiają do zeskrobanej treści.
BANNER_PATTERNS = (
    re.compile(r"search\s*⌘k", re.IGNORECASE),
    re.compile(r"fact-checked\s+by\s+grok", re.IGNORECASE),
)

_INFOBOX_IMAGE_KEYS = ("image", "image_name", "logo", "photo")
_INFOBOX_CAPTION_KEYS = ("caption", "image_caption")
_INFOBOX_ALT_KEYS = ("alt", "image_alt")


@dataclass(slots=True)
class _Marker:
    """Id przypisu/medium i jego offset w tekście akapitu."""
    ref_id: str
    offset: int


# ---------------------------------------------------------------------------
# Skanery nawiasów [[ ]] / {{ }}
# ---------------------------------------------------------------------------

def _find_link_end(text: str, start: int) -> int | None:
    """Indeks tuż za ']]' domykającym '[[' z pozycji start (z zagnieżdżeniami)."""
    depth = 0
    i = start
    n = len(text)
    while i < n - 1:
        pair = text[i:i + 2]
        if pair == "[[":
            depth += 1
            i += 2
            continue
        if pair == "]]":
            depth -= 1
            i += 2
            if depth == 0:
                return i
            continue
        i += 1
    return None


def _remap_offset(offset: int, edits: list[tuple[int, int, int]]) -> int:
    """
    Przelicza offset z tekstu przed podmianami na tekst po podmianach.

    edits: (start, end, długość_zamiennika) w kolejności rosnącej.
    Offset wewnątrz wyciętego fragmentu ląduje na jego początku.
    """
    shift = 0
    for start, end, repl_len in edits:
        if end <= offset:
            shift += (end - start) - repl_len
        elif start < offset:
            return start - shift
        else:
            break
    return offset - shift


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def _ids_in_span(markers: list[_Marker], span: SentenceSpan) -> list[str]:
    return _dedupe([
        mk.ref_id for mk in markers
        if span.start_offset <= mk.offset <= span.end_offset
    ])


def _snap_to_spans(markers: list[_Marker], spans: list[SentenceSpan]) -> None:
    """Marker leżący między zdaniami przesuwa się na początek następnego (albo koniec ostatniego)."""
    if not spans:
        return
    for mk in markers:
        if any(s.start_offset <= mk.offset <= s.end_offset for s in spans):
            continue
        following = next((s for s in spans if s.start_offset > mk.offset), None)
        mk.offset = following.start_offset if following else spans[-1].end_offset


def _is_banner(text: str) -> bool:
    return any(p.search(text) for p in BANNER_PATTERNS)


def _make_unique(base: str, seen: dict[str, int]) -> str:
    n = seen.get(base, 0) + 1
    seen[base] = n
    return base if n == 1 else f"{base}-{n}"


# ---------------------------------------------------------------------------
# Builder jednego artykułu
# ---------------------------------------------------------------------------

class _ArticleBuilder:
    """Stan jednego parsowania: rejestry, mapa surowych zdań, tryb."""

    def __init__(self, mode: ParseMode) -> None:
        self.mode = mode
        self.references = ReferenceStore()
        self.media = MediaRegistry()
        # sentence_id → surowy fragment (z [[linkami]]) dla ekstrakcji encji
        self.raw_by_sentence: dict[str, str] = {}
        self._section_ids: dict[str, int] = {}

    # --- media ---------------------------------------------------------------

    def _register_wiki_file(
        self,
        inner: str,
        section_id: str | None,
        context: str,
        origin: MediaOrigin = MediaOrigin.BODY,
    ) -> str:
        parts = split_top_level(inner)
        file_name = parts[0].strip()
        caption_parts: list[str] = []
        alt: str | None = None
        for param in (p.strip() for p in parts[1:]):
            if not param:
                continue
            lower = param.lower()
            if lower in CLEANUP_TOKENS:
                if lower in ("thumb", "thumbnail"):
                    context = "thumb"
                continue
            if lower.startswith("alt="):
                alt = param[4:].strip() or None
                continue
            if lower.startswith(_SKIPPED_PARAM_PREFIXES) or _SIZE_PARAM_RE.match(param):
                continue
            cleaned = clean_sentence_text(param)
            if cleaned:
                caption_parts.append(cleaned)
        return self.media.register(
            title=file_name,
            caption=" | ".join(caption_parts) or None,
            alt=alt,
            context=context,
            section_id=section_id,
            origin=origin,
        )

    def _strip_wiki_media(self, text: str, section_id: str | None) -> tuple[str, list[_Marker]]:
        out: list[str] = []
        out_len = 0
        markers: list[_Marker] = []
        pos = 0
        while True:
            m = _WIKI_MEDIA_OPEN_RE.search(text, pos)
            if not m:
                break
            end = _find_link_end(text, m.start())
            if end is None:
                break
            chunk = text[pos:m.start()]
            out.append(chunk)
            out_len += len(chunk)
            media_id = self._register_wiki_file(text[m.end():end - 2], section_id, "body")
            markers.append(_Marker(media_id, out_len))
            pos = end
        out.append(text[pos:])
        return "".join(out), markers

    def _strip_markdown_media(self, text: str, section_id: str | None) -> tuple[str, list[_Marker]]:
        out: list[str] = []
        out_len = 0
        markers: list[_Marker] = []
        pos = 0
        for m in _MD_MEDIA_RE.finditer(text):
            chunk = text[pos:m.start()]
            out.append(chunk)
            out_len += len(chunk)
            alt = clean_sentence_text(m.group(1))
            media_id = self.media.register(
                title=m.group(2).strip(),
                caption=alt or None,
                alt=alt or None,
                context="body",
                section_id=section_id,
                default_type=MediaType.IMAGE,
            )
            markers.append(_Marker(media_id, out_len))
            out.append(alt)
            out_len += len(alt)
            pos = m.end()
        out.append(text[pos:])
        return "".join(out), markers

    def register_infobox_media(self, block: str) -> None:
        """Obraz z pól infoboxu (image / caption / alt) → media z origin=infobox."""
        fields: dict[str, str] = {}
        for part in split_top_level(block[2:-2])[1:]:
            key, sep, value = part.partition("=")
            if sep:
                fields[key.strip().lower()] = value.strip()
        image = next((fields[k] for k in _INFOBOX_IMAGE_KEYS if fields.get(k)), None)
        if not image:
            return
        caption = next((fields[k] for k in _INFOBOX_CAPTION_KEYS if fields.get(k)), None)
        alt = next((fields[k] for k in _INFOBOX_ALT_KEYS if fields.get(k)), None)
        link = _WIKI_MEDIA_OPEN_RE.match(image)
        if link:
            end = _find_link_end(image, 0)
            if end is None:
                return
            self._register_wiki_file(image[link.end():end - 2], None, "infobox", MediaOrigin.INFOBOX)
            return
        self.media.register(
            title=image,
            caption=clean_sentence_text(caption) if caption else None,
            alt=alt,
            context="infobox",
            section_id=None,
            origin=MediaOrigin.INFOBOX,
        )

    # --- przypisy ------------------------------------------------------------

    def _strip_wiki_citations(self, text: str) -> tuple[str, list[_Marker], list[tuple[int, int, int]]]:
        out: list[str] = []
        out_len = 0
        markers: list[_Marker] = []
        edits: list[tuple[int, int, int]] = []
        pos = 0
        for m in _WIKI_REF_RE.finditer(text):
            chunk = text[pos:m.start()]
            out.append(chunk)
            out_len += len(chunk)
            if m.group(3) is None:
                citation_id = self.references.register_reference(m.group(1), None, m.group(0))
            else:
                citation_id = self.references.register_reference(m.group(2), m.group(3), m.group(0))
            markers.append(_Marker(citation_id, out_len))
            edits.append((m.start(), m.end(), 0))
            pos = m.end()
        out.append(text[pos:])
        return "".join(out), markers, edits

    def _strip_markdown_citations(self, text: str) -> tuple[str, list[_Marker], list[tuple[int, int, int]]]:
        out: list[str] = []
        out_len = 0
        markers: list[_Marker] = []
        edits: list[tuple[int, int, int]] = []
        pos = 0
        for m in _MD_LINK_REF_RE.finditer(text):
            chunk = text[pos:m.start()]
            out.append(chunk)
            out_len += len(chunk)
            label = clean_sentence_text(m.group(1))
            url = m.group(2)
            citation_id = self.references.register_link_reference(url, label or None)
            markers.append(_Marker(citation_id, out_len))
            replacement = label or url
            out.append(replacement)
            out_len += len(replacement)
            edits.append((m.start(), m.end(), len(replacement)))
            pos = m.end()
        out.append(text[pos:])
        return "".join(out), markers, edits

    # --- akapity / zdania ----------------------------------------------------

    def parse_paragraph(self, raw: str, para_id: str, section_id: str | None) -> Paragraph | None:
        trimmed = raw.strip()
        if not trimmed:
            return None

        if self.mode is ParseMode.WIKI:
            text, media_markers = self._strip_wiki_media(trimmed, section_id)
            text, cite_markers, edits = self._strip_wiki_citations(text)
        else:
            text, media_markers = self._strip_markdown_media(trimmed, section_id)
            text, cite_markers, edits = self._strip_markdown_citations(text)
        for marker in media_markers:
            marker.offset = _remap_offset(marker.offset, edits)

        # zamiana 1:1, offsety markerów pozostają ważne
        text = text.replace("\n", " ")
        spans = split_sentences(text)
        _snap_to_spans(media_markers, spans)

        sentences: list[Sentence] = []
        for span in spans:
            cleaned = clean_sentence_text(span.text)
            if not cleaned or _is_banner(cleaned):
                continue
            sentence_id = f"{para_id}-{len(sentences) + 1}"
            media_ids = _ids_in_span(media_markers, span)
            for media_id in media_ids:
                self.media.link_sentence(media_id, sentence_id)
            sentences.append(Sentence(
                sentence_id=sentence_id,
                text=cleaned,
                normalized_text=normalize_text(cleaned),
                tokens=tokenize(cleaned),
                citation_ids=_ids_in_span(cite_markers, span),
                media_ids=media_ids,
            ))
            self.raw_by_sentence[sentence_id] = span.text

        if not sentences:
            return None
        return Paragraph(para_id=para_id, sentences=sentences)

    def parse_block(self, text: str, prefix: str, section_id: str | None) -> list[Paragraph]:
        paragraphs: list[Paragraph] = []
        for block in _PARAGRAPH_SPLIT_RE.split(text):
            paragraph = self.parse_paragraph(block, f"{prefix}-{len(paragraphs) + 1}", section_id)
            if paragraph is not None:
                paragraphs.append(paragraph)
        return paragraphs

    def build_lead(self, text: str) -> Lead:
        return Lead(
            text_range=TextRange(start_offset=0, end_offset=len(text)),
            paragraphs=self.parse_block(text, "lead", None),
        )

    def build_sections(self, body: str) -> list[Section]:
        heading_re = _WIKI_HEADING_RE if self.mode is ParseMode.WIKI else _MD_HEADING_RE
        matches = list(heading_re.finditer(body))
        sections: list[Section] = []
        # stos: (poziom_nagłówka, section_id)
        stack: list[tuple[int, str]] = []

        for i, m in enumerate(matches):
            level = len(m.group(1))
            heading = clean_sentence_text(m.group(2)) or m.group(2).strip()
            next_start = matches[i + 1].start() if i + 1 < len(matches) else len(body)
            content = body[m.end():next_start].strip()
            section_id = _make_unique(f"sec-{slugify(heading, str(i + 1))}", self._section_ids)

            # Zdejmuj ze stosu sekcje na tym samym lub głębszym poziomie
            while stack and stack[-1][0] >= level:
                stack.pop()
            parent_id = stack[-1][1] if stack else None
            stack.append((level, section_id))

            paragraphs = self.parse_block(content, section_id, section_id)
            sections.append(Section(
                section_id=section_id,
                heading=heading,
                level=level,
                anchor=anchorize(heading),
                parent_section_id=parent_id,
                media_ids=_dedupe([
                    media_id
                    for p in paragraphs
                    for s in p.sentences
                    for media_id in s.media_ids
                ]),
                paragraphs=paragraphs,
            ))
        return sections

    def synthesize_lead(self, sections: list[Section]) -> Lead | None:
        """
        Lead zastępczy dla Markdown bez tekstu przed pierwszym nagłówkiem:
        kopia pierwszego akapitu z długim zdaniem (>80 znaków) albo
        pierwszego akapitu pierwszej sekcji.
        """
        candidate = next(
            (
                p for s in sections for p in s.paragraphs
                if any(len(sent.text) > 80 for sent in p.sentences)
            ),
            sections[0].paragraphs[0] if sections[0].paragraphs else None,
        )
        if candidate is None:
            return None
        cloned: list[Sentence] = []
        for idx, sentence in enumerate(candidate.sentences):
            sentence_id = f"lead-1-{idx + 1}"
            cloned.append(Sentence(
                sentence_id=sentence_id,
                text=sentence.text,
                normalized_text=sentence.normalized_text,
                tokens=list(sentence.tokens),
                citation_ids=list(sentence.citation_ids),
                media_ids=list(sentence.media_ids),
                claim_ids=[],
            ))
            self.raw_by_sentence[sentence_id] = self.raw_by_sentence.get(
                sentence.sentence_id, sentence.text
            )
        return Lead(
            text_range=TextRange(start_offset=0, end_offset=sum(len(s.text) for s in cloned)),
            paragraphs=[Paragraph(para_id="lead-1", sentences=cloned)],
        )

    def finish(
        self,
        topic: Topic,
        metadata: ArticleMetadata,
        lead: Lead,
        sections: list[Section],
    ) -> StructuredArticle:
        claims = build_claims(lead, sections, self.raw_by_sentence)
        return StructuredArticle(
            source=metadata.source,
            page_id=metadata.page_id,
            lang=metadata.lang or "en",
            title=metadata.title or topic.title,
            canonical_url=metadata.canonical_url,
            revision=Revision(id=metadata.revision_id, timestamp=metadata.revision_timestamp),
            lead=lead,
            sections=sections,
            media=self.media.to_list(),
            references=self.references.to_list(),
            claims=claims,
        )


# ---------------------------------------------------------------------------
# Publiczne API
# ---------------------------------------------------------------------------

def parse_wiki_article(topic: Topic, wikitext: str, metadata: ArticleMetadata) -> StructuredArticle:
    builder = _ArticleBuilder(ParseMode.WIKI)
    cleaned = strip_html_comments(wikitext)
    cleaned = strip_meta_templates(cleaned)
    cleaned, infobox = strip_infobox(cleaned)
    if infobox:
        builder.register_infobox_media(infobox)
    cleaned = strip_file_links(strip_tables(cleaned))

    first_heading = _WIKI_HEADING_RE.search(cleaned)
    lead_end = first_heading.start() if first_heading else len(cleaned)
    lead_text = cleaned[:lead_end].strip()
    body_text = cleaned[lead_end:].strip()

    lead = builder.build_lead(lead_text)
    sections = builder.build_sections(body_text)
    return builder.finish(topic, metadata, lead, sections)


def parse_markdown_article(
    topic: Topic,
    markdown: str,
    metadata: ArticleMetadata,
    citations: list[ExternalCitation] | None = None,
) -> StructuredArticle:
    builder = _ArticleBuilder(ParseMode.MARKDOWN)
    if citations:
        builder.references.register_external_references(citations, metadata.source)

    cleaned = strip_html_comments(markdown)
    cleaned = strip_leading_title_heading(cleaned, metadata.title or topic.title)
    lead_text, body_text = split_markdown_lead(cleaned)

    lead = builder.build_lead(lead_text)
    sections = builder.build_sections(body_text) if body_text else []

    if not lead.paragraphs and not sections and body_text.strip():
        lead = builder.build_lead(body_text)
    if not lead.paragraphs and sections:
        lead = builder.synthesize_lead(sections) or lead

    return builder.finish(topic, metadata, lead, sections)


def parse_article(
    topic: Topic,
    raw_text: str,
    metadata: ArticleMetadata,
    mode: ParseMode,
    citations: list[ExternalCitation] | None = None,
) -> StructuredArticle:
    """Wejście wspólne dla obu składni; citations dotyczą tylko trybu Markdown."""
    if mode is ParseMode.WIKI:
        return parse_wiki_article(topic, raw_text, metadata)
    return parse_markdown_article(topic, raw_text, metadata, citations)
