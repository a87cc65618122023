"""
article_parser/registries.py — akumulatory przypisów i mediów jednego parsowania.

ReferenceStore
  - przypisy nazwane (<ref name=...>): klucz = nazwa bez wielkości liter;
    pierwsza pełna definicja wygrywa nad późniejszymi pustymi powtórzeniami
  - przypisy anonimowe: r_auto_1, r_auto_2, ...
  - przypisy-linki Markdown: klucz = URL, id r_link_N
  - przypisy zewnętrzne (API): {prefix}_citation_{slug}

MediaRegistry
  - klucz = m_{slug nazwy pliku}; kolejne użycia tego samego pliku
    dopisują rekord usage
  - link_sentence() wypełnia pierwsze wolne sentence_id (FIFO)

Obie klasy żyją tylko w obrębie jednego wywołania parsera.
"""

from __future__ import annotations

import re

from data_model.article import (
    ExternalCitation,
    Media,
    MediaUsage,
    NormalizedReference,
    Reference,
)
from data_model.common import MediaOrigin, MediaType, ReferenceKind

from .text_cleaner import citation_slug, clean_sentence_text, slugify

_REF_NAME_RE = re.compile(r"""name\s*=\s*(?:"([^"]+)"|'([^']+)'|([^\s>/]+))""", re.IGNORECASE)
_CITE_TEMPLATE_RE = re.compile(r"\{\{\s*cite\s+([^\s|}]+)([^}]*)\}\}", re.IGNORECASE)

_IMAGE_EXT = {"jpg", "jpeg", "png", "gif", "svg", "webp", "tif", "tiff", "bmp"}
_AUDIO_EXT = {"ogg", "oga", "mp3", "wav", "flac", "mid", "midi", "opus"}
_VIDEO_EXT = {"webm", "ogv", "mp4", "mov", "mpg", "mpeg"}


# ---------------------------------------------------------------------------
# Normalizacja przypisu
# ---------------------------------------------------------------------------

def normalize_reference(inner: str | None) -> NormalizedReference:
    """
    Wyciąga pola z {{cite <typ> | klucz = wartość | ...}}.

    Bez szablonu cite tytułem jest oczyszczona treść przypisu.
    """
    if not inner:
        return NormalizedReference()
    m = _CITE_TEMPLATE_RE.search(inner)
    if not m:
        return NormalizedReference(title=clean_sentence_text(inner) or None)

    fields: dict[str, str] = {}
    for part in m.group(2).split("|"):
        key, sep, value = part.partition("=")
        if not sep or not key.strip():
            continue
        fields[key.strip().lower()] = value.strip()

    year_raw = fields.get("year") or fields.get("date") or ""
    year_match = re.search(r"\d{4}", year_raw)
    return NormalizedReference(
        type=ReferenceKind.from_template(m.group(1)),
        title=fields.get("title"),
        publisher=fields.get("publisher") or fields.get("work"),
        journal=fields.get("journal"),
        year=int(year_match.group()) if year_match else None,
        url=fields.get("url"),
        doi=fields.get("doi"),
    )


# ---------------------------------------------------------------------------
# ReferenceStore
# ---------------------------------------------------------------------------

class ReferenceStore:
    def __init__(self) -> None:
        self._counter = 1
        self._link_counter = 1
        self._issued: set[str] = set()
        self._by_name: dict[str, Reference] = {}
        self._anon: dict[str, Reference] = {}
        self._links: dict[str, Reference] = {}
        self._external: dict[str, Reference] = {}

    def _issue(self, base: str) -> str:
        """Unikalny citation_id; kolizja slugów → sufiks _2, _3, ..."""
        candidate, n = base, 1
        while candidate in self._issued:
            n += 1
            candidate = f"{base}_{n}"
        self._issued.add(candidate)
        return candidate

    def register_reference(self, attrs: str, inner: str | None, raw: str) -> str:
        """Rejestruje <ref ...>...</ref> lub <ref .../>; zwraca citation_id."""
        m = _REF_NAME_RE.search(attrs or "")
        name = next((g for g in m.groups() if g), None) if m else None
        if name:
            key = name.lower()
            existing = self._by_name.get(key)
            if existing is None:
                ref = Reference(
                    citation_id=self._issue(f"r_{citation_slug(name)}"),
                    name=name,
                    raw=raw.strip(),
                    normalized=normalize_reference(inner),
                )
                self._by_name[key] = ref
            elif inner and "</ref>" not in existing.raw.lower():
                # wcześniej widziane tylko puste <ref name=.../>: uzupełnij definicję
                existing.raw = raw.strip()
                existing.normalized = normalize_reference(inner)
            return self._by_name[key].citation_id

        citation_id = self._issue(f"r_auto_{self._counter}")
        self._counter += 1
        self._anon[citation_id] = Reference(
            citation_id=citation_id,
            name=None,
            raw=raw.strip(),
            normalized=normalize_reference(inner),
        )
        return citation_id

    def register_link_reference(self, url: str, title: str | None = None) -> str:
        key = url.strip()
        existing = self._links.get(key)
        if existing is not None:
            return existing.citation_id
        citation_id = self._issue(f"r_link_{self._link_counter}")
        self._link_counter += 1
        self._links[key] = Reference(
            citation_id=citation_id,
            name=title,
            raw=url,
            normalized=NormalizedReference(type=ReferenceKind.WEB, title=title or url, url=url),
        )
        return citation_id

    def register_external_references(self, entries: list[ExternalCitation], prefix: str) -> None:
        for entry in entries:
            url = (entry.url or "").strip()
            if not url:
                continue
            slug = slugify(entry.id, entry.id) if entry.id else slugify(url, str(self._link_counter))
            citation_id = f"{prefix}_citation_{slug}"
            if citation_id in self._external:
                continue
            self._issued.add(citation_id)
            description = (entry.description or "").strip()
            self._external[citation_id] = Reference(
                citation_id=citation_id,
                name=entry.title,
                raw=description or url,
                normalized=NormalizedReference(
                    type=ReferenceKind.WEB,
                    title=entry.title or entry.description or url,
                    url=url,
                ),
            )

    def to_list(self) -> list[Reference]:
        return [
            *self._by_name.values(),
            *self._anon.values(),
            *self._links.values(),
            *self._external.values(),
        ]


# ---------------------------------------------------------------------------
# MediaRegistry
# ---------------------------------------------------------------------------

def media_type_for(title: str, default: MediaType = MediaType.UNKNOWN) -> MediaType:
    """Typ medium po rozszerzeniu pliku / URL-a."""
    path = title.split("?", 1)[0].split("#", 1)[0]
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    if ext in _IMAGE_EXT:
        return MediaType.IMAGE
    if ext in _AUDIO_EXT:
        return MediaType.AUDIO
    if ext in _VIDEO_EXT:
        return MediaType.VIDEO
    return default


class MediaRegistry:
    """
    Media artykułu deduplikowane po nazwie pliku.

    Klucz to nazwa bez prefiksu File:/Image:, z '_' jak spacją i wielką
    pierwszą literą (konwencja MediaWiki). media_id to slug nazwy; różne
    pliki o tym samym slugu (np. nazwy spoza ASCII) dostają sufiks _2, _3, ...
    """

    def __init__(self) -> None:
        self._counter = 1
        self._media: dict[str, Media] = {}
        self._ids_by_key: dict[str, str] = {}

    def _issue(self, base: str) -> str:
        candidate, n = base, 1
        while candidate in self._media:
            n += 1
            candidate = f"{base}_{n}"
        return candidate

    def register(
        self,
        title: str,
        caption: str | None,
        alt: str | None,
        context: str,
        section_id: str | None,
        origin: MediaOrigin = MediaOrigin.BODY,
        default_type: MediaType = MediaType.UNKNOWN,
    ) -> str:
        bare = re.sub(r"^(?:File|Image):", "", title.strip(), flags=re.IGNORECASE)
        key = re.sub(r"[\s_]+", " ", bare).strip()
        key = key[:1].upper() + key[1:]
        usage = MediaUsage(context=context, section_id=section_id)
        known = self._ids_by_key.get(key)
        if known is not None:
            self._media[known].usage.append(usage)
            return known
        media_id = self._issue(f"m_{slugify(bare, str(self._counter))}")
        self._ids_by_key[key] = media_id
        self._media[media_id] = Media(
            media_id=media_id,
            title=f"File:{bare}",
            type=media_type_for(bare, default_type),
            origin=origin,
            caption=caption,
            alt_text=alt,
            license=None,
            usage=[usage],
        )
        self._counter += 1
        return media_id

    def link_sentence(self, media_id: str, sentence_id: str) -> None:
        entry = self._media.get(media_id)
        if entry is None:
            return
        for usage in entry.usage:
            if usage.sentence_id is None:
                usage.sentence_id = sentence_id
                return

    def to_list(self) -> list[Media]:
        return list(self._media.values())
