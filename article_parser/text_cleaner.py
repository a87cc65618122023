"""
article_parser/text_cleaner.py — prymitywy czyszczenia wikitekstu i Markdown.

Co usuwamy:
  - komentarze HTML (<!-- ... -->)
  - szablony {{...}} (licznik zagnieżdżeń, nie regex — szablony się zagnieżdżają)
  - przypisy {{efn}} / {{refn}} razem z treścią
  - infobox i szablony meta ({{Short description}}, {{Use dmy dates}}, ...)
  - tabele {| ... |} i linki do plików [[:File:...]]
  - znaczniki wiki-linków ([[cel|etykieta]] → etykieta), kursywę/pogrubienie ('' ''')
  - tagi HTML, &nbsp;, markery przypisów [12]

Co zachowujemy:
  - podwójne \n\n między akapitami (granice akapitów liczy parser)
  - treść etykiet linków i podpisów
  - wartości z {{convert}} / {{cvt}} / {{val}} / {{abbr}}

Niezbalansowane szablony nie są błędem: skaner zwraca None i tekst
przechodzi dalej nieoczyszczony.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Stałe
# ---------------------------------------------------------------------------

# Szablony meta usuwane z początku artykułu (pierwsze wystąpienie każdego).
META_TEMPLATE_WHITELIST = frozenset({
    "short description",
    "use american english",
    "use british english",
    "use dmy dates",
    "use mdy dates",
    "good article",
})

# Szablony wartości: zostaje pierwszy parametr (convert/cvt: "wartość jednostka").
VALUE_TEMPLATES = frozenset({"convert", "cvt", "val", "abbr"})

# Szablony przypisów usuwane razem z treścią.
FOOTNOTE_TEMPLATES = frozenset({"efn", "efn-ua", "note", "refn"})

_RANGE_WORDS = frozenset({"to", "-", "–", "and", "or", "x", "by", "+/-", "±"})

_COMMENT_RE        = re.compile(r"<!--.*?-->", re.DOTALL)
_PIPED_LINK_RE     = re.compile(r"\[\[([^|\]]+)\|([^\]]+)\]\]")
_PLAIN_LINK_RE     = re.compile(r"\[\[([^\]]+)\]\]")
_EXTERNAL_LINK_RE  = re.compile(r"\[(?:https?:)?//[^\s\]]+\s+([^\]]+)\]")
_BOLD_ITALIC_RE    = re.compile(r"''+")
_TAG_RE            = re.compile(r"<[^>]+>")
_FOOTNOTE_MARK_RE  = re.compile(r"\[\d+\]")
_WHITESPACE_RE     = re.compile(r"\s+")
_META_TEMPLATE_RE  = re.compile(r"\{\{\s*([^|}]+)([^}]*)\}\}")
_INFOBOX_START_RE  = re.compile(r"\{\{\s*Infobox[^{]*", re.IGNORECASE)
_TABLE_RE          = re.compile(r"\{\|.*?\|\}", re.DOTALL)
_FILE_LINK_RE      = re.compile(r"\[\[:(?:File|Image):[^\]]*\]\]", re.IGNORECASE)
_TOKEN_SPLIT_RE    = re.compile(r"[^a-z0-9]+")
_MD_HEADING_LINE_RE = re.compile(r"^#{1,6}\s+(.+?)\s*#*\s*$")
_MD_ANY_HEADING_RE  = re.compile(r"^#{1,6}\s+.*$", re.MULTILINE)


# ---------------------------------------------------------------------------
# Identyfikatory
# ---------------------------------------------------------------------------

def slugify(value: str, fallback: str) -> str:
    """Slug ASCII [a-z0-9-]; pusty wynik → fallback."""
    normalized = re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")
    return normalized or fallback


def citation_slug(value: str) -> str:
    normalized = re.sub(r"[^a-zA-Z0-9]+", "_", value).strip("_")
    return normalized.lower() if normalized else "ref"


def anchorize(value: str) -> str:
    """Kotwica w stylu MediaWiki: spacje → '_', bez znaków spoza [\\w:.-]."""
    anchor = re.sub(r"\s+", "_", value.strip())
    return re.sub(r"[^\w:.-]+", "", anchor)


# ---------------------------------------------------------------------------
# Szablony {{...}}
# ---------------------------------------------------------------------------

def strip_templates(text: str) -> str:
    """Usuwa wszystkie {{...}} (z zagnieżdżeniami); nadmiarowe '}}' są gubione."""
    out: list[str] = []
    depth = 0
    i = 0
    n = len(text)
    while i < n:
        pair = text[i:i + 2]
        if pair == "{{":
            depth += 1
            i += 2
            continue
        if pair == "}}":
            if depth > 0:
                depth -= 1
            i += 2
            continue
        if depth == 0:
            out.append(text[i])
        i += 1
    return "".join(out)


def find_template_end(text: str, start: int) -> int | None:
    """
    Zwraca indeks tuż za '}}' zamykającym szablon otwarty na pozycji `start`.

    None gdy szablon nie jest domknięty do końca tekstu.
    """
    depth = 0
    i = start
    n = len(text)
    while i < n - 1:
        pair = text[i:i + 2]
        if pair == "{{":
            depth += 1
            i += 2
            continue
        if pair == "}}":
            depth -= 1
            i += 2
            if depth == 0:
                return i
            continue
        i += 1
    return None


def split_top_level(inner: str) -> list[str]:
    """Dzieli po '|' leżących poza zagnieżdżonymi [[ ]] i {{ }}."""
    parts: list[str] = []
    depth = 0
    last = 0
    i = 0
    n = len(inner)
    while i < n:
        pair = inner[i:i + 2]
        if pair in ("[[", "{{"):
            depth += 1
            i += 2
            continue
        if pair in ("]]", "}}") and depth > 0:
            depth -= 1
            i += 2
            continue
        if inner[i] == "|" and depth == 0:
            parts.append(inner[last:i])
            last = i + 1
        i += 1
    parts.append(inner[last:])
    return parts


def _render_value_template(name: str, params: list[str]) -> str:
    positional = [p.strip() for p in params if "=" not in p]
    if not positional:
        return ""
    if name in ("convert", "cvt"):
        # {{convert|3|to|5|km}} → "3 to 5 km"
        count = 4 if len(positional) >= 4 and positional[1].lower() in _RANGE_WORDS else 2
        return " ".join(p for p in positional[:count] if p)
    if name == "val":
        unit = next(
            (p.split("=", 1)[1].strip() for p in params if p.strip().startswith(("u=", "ul="))),
            "",
        )
        return f"{positional[0]} {unit}".strip()
    return positional[0]


def expand_value_templates(text: str) -> str:
    """
    {{convert|384400|km}} → "384400 km", {{abbr|NASA|...}} → "NASA".

    Przypisy {{efn}} / {{refn}} wypadają w całości, pozostałe szablony
    zostają bez zmian (usuwa je dopiero strip_templates).
    """
    out: list[str] = []
    pos = 0
    while True:
        start = text.find("{{", pos)
        end = find_template_end(text, start) if start >= 0 else None
        if end is None:
            out.append(text[pos:])
            return "".join(out)
        out.append(text[pos:start])
        parts = split_top_level(text[start + 2:end - 2])
        name = parts[0].strip().lower()
        if name in VALUE_TEMPLATES:
            out.append(_render_value_template(name, parts[1:]))
        elif name not in FOOTNOTE_TEMPLATES:
            out.append(text[start:end])
        pos = end


def strip_meta_templates(text: str) -> str:
    seen: set[str] = set()

    def _drop(m: re.Match[str]) -> str:
        name = m.group(1).strip().lower()
        if name in META_TEMPLATE_WHITELIST and name not in seen:
            seen.add(name)
            return ""
        return m.group(0)

    return _META_TEMPLATE_RE.sub(_drop, text).lstrip()


def strip_infobox(text: str) -> tuple[str, str | None]:
    """
    Usuwa pierwszy szablon Infobox.

    Zwraca (tekst_bez_infoboxu, blok_infoboxu | None). Niedomknięty infobox
    zostaje w tekście.
    """
    m = _INFOBOX_START_RE.search(text)
    if not m:
        return text, None
    end = find_template_end(text, m.start())
    if end is None:
        return text, None
    block = text[m.start():end]
    before = text[:m.start()].rstrip()
    after = text[end:].lstrip()
    glued = f"{before}\n\n{after}" if before and after else (before or after)
    return glued.strip(), block


def strip_tables(text: str) -> str:
    return _TABLE_RE.sub("", text)


def strip_file_links(text: str) -> str:
    return _FILE_LINK_RE.sub("", text)


def strip_html_comments(text: str) -> str:
    return _COMMENT_RE.sub("", text).strip()


# ---------------------------------------------------------------------------
# Zdania
# ---------------------------------------------------------------------------

def clean_wiki_links(text: str) -> str:
    text = _PIPED_LINK_RE.sub(r"\2", text)
    return _PLAIN_LINK_RE.sub(r"\1", text)


def clean_sentence_text(text: str) -> str:
    """Tekst zdania bez znaczników: linki, szablony, tagi, &nbsp;, [n]."""
    cleaned = _COMMENT_RE.sub("", text)
    cleaned = clean_wiki_links(cleaned)
    cleaned = _EXTERNAL_LINK_RE.sub(r"\1", cleaned)
    cleaned = expand_value_templates(cleaned)
    cleaned = strip_templates(cleaned)
    cleaned = _BOLD_ITALIC_RE.sub("", cleaned)
    cleaned = cleaned.replace("&nbsp;", " ")
    cleaned = _TAG_RE.sub("", cleaned)
    cleaned = _FOOTNOTE_MARK_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    return cleaned.strip()


def normalize_text(text: str) -> str:
    return text.lower()


def tokenize(text: str) -> list[str]:
    return [t for t in _TOKEN_SPLIT_RE.split(text.lower()) if t]


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

def strip_leading_title_heading(markdown: str, title: str) -> str:
    """Usuwa pierwszą linię, jeśli to nagłówek równy tytułowi (bez wielkości liter)."""
    if not markdown.strip():
        return markdown
    first, _, rest = markdown.partition("\n")
    m = _MD_HEADING_LINE_RE.match(first)
    if not m:
        return markdown
    if m.group(1).strip().lower() == title.strip().lower():
        return rest.lstrip()
    return markdown


def split_markdown_lead(markdown: str) -> tuple[str, str]:
    """(lead, body) — granicą jest pierwsza linia nagłówka."""
    m = _MD_ANY_HEADING_RE.search(markdown)
    if not m:
        return markdown.strip(), ""
    return markdown[:m.start()].strip(), markdown[m.start():].strip()
