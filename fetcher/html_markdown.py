"""
fetcher/html_markdown.py — strona HTML Grokipedii → Markdown dla parsera.

Bloki:
  h1–h6             → "#"*poziom + tekst
  blok liściasty    → akapit; linki absolutne → [tekst](href),
                      obrazy → ![alt](src), względne linki → sam tekst
  blok kontenerowy  → rekurencja w dzieci (bez duplikowania treści)

Przed konwersją usuwany jest szum (skrypty, nawigacja, infobox,
przypisy [n]); po konwersji linie z interfejsu Grokipedii
("Search ⌘K", "Fact-checked by Grok ...").
"""

from __future__ import annotations

import json
import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

_HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
_HEADING_LEVEL: dict[str, int] = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_BLOCK_TAGS: set[str] = {
    "div", "p", "article", "section", "main", "blockquote",
    "li", "ul", "ol", "dl", "dd", "dt",
    "td", "th", "tr", "table",
    "figure", "figcaption", "details", "summary",
} | _HEADING_TAGS

_NOISE_TAGS = {"script", "style", "noscript", "template", "svg", "button", "form"}
_NOISE_SELECTORS = (
    "link[rel='stylesheet']",
    ".mw-editsection",
    ".reference",
    "sup.reference",
    ".mw-empty-elt",
    ".mw-jump-link",
    "table.infobox",
    "table.vertical-navbox",
    "table.navbox",
    "table.metadata",
    "#toc",
    "div.shortdescription",
    "div.hatnote",
    "div.navbox",
    "header",
    "nav",
    "footer",
    "aside",
    ".sidebar",
    ".drawer",
    ".site-header",
    ".site-footer",
)
_CONTENT_ROOTS = (".mw-parser-output", "article", "main")

_BANNER_MARKERS = ("fact-checked by grok", "search ⌘k", "search cmd+k")
_FOOTNOTE_RE = re.compile(r"\\?\[\d+\\?\]")
_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Inline
# ---------------------------------------------------------------------------

def _image_markdown(img: Tag, base_url: str) -> str:
    src = img.get("src") or img.get("data-src")
    if not src or not isinstance(src, str):
        return ""
    alt = img.get("alt")
    alt_text = alt.strip() if isinstance(alt, str) else ""
    return f"![{alt_text}]({urljoin(base_url, src.strip())})"


def _inline_markdown(el: Tag, base_url: str) -> str:
    parts: list[str] = []
    for child in el.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
            continue
        if not isinstance(child, Tag) or child.name in _NOISE_TAGS:
            continue
        if child.name == "img":
            parts.append(f" {_image_markdown(child, base_url)} ")
        elif child.name == "a":
            text = child.get_text(" ", strip=True)
            href = child.get("href")
            if text and isinstance(href, str) and href.startswith(("http://", "https://")):
                parts.append(f"[{text}]({href})")
            else:
                parts.append(text)
        elif child.name == "br":
            parts.append(" ")
        else:
            parts.append(_inline_markdown(child, base_url))
    text = _FOOTNOTE_RE.sub("", "".join(parts))
    return _WHITESPACE_RE.sub(" ", text).strip()


# ---------------------------------------------------------------------------
# Bloki
# ---------------------------------------------------------------------------

def _extract_blocks(root: Tag, base_url: str) -> list[tuple[bool, int, str]]:
    """
    Spłaszczona lista bloków (is_heading, level, markdown).

    - Nagłówek: cały tekst, bez rekurencji w dzieci.
    - Blok liściasty (brak blokowych dzieci): tekst inline.
    - Blok kontenerowy: rekurencja w dzieci, sam nic nie emituje.
    """
    blocks: list[tuple[bool, int, str]] = []

    def walk(el: Tag) -> None:
        name = el.name
        if name in _NOISE_TAGS:
            return
        if name in _HEADING_TAGS:
            text = el.get_text(" ", strip=True)
            if text:
                blocks.append((True, _HEADING_LEVEL[name], _WHITESPACE_RE.sub(" ", text)))
            return
        if name == "img":
            image = _image_markdown(el, base_url)
            if image:
                blocks.append((False, 0, image))
            return
        if name in _BLOCK_TAGS:
            has_block_child = any(
                isinstance(c, Tag) and c.name in _BLOCK_TAGS
                for c in el.children
            )
            if not has_block_child:
                text = _inline_markdown(el, base_url)
                if text:
                    blocks.append((False, 0, text))
                return
        for child in el.children:
            if isinstance(child, Tag):
                walk(child)

    walk(root)
    return blocks


def _content_root(soup: BeautifulSoup) -> Tag:
    for selector in _CONTENT_ROOTS:
        found = soup.select_one(selector)
        if found is not None:
            return found
    body = soup.find("body")
    return body if isinstance(body, Tag) else soup


def strip_grok_banner(markdown: str) -> str:
    """Usuwa linie z interfejsu Grokipedii; puste linie (granice akapitów) zostają."""
    kept = [
        line for line in markdown.split("\n")
        if not any(marker in line.strip().lower() for marker in _BANNER_MARKERS)
    ]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(kept)).strip()


def html_to_markdown(html: str, base_url: str, title: str | None = None) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()
    for tag in soup.select(", ".join(_NOISE_SELECTORS)):
        tag.decompose()

    blocks = _extract_blocks(_content_root(soup), base_url)
    lines = [
        f"{'#' * level} {text}" if is_heading else text
        for is_heading, level, text in blocks
    ]
    markdown = strip_grok_banner("\n\n".join(lines))

    if title:
        first = blocks[0] if blocks else None
        if not (first and first[0] and first[2].strip().lower() == title.strip().lower()):
            markdown = f"# {title}\n\n{markdown}".strip()
    return markdown


def _looks_like_html(value: str) -> bool:
    return bool(re.match(r"^<[^>]+>", value.strip()))


def extract_grok_content(raw: str, base_url: str, title: str | None = None) -> str:
    """
    Treść strony: JSON z polem content/body/text/html, HTML albo gotowy Markdown.
    """
    trimmed = raw.strip()
    if not trimmed:
        return f"# {title}" if title else ""
    try:
        data = json.loads(trimmed)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict):
        content = next(
            (data[k] for k in ("content", "body", "text", "html") if isinstance(data.get(k), str) and data[k]),
            None,
        )
        if content is not None:
            trimmed = content.strip()

    if _looks_like_html(trimmed):
        return html_to_markdown(trimmed, base_url, title)
    content = strip_grok_banner(trimmed)
    return f"# {title}\n\n{content}".strip() if title else content
