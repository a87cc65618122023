"""
data_model/schema.py — JSON Schema snapshotu StructuredArticle.

validate_article_dict(data, path) sprawdza słownik wczytany z
`*.parsed.json` przed odtworzeniem dataclass; pierwsze naruszenie
schematu zamieniane jest na SnapshotError z JSON Pointerem.
"""

from __future__ import annotations

from typing import Any

import jsonschema
from jsonschema.exceptions import best_match

from .errors import SnapshotError

_NULLABLE_STR = {"type": ["string", "null"]}
_STR_LIST = {"type": "array", "items": {"type": "string"}}

_SENTENCE = {
    "type": "object",
    "required": ["sentence_id", "text"],
    "properties": {
        "sentence_id":     {"type": "string"},
        "text":            {"type": "string"},
        "normalized_text": {"type": "string"},
        "tokens":          _STR_LIST,
        "citation_ids":    _STR_LIST,
        "media_ids":       _STR_LIST,
        "claim_ids":       _STR_LIST,
    },
}

_PARAGRAPH = {
    "type": "object",
    "required": ["para_id", "sentences"],
    "properties": {
        "para_id":   {"type": "string"},
        "sentences": {"type": "array", "items": _SENTENCE},
    },
}

_NUMBER = {
    "type": "object",
    "required": ["raw", "value"],
    "properties": {
        "raw":   {"type": "string"},
        "value": {"type": "number"},
        "unit":  _NULLABLE_STR,
    },
}

ARTICLE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "StructuredArticle",
    "type": "object",
    "required": ["source", "lead", "sections", "references", "claims"],
    "properties": {
        "source":        {"enum": ["wikipedia", "grokipedia"]},
        "page_id":       {"type": "string"},
        "lang":          {"type": "string"},
        "title":         {"type": "string"},
        "canonical_url": {"type": "string"},
        "revision": {
            "type": "object",
            "properties": {
                "id":        {"type": ["string", "integer"]},
                "timestamp": {"type": "string"},
            },
        },
        "lead": {
            "type": "object",
            "required": ["paragraphs"],
            "properties": {
                "text_range": {
                    "type": "object",
                    "required": ["start_offset", "end_offset"],
                    "properties": {
                        "start_offset": {"type": "integer", "minimum": 0},
                        "end_offset":   {"type": "integer", "minimum": 0},
                    },
                },
                "paragraphs": {"type": "array", "items": _PARAGRAPH},
            },
        },
        "sections": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["section_id", "heading", "paragraphs"],
                "properties": {
                    "section_id":        {"type": "string"},
                    "heading":           {"type": "string"},
                    "level":             {"type": "integer", "minimum": 1, "maximum": 6},
                    "anchor":            {"type": "string"},
                    "parent_section_id": _NULLABLE_STR,
                    "media_ids":         {"type": ["array", "null"], "items": {"type": "string"}},
                    "paragraphs":        {"type": "array", "items": _PARAGRAPH},
                },
            },
        },
        "media": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["media_id"],
                "properties": {
                    "media_id": {"type": "string"},
                    "type":     {"enum": ["image", "audio", "video", "unknown"]},
                    "origin":   {"enum": ["infobox", "body"]},
                    "usage":    {"type": "array", "items": {"type": "object"}},
                },
            },
        },
        "references": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["citation_id"],
                "properties": {
                    "citation_id": {"type": "string"},
                    "name":        _NULLABLE_STR,
                    "raw":         {"type": "string"},
                    "normalized": {
                        "type": "object",
                        "properties": {
                            "year": {"type": ["integer", "null"]},
                            "url":  _NULLABLE_STR,
                        },
                    },
                },
            },
        },
        "claims": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["claim_id", "text"],
                "properties": {
                    "claim_id":     {"type": "string"},
                    "text":         {"type": "string"},
                    "entities": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["label"],
                            "properties": {"label": {"type": "string"}},
                        },
                    },
                    "time": {
                        "type": ["object", "null"],
                        "properties": {
                            "unit":  {"type": "string"},
                            "value": {"type": "number"},
                        },
                    },
                    "numbers":      {"type": "array", "items": _NUMBER},
                    "citation_ids": _STR_LIST,
                },
            },
        },
    },
}


def validate_article_dict(data: Any, path: str) -> None:
    """Rzuca SnapshotError przy pierwszym naruszeniu ARTICLE_SCHEMA."""
    validator = jsonschema.Draft202012Validator(ARTICLE_SCHEMA)
    e = best_match(validator.iter_errors(data))
    if e is None:
        return
    pointer = (
        "/" + "/".join(str(p) for p in e.absolute_path)
        if e.absolute_path
        else "/"
    )
    raise SnapshotError(path, f"naruszenie schematu na ścieżce {pointer}: {e.message}")
