"""
analyzer/cache.py — sprawdzenie zapisanej analizy (analysis/<topic>.json).

Statusy:
  missing   brak pliku
  invalid   plik nieczytelny / brak meta.content_hash lub meta.generated_at
  mismatch  hash treści inny niż oczekiwany
  fresh     hash zgodny i wiek ≤ TTL
  stale     hash zgodny, ale TTL minął
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from pathlib import Path
from typing import Any

from .config import CACHE_TTL_HOURS


class CacheStatus(StrEnum):
    MISSING  = "missing"
    FRESH    = "fresh"
    STALE    = "stale"
    MISMATCH = "mismatch"
    INVALID  = "invalid"


@dataclass(slots=True)
class CacheProbe:
    status: CacheStatus
    analysis: dict[str, Any] | None = None
    reason: str | None = None


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def probe_cached_analysis(
    path: Path,
    expected_hash: str,
    ttl_hours: int = CACHE_TTL_HOURS,
    now: datetime | None = None,
) -> CacheProbe:
    if not path.exists():
        return CacheProbe(CacheStatus.MISSING)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        return CacheProbe(CacheStatus.INVALID, reason=str(exc))
    if not isinstance(payload, dict):
        return CacheProbe(CacheStatus.INVALID, reason="analysis is not a JSON object")

    meta = payload.get("meta")
    if not isinstance(meta, dict):
        meta = {}
    content_hash = meta.get("content_hash")
    generated_at = meta.get("generated_at")
    if not content_hash or not generated_at:
        return CacheProbe(CacheStatus.INVALID, payload, "missing metadata")
    try:
        generated = _parse_timestamp(str(generated_at))
    except ValueError as exc:
        return CacheProbe(CacheStatus.INVALID, payload, str(exc))

    if content_hash != expected_hash:
        return CacheProbe(CacheStatus.MISMATCH, payload, "content hash changed")
    age = (now or datetime.now(timezone.utc)) - generated
    if age <= timedelta(hours=ttl_hours):
        return CacheProbe(CacheStatus.FRESH, payload)
    return CacheProbe(CacheStatus.STALE, payload, "cache expired")
