"""
fetcher/http.py — wspólne GET-y z nagłówkiem User-Agent.

Wszystkie wyjątki requests są zamieniane na FetchError z URL-em
w komunikacie; wywołujący nie musi znać requests.
"""

from __future__ import annotations

import json
from typing import Any

import requests

from .errors import FetchError

USER_AGENT = "wikidrift/0.1 (article comparison; python-requests)"
DEFAULT_TIMEOUT = 30


def get_text(url: str, params: dict[str, str] | None = None, timeout: int = DEFAULT_TIMEOUT) -> str:
    try:
        resp = requests.get(url, params=params, timeout=timeout, headers={"User-Agent": USER_AGENT})
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"{url}: {exc}") from exc
    resp.encoding = resp.encoding or resp.apparent_encoding or "utf-8"
    return resp.text


def get_json(url: str, params: dict[str, str] | None = None, timeout: int = DEFAULT_TIMEOUT) -> Any:
    raw = get_text(url, params=params, timeout=timeout)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise FetchError(f"{url}: odpowiedź nie jest JSON-em ({exc})") from exc
