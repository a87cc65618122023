"""fetcher/errors.py — błędy warstwy HTTP."""

from __future__ import annotations


class FetchError(RuntimeError):
    """Nieudane pobranie (błąd sieci, status HTTP ≠ 2xx, niepoprawny JSON)."""
