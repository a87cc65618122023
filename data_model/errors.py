"""data_model/errors.py — wyjątki warstwy danych (snapshoty, katalog tematów)."""

from __future__ import annotations


class SnapshotError(ValueError):
    """Brakujący lub uszkodzony snapshot artykułu / analizy.

    Komunikat zawsze zawiera ścieżkę snapshotu.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class TopicError(ValueError):
    """Nieznany temat lub niepoprawny katalog tematów."""
