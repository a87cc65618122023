"""
llm_query/gemini.py — transport do Gemini API dla klasyfikatora stronniczości.

Zmienne środowiskowe (także z pliku .env w katalogu projektu):
  GEMINI_API_KEY        klucz API (wymagany dla `wdrift analyse --semantic`)
  WDRIFT_GEMINI_MODEL   identyfikator modelu (domyślnie gemini-2.5-flash)

Limity zapytań:
  - 429 z limitem minutowym → czekamy (podpowiedź "retry in Ns" z API albo
    backoff 5·2^n s) i ponawiamy, najwyżej RetryPolicy.max_retries razy
  - 429 z limitem dziennym (…PerDay…) → GeminiQuotaError od razu
  - pozostałe błędy klienta / serwera → propagowane bez zmian

Publiczne API:
  call_gemini(prompt, model, api_key, max_retries, json_mode) -> str
  GeminiQuotaError, RetryPolicy, retry_hint(error), is_daily_quota(error)
"""

from __future__ import annotations

import functools
import logging
import os
import pathlib
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, cast

from dotenv import load_dotenv

try:
    from google import genai as _genai
    from google.genai import errors as _genai_errors
    from google.genai import types as _genai_types
except ImportError as _exc:
    raise ImportError(
        "Brakuje pakietu google-genai. Zainstaluj: pip install google-genai"
    ) from _exc

load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_MODEL   = os.getenv("WDRIFT_GEMINI_MODEL", "gemini-2.5-flash")
API_KEY_ENV     = "GEMINI_API_KEY"
DEFAULT_RETRIES = 3

_RATE_LIMITED   = 429
_HINT_RE        = re.compile(r"retry[^\d]*(\d+(?:\.\d+)?)\s*s", re.IGNORECASE)


class GeminiQuotaError(RuntimeError):
    """Limit zapytań wyczerpany (dzienny albo po wszystkich ponowieniach)."""

    def __init__(self, model: str, message: str) -> None:
        super().__init__(message)
        self.model = model


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_retries: int = DEFAULT_RETRIES
    base_delay: float = 5.0

    def delay_for(self, attempt: int, hint: float | None) -> float:
        """Podpowiedź z API ma pierwszeństwo przed backoffem."""
        if hint is not None:
            return hint
        return self.base_delay * 2 ** attempt


class _Response(Protocol):
    text: str | None


class _ModelsAPI(Protocol):
    def generate_content(self, *, model: str, contents: str, config: Any = None) -> _Response:
        ...


@functools.lru_cache(maxsize=4)
def _client(api_key: str) -> "_genai.Client":
    # jeden klient na klucz: partie klasyfikatora wołają call_gemini z wielu wątków
    return _genai.Client(api_key=api_key)


def retry_hint(error: Exception) -> float | None:
    """Sekundy oczekiwania sugerowane w błędzie 429 ("retry in 18.8s")."""
    m = _HINT_RE.search(str(error))
    if m:
        return float(m.group(1))
    delay = getattr(error, "retry_delay", None)
    return float(delay) if delay is not None else None


def is_daily_quota(error: Exception) -> bool:
    return "PerDay" in str(error)


def _generation_config(json_mode: bool) -> Any:
    if not json_mode:
        return None
    # wyniki etykiet mają być powtarzalne między uruchomieniami
    return _genai_types.GenerateContentConfig(response_mime_type="application/json", temperature=0.0)


def call_gemini(
    prompt: str,
    model: str = DEFAULT_MODEL,
    api_key: str | None = None,
    max_retries: int = DEFAULT_RETRIES,
    json_mode: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Wysyła prompt i zwraca tekst odpowiedzi modelu.

    Raises:
        ValueError:                   brak klucza API
        GeminiQuotaError:             limit dzienny / ponowienia wyczerpane
        RuntimeError:                 pusta odpowiedź modelu
        google.genai.errors.APIError: pozostałe błędy API
    """
    key = api_key or os.getenv(API_KEY_ENV)
    if not key:
        raise ValueError(
            f"Brak klucza Gemini API: ustaw {API_KEY_ENV} (środowisko lub .env) "
            f"albo przekaż api_key."
        )

    policy = RetryPolicy(max_retries=max_retries)
    models = cast(_ModelsAPI, _client(key).models)
    config = _generation_config(json_mode)

    attempt = 0
    while True:
        try:
            response = models.generate_content(model=model, contents=prompt, config=config)
        except _genai_errors.ClientError as exc:
            if exc.code != _RATE_LIMITED:
                raise
            if is_daily_quota(exc):
                raise GeminiQuotaError(model, f"Dzienny limit zapytań dla {model} wyczerpany: {exc}") from exc
            attempt += 1
            if attempt > policy.max_retries:
                raise GeminiQuotaError(
                    model, f"Rate-limit {model} po {policy.max_retries} ponowieniach."
                ) from exc
            delay = policy.delay_for(attempt, retry_hint(exc))
            logger.warning("Gemini 429 (%s), ponowienie %d/%d za %.0fs", model, attempt, policy.max_retries, delay)
            sleep(delay)
            continue

        if response.text is None:
            raise RuntimeError(f"Gemini ({model}) zwrócił pustą odpowiedź.")
        return response.text
