"""
llm_query/classifier.py — klasyfikator zero-shot na Gemini.

GeminiZeroShotClassifier.classify(sentence, labels) -> {etykieta: wynik}

Model dostaje zdanie i listę etykiet, odpowiada obiektem JSON
{"<etykieta>": <liczba 0..1>, ...}. Wyniki są przycinane do [0, 1]
i normalizowane do sumy 1 (jedna etykieta na zdanie, jak w klasycznym
zero-shot z multi_label=False). Brakujące etykiety dostają 0.

Błąd modelu lub nieparsowalna odpowiedź → wyjątek; decyzję o fallbacku
podejmuje wywołujący (analyzer.bias).
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence

from .gemini import DEFAULT_MODEL, call_gemini

_PROMPT = """\
You are a zero-shot text classifier for encyclopedia style review.
Score how well the sentence fits each label. Return ONLY a JSON object whose
keys are exactly the labels below and whose values are numbers between 0 and 1.

Labels:
{labels}

Sentence:
{sentence}
"""


def build_classifier_prompt(sentence: str, labels: Sequence[str]) -> str:
    return _PROMPT.format(
        labels="\n".join(f"- {label}" for label in labels),
        sentence=sentence.strip(),
    )


def _strip_fences(raw: str) -> str:
    """Usuwa otoczkę ```json / ``` z odpowiedzi modelu."""
    text = raw.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        if first_newline != -1:
            text = text[first_newline + 1:]
    if text.endswith("```"):
        text = text[: text.rfind("```")].rstrip()
    return text


def parse_scores(raw: str, labels: Sequence[str]) -> dict[str, float]:
    """
    Parsuje odpowiedź modelu na wyniki etykiet.

    Raises:
        ValueError: odpowiedź nie jest obiektem JSON z liczbami.
    """
    try:
        data = json.loads(_strip_fences(raw))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Odpowiedź klasyfikatora nie jest JSON-em: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Odpowiedź klasyfikatora nie jest obiektem JSON.")

    lowered = {str(k).strip().lower(): v for k, v in data.items()}
    scores: dict[str, float] = {}
    for label in labels:
        value = lowered.get(label.lower(), 0.0)
        try:
            scores[label] = min(1.0, max(0.0, float(value)))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Niepoprawny wynik dla etykiety '{label}': {value!r}") from exc

    total = sum(scores.values())
    if total > 0:
        scores = {label: value / total for label, value in scores.items()}
    return scores


class GeminiZeroShotClassifier:
    """Zero-shot przez prompt JSON; `call` pozwala podmienić transport (testy)."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        call: Callable[..., str] = call_gemini,
    ) -> None:
        self.model = model
        self.api_key = api_key
        self._call = call

    def classify(self, sentence: str, labels: Sequence[str]) -> dict[str, float]:
        raw = self._call(
            build_classifier_prompt(sentence, labels),
            model=self.model,
            api_key=self.api_key,
            json_mode=True,
        )
        return parse_scores(raw, labels)
