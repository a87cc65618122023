"""
llm_query — integracja z modelami językowymi.

Publiczne API:
  call_gemini(prompt, model, api_key, max_retries, json_mode) -> str
  GeminiZeroShotClassifier(model, api_key).classify(sentence, labels)
                                                              -> dict[str, float]
  parse_scores(raw, labels)                                   -> dict[str, float]
  GeminiQuotaError                                            limit zapytań wyczerpany
"""

from .gemini import DEFAULT_MODEL, GeminiQuotaError, RetryPolicy, call_gemini
from .classifier import GeminiZeroShotClassifier, build_classifier_prompt, parse_scores

__all__ = [
    "call_gemini",
    "DEFAULT_MODEL",
    "GeminiQuotaError",
    "RetryPolicy",
    "GeminiZeroShotClassifier",
    "build_classifier_prompt",
    "parse_scores",
]
