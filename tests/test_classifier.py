"""Klasyfikator zero-shot na Gemini: parsowanie odpowiedzi, prompt, brak klucza."""

import pytest
from google.genai import errors as genai_errors

import llm_query.gemini as gemini
from llm_query import (
    GeminiQuotaError,
    GeminiZeroShotClassifier,
    RetryPolicy,
    build_classifier_prompt,
    call_gemini,
    parse_scores,
)
from llm_query.gemini import is_daily_quota, retry_hint

LABELS = ["neutral encyclopedic tone", "promotional or biased language"]


class TestParseScores:
    def test_fenced_json_clipped_and_normalized(self):
        raw = '```json\n{"neutral encyclopedic tone": 3, "promotional or biased language": 1}\n```'
        assert parse_scores(raw, LABELS) == {
            "neutral encyclopedic tone": 0.5,
            "promotional or biased language": 0.5,
        }

    def test_case_insensitive_keys_and_missing_labels(self):
        scores = parse_scores('{"Neutral Encyclopedic Tone": 0.6}', [*LABELS, "other"])
        assert scores == {"neutral encyclopedic tone": 1.0, "promotional or biased language": 0.0, "other": 0.0}

    def test_all_zero_kept(self):
        assert parse_scores("{}", LABELS) == {label: 0.0 for label in LABELS}

    @pytest.mark.parametrize("raw", ["not json", "[0.1, 0.9]", '{"neutral encyclopedic tone": "high"}'])
    def test_invalid_responses(self, raw):
        with pytest.raises(ValueError):
            parse_scores(raw, LABELS)


class TestClassifier:
    def test_prompt_lists_labels(self):
        prompt = build_classifier_prompt("  The Moon is great.  ", LABELS)
        assert "- neutral encyclopedic tone" in prompt
        assert "The Moon is great.\n" in prompt

    def test_classify_uses_json_mode(self):
        seen = {}

        def fake_call(prompt, **kwargs):
            seen.update(kwargs)
            return '{"neutral encyclopedic tone": 0.2, "promotional or biased language": 0.8}'

        classifier = GeminiZeroShotClassifier(model="test-model", api_key="key", call=fake_call)
        scores = classifier.classify("The Moon is great.", LABELS)
        assert scores["promotional or biased language"] == pytest.approx(0.8)
        assert seen == {"model": "test-model", "api_key": "key", "json_mode": True}


class TestGemini:
    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            call_gemini("prompt")

    def test_retry_delay_from_message(self):
        assert retry_hint(Exception("Please retry in 18.8s.")) == 18.8
        assert retry_hint(Exception("no hint")) is None

    def test_daily_quota(self):
        assert is_daily_quota(Exception("GenerateRequestsPerDayPerProjectPerModel"))
        assert not is_daily_quota(Exception("PerMinute"))

    def test_backoff_without_hint(self):
        policy = RetryPolicy()
        assert [policy.delay_for(n, None) for n in (1, 2, 3)] == [10.0, 20.0, 40.0]
        assert policy.delay_for(1, 2.5) == 2.5


def _rate_limited(message: str) -> genai_errors.ClientError:
    return genai_errors.ClientError(429, {"error": {"code": 429, "message": message, "status": "RESOURCE_EXHAUSTED"}})


class _Text:
    def __init__(self, text):
        self.text = text


class _ScriptedModels:
    """generate_content zwraca / rzuca kolejne elementy `script`."""

    def __init__(self, script):
        self.script = list(script)
        self.configs = []

    def generate_content(self, *, model, contents, config=None):
        self.configs.append(config)
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return _Text(item)


@pytest.fixture
def scripted(monkeypatch):
    def install(*script):
        models = _ScriptedModels(script)

        class _Client:
            pass

        client = _Client()
        client.models = models
        monkeypatch.setattr(gemini, "_client", lambda key: client)
        return models
    return install


class TestRateLimit:
    def test_retries_after_hinted_delay(self, scripted, caplog):
        models = scripted(_rate_limited("Please retry in 1.5s."), "{}")
        sleeps = []
        with caplog.at_level("WARNING", logger="llm_query.gemini"):
            assert call_gemini("p", api_key="key", sleep=sleeps.append) == "{}"
        assert sleeps == [1.5]
        assert len(models.configs) == 2
        assert "ponowienie 1/3" in caplog.text

    def test_gives_up_after_max_retries(self, scripted):
        scripted(*[_rate_limited("slow down")] * 3)
        sleeps = []
        with pytest.raises(GeminiQuotaError) as info:
            call_gemini("p", model="m", api_key="key", max_retries=2, sleep=sleeps.append)
        assert info.value.model == "m"
        assert sleeps == [10.0, 20.0]

    def test_daily_quota_not_retried(self, scripted):
        scripted(_rate_limited("Quota GenerateRequestsPerDayPerProjectPerModel exceeded"))
        sleeps = []
        with pytest.raises(GeminiQuotaError, match="Dzienny limit"):
            call_gemini("p", api_key="key", sleep=sleeps.append)
        assert sleeps == []

    def test_other_client_errors_propagate(self, scripted):
        scripted(genai_errors.ClientError(400, {"error": {"code": 400, "message": "bad", "status": "INVALID_ARGUMENT"}}))
        with pytest.raises(genai_errors.ClientError):
            call_gemini("p", api_key="key")

    def test_json_mode_config(self, scripted):
        models = scripted("{}", "{}")
        call_gemini("p", api_key="key")
        call_gemini("p", api_key="key", json_mode=True)
        plain, structured = models.configs
        assert plain is None
        assert structured.response_mime_type == "application/json"
        assert structured.temperature == 0.0

    def test_empty_response(self, scripted):
        scripted(None)
        with pytest.raises(RuntimeError, match="pustą odpowiedź"):
            call_gemini("p", api_key="key")
