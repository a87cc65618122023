"""Heurystyczne miary tonu."""

import pytest

from analyzer.bias_metrics import compute_bias_metrics, count_loaded_terms


class TestBiasMetrics:
    def test_deltas(self):
        metrics = compute_bias_metrics("The data is reliable.", "The data is a hoax and fake.")
        assert metrics.subjectivity_delta == pytest.approx(0.036)
        assert metrics.polarity_delta == pytest.approx(-0.536)

    def test_empty_texts(self):
        metrics = compute_bias_metrics("", "")
        assert metrics.subjectivity_delta == 0.0
        assert metrics.polarity_delta == 0.0
        assert metrics.loaded_terms_reference == {}

    def test_loaded_terms_counted(self):
        counts = count_loaded_terms("So-called experts, critics   say, push propaganda. Propaganda again.")
        assert counts == {"so-called": 1, "critics say": 1, "propaganda": 2}

    def test_loaded_terms_whole_words(self):
        assert count_loaded_terms("A biased agendas list.") == {}
