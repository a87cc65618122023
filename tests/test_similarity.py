"""Miary podobieństwa, operacje na listach nazw i diff."""

import pytest

from analyzer.config import DIFF_MAX_LINES, DIFF_TRUNCATED_MARKER
from analyzer.similarity import (
    approx_similarity,
    diff_sample,
    difference,
    normalize_sentence,
    normalize_whitespace,
    sentence_similarity,
    shingle_overlap,
    shingles,
    unique_list,
    word_similarity,
)


class TestApproxSimilarity:
    def test_identical(self):
        assert approx_similarity("abc", "abc") == 1.0

    def test_one_empty(self):
        assert approx_similarity("", "abc") == 0.0
        assert approx_similarity("abc", "") == 0.0

    def test_lcs_ratio(self):
        # LCS = 3, (2 * 3) / (4 + 4)
        assert approx_similarity("abcd", "abce") == pytest.approx(0.75)

    def test_symmetric(self):
        a, b = "the moon is bright", "a moon was bright"
        assert approx_similarity(a, b) == pytest.approx(approx_similarity(b, a))


class TestAggregateMeasures:
    def test_word_similarity_counts_reference_tokens(self):
        assert word_similarity("the moon is round", "the moon is flat") == 0.75

    def test_word_similarity_empty_inputs(self):
        assert word_similarity("", "") == 1.0
        assert word_similarity("moon", "") == 0.0

    def test_sentence_similarity_ignores_case(self):
        assert sentence_similarity(["Alpha beta gamma."], ["alpha beta gamma."]) == 1.0

    def test_sentence_similarity_below_threshold_counts_zero(self):
        assert sentence_similarity(["Alpha beta gamma."], ["Completely different."]) == 0.0

    def test_sentence_similarity_empty_inputs(self):
        assert sentence_similarity([], []) == 1.0
        assert sentence_similarity(["One sentence here."], []) == 0.0

    def test_shingle_overlap(self):
        # {abcd, bcde} vs {abcd, bcdf}
        assert shingle_overlap("a b c d e", "a b c d f") == pytest.approx(0.3333)

    def test_shingle_overlap_identical(self):
        assert shingle_overlap("one two three four five", "one two three four five") == 1.0

    def test_short_token_list_is_single_shingle(self):
        assert shingles(["a", "b"]) == {"a b"}
        assert shingles([]) == set()


class TestNormalization:
    def test_markdown_escapes_and_whitespace(self):
        assert normalize_whitespace("a\\-b   c\n d") == "a-b c d"

    def test_sentence_key(self):
        assert normalize_sentence("  Hello, World! ") == "hello world"


class TestNameLists:
    def test_unique_list_case_insensitive(self):
        assert unique_list(["Notes", " notes ", "History"]) == ["Notes", "History"]

    def test_difference_case_insensitive(self):
        assert difference(["History", "Notes"], ["notes"]) == ["History"]


class TestDiffSample:
    def test_identical_input_gives_empty_diff(self):
        assert diff_sample(["a", "b"], ["a", "b"], "moon") == []

    def test_headers_name_topic(self):
        lines = diff_sample(["a"], ["b"], "moon")
        assert lines[0] == "--- moon-reference"
        assert lines[1] == "+++ moon-candidate"
        assert "-a" in lines and "+b" in lines

    def test_truncated(self):
        lines = diff_sample([f"line {i}" for i in range(200)], [], "moon")
        assert len(lines) == DIFF_MAX_LINES + 1
        assert lines[-1] == DIFF_TRUNCATED_MARKER
