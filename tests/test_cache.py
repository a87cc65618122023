"""Cache analizy: hash treści i statusy zapisanego pliku."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from analyzer.cache import CacheStatus, probe_cached_analysis, utc_now_iso
from analyzer.content_hash import compute_content_hash

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def analysis_file(tmp_path):
    def write(payload):
        path = tmp_path / "analysis" / "moon.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
        return path
    return write


def _payload(content_hash="abc", generated_at="2025-03-01T10:00:00.000Z"):
    return {"topic_id": "moon", "meta": {"content_hash": content_hash, "generated_at": generated_at}}


class TestContentHash:
    def test_deterministic_hex(self):
        value = compute_content_hash("ref", "cand")
        assert value == compute_content_hash("ref", "cand")
        assert len(value) == 64

    def test_sides_not_interchangeable(self):
        assert compute_content_hash("ab", "c") != compute_content_hash("a", "bc")
        assert compute_content_hash("a", "b") != compute_content_hash("b", "a")

    def test_version_changes_hash(self):
        assert compute_content_hash("a", "b", "v1") != compute_content_hash("a", "b", "v2")


class TestProbe:
    def test_missing(self, tmp_path):
        probe = probe_cached_analysis(tmp_path / "none.json", "abc", now=NOW)
        assert probe.status is CacheStatus.MISSING
        assert probe.analysis is None

    def test_fresh(self, analysis_file):
        probe = probe_cached_analysis(analysis_file(_payload()), "abc", ttl_hours=72, now=NOW)
        assert probe.status is CacheStatus.FRESH
        assert probe.analysis["topic_id"] == "moon"

    def test_stale(self, analysis_file):
        path = analysis_file(_payload())
        probe = probe_cached_analysis(path, "abc", ttl_hours=1, now=NOW)
        assert probe.status is CacheStatus.STALE

    def test_ttl_boundary_inclusive(self, analysis_file):
        path = analysis_file(_payload())
        probe = probe_cached_analysis(path, "abc", ttl_hours=2, now=NOW)
        assert probe.status is CacheStatus.FRESH

    def test_mismatch(self, analysis_file):
        probe = probe_cached_analysis(analysis_file(_payload()), "other", now=NOW)
        assert probe.status is CacheStatus.MISMATCH

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            "[1, 2]",
            {"meta": {"generated_at": "2025-03-01T10:00:00Z"}},
            {"meta": {"content_hash": "abc"}},
            {"meta": {"content_hash": "abc", "generated_at": "yesterday"}},
        ],
    )
    def test_invalid(self, analysis_file, payload):
        probe = probe_cached_analysis(analysis_file(payload), "abc", now=NOW)
        assert probe.status is CacheStatus.INVALID

    def test_naive_timestamp_treated_as_utc(self, analysis_file):
        path = analysis_file(_payload(generated_at="2025-03-01T11:00:00"))
        probe = probe_cached_analysis(path, "abc", ttl_hours=1, now=NOW)
        assert probe.status is CacheStatus.FRESH

    def test_now_iso_format(self):
        value = utc_now_iso()
        assert value.endswith("Z")
        assert datetime.fromisoformat(value.replace("Z", "+00:00")) <= datetime.now(timezone.utc) + timedelta(seconds=1)
