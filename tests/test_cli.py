"""CLI wdrift: parser argumentów i pełny przebieg offline (parse → analyse → show)."""

import json

import pytest

from data_model.common import SourceKind
from data_model.topics import Topic, write_topics
from wdrift._paths import analysis_path, parsed_path, raw_path, topics_path
from wdrift._store import write_raw
from wdrift.cli import build_parser, main
from wdrift.commands import analyse
from conftest import CANDIDATE_MARKDOWN, REFERENCE_WIKITEXT

MOON = Topic(id="moon", title="Moon", wikipedia_slug="Moon", grokipedia_slug="Moon", category="science")


@pytest.fixture
def home(tmp_path):
    write_topics(topics_path(tmp_path), [MOON])
    write_raw(raw_path(tmp_path, SourceKind.WIKIPEDIA, "moon"), REFERENCE_WIKITEXT)
    write_raw(raw_path(tmp_path, SourceKind.GROKIPEDIA, "moon"), CANDIDATE_MARKDOWN)
    return tmp_path


def _wdrift(home, *argv):
    main(["--home", str(home), *argv])


class TestParser:
    def test_show_defaults(self):
        args = build_parser().parse_args(["show", "--topic", "moon", "--no-diff"])
        assert args.command == "show"
        assert args.topic == "moon"
        assert args.limit == 10
        assert args.no_diff is True

    def test_analyze_alias(self):
        args = build_parser().parse_args(["analyze", "--force"])
        assert args.func is analyse.run
        assert args.force is True

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_fetch_target_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["fetch", "britannica"])


class TestOfflineFlow:
    def test_parse_analyse_show(self, home, capsys):
        _wdrift(home, "parse", "wiki")
        _wdrift(home, "parse", "grok", "--topic", "moon")
        assert parsed_path(home, SourceKind.WIKIPEDIA, "moon").exists()
        assert parsed_path(home, SourceKind.GROKIPEDIA, "moon").exists()

        _wdrift(home, "analyse", "--topic", "moon")
        data = json.loads(analysis_path(home, "moon").read_text(encoding="utf-8"))
        assert data["topic_id"] == "moon"
        assert data["confidence"]["label"] == "suspected_divergence"
        assert len(data["bias_events"]) == 1
        capsys.readouterr()

        _wdrift(home, "analyse", "--topic", "moon")
        assert "cache aktualny" in capsys.readouterr().out

        _wdrift(home, "analyse", "--topic", "moon", "--force")
        assert "Zapisano" in capsys.readouterr().out

        _wdrift(home, "show", "--topic", "moon", "--json")
        assert '"topic_id": "moon"' in capsys.readouterr().out

        _wdrift(home, "show", "--topic", "moon")
        assert "suspected_divergence" in capsys.readouterr().out

    def test_reparse_keeps_metadata(self, home):
        _wdrift(home, "parse", "grok")
        first = json.loads(parsed_path(home, SourceKind.GROKIPEDIA, "moon").read_text(encoding="utf-8"))
        _wdrift(home, "parse", "grok")
        second = json.loads(parsed_path(home, SourceKind.GROKIPEDIA, "moon").read_text(encoding="utf-8"))
        assert second["revision"] == first["revision"]

    def test_parse_explicit_file(self, home, tmp_path):
        other = tmp_path / "other.wikitext"
        other.write_text("Replacement lead sentence here.", encoding="utf-8")
        _wdrift(home, "parse", "wiki", "--topic", "moon", "--file", str(other))
        data = json.loads(parsed_path(home, SourceKind.WIKIPEDIA, "moon").read_text(encoding="utf-8"))
        assert data["lead"]["paragraphs"][0]["sentences"][0]["text"] == "Replacement lead sentence here."


class TestFailures:
    def test_analyse_without_snapshots(self, home):
        with pytest.raises(SystemExit) as excinfo:
            _wdrift(home, "analyse")
        assert excinfo.value.code == 1

    def test_unknown_topic(self, home):
        with pytest.raises(SystemExit) as excinfo:
            _wdrift(home, "show", "--topic", "mars")
        assert excinfo.value.code == 1

    def test_missing_raw_text(self, tmp_path):
        write_topics(topics_path(tmp_path), [MOON])
        with pytest.raises(SystemExit) as excinfo:
            _wdrift(tmp_path, "parse", "wiki")
        assert excinfo.value.code == 1

    def test_show_without_analysis(self, home, capsys):
        _wdrift(home, "show")
        assert "Brak analizy" in capsys.readouterr().out


class TestTopicsCommand:
    def test_replace_catalog(self, tmp_path, capsys):
        source = tmp_path / "incoming.json"
        source.write_text(json.dumps({"topics": [{
            "title": "Sun",
            "wikipedia_url": "https://en.wikipedia.org/wiki/Sun",
            "grokipedia_url": "https://grokipedia.com/page/Sun",
        }]}), encoding="utf-8")
        _wdrift(tmp_path, "topics", "--source", str(source))
        saved = json.loads(topics_path(tmp_path).read_text(encoding="utf-8"))
        assert [t["id"] for t in saved] == ["sun"]
        assert "sun" in capsys.readouterr().out

    def test_bad_source(self, tmp_path):
        with pytest.raises(SystemExit):
            _wdrift(tmp_path, "topics", "--source", str(tmp_path / "missing.json"))


class TestLogging:
    def test_level_resolution(self, monkeypatch):
        import logging

        from wdrift._logging import LOG_LEVEL_ENV, resolve_level

        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(None) == logging.WARNING
        assert resolve_level("loud") == logging.WARNING
        monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
        assert resolve_level(None) == logging.INFO
