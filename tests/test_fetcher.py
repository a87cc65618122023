"""Warstwa HTTP bez sieci: adresy, metadane, przypisy, HTML → Markdown."""

import pytest
import requests

from data_model.article import ExternalCitation, article_to_dict
from data_model.common import SourceKind
from fetcher import (
    FetchError,
    citations_from_api,
    citations_from_snapshot,
    extract_grok_content,
    fetch_grok_citations,
    fetch_wikitext,
    grok_metadata,
    html_to_markdown,
    metadata_from_api,
    page_url,
    strip_grok_banner,
    wikitext_url,
)
from fetcher import http

NOW = "2025-01-02T00:00:00.000Z"

PAGE_HTML = """\
<html><body><nav>Menu</nav><main>
<h1>Moon</h1>
<p>The Moon is <a href="https://example.org/moon">Earth's satellite</a>.<sup>[1]</sup></p>
<p>Search ⌘K</p>
<div><p>Nested paragraph one.</p><p>Nested <a href="/page/Earth">Earth</a> link.</p></div>
<h2>Formation</h2>
<p>Formed early.<img src="/img/impact.png" alt="Impact"></p>
<script>var x = 1;</script>
</main></body></html>
"""


class FakeResponse:
    def __init__(self, text, status=200):
        self.text = text
        self.status = status
        self.encoding = "utf-8"
        self.apparent_encoding = "utf-8"

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


class TestHttp:
    def test_network_error_wrapped(self, monkeypatch):
        def boom(*args, **kwargs):
            raise requests.ConnectionError("connection refused")
        monkeypatch.setattr(http.requests, "get", boom)
        with pytest.raises(FetchError, match="https://example.org/x"):
            http.get_text("https://example.org/x")

    def test_http_status_wrapped(self, monkeypatch):
        monkeypatch.setattr(http.requests, "get", lambda *a, **kw: FakeResponse("", status=404))
        with pytest.raises(FetchError, match="404"):
            http.get_text("https://example.org/x")

    def test_json_decoding(self, monkeypatch):
        monkeypatch.setattr(http.requests, "get", lambda *a, **kw: FakeResponse('{"ok": true}'))
        assert http.get_json("https://example.org/x") == {"ok": True}

    def test_invalid_json(self, monkeypatch):
        monkeypatch.setattr(http.requests, "get", lambda *a, **kw: FakeResponse("<html>"))
        with pytest.raises(FetchError, match="JSON"):
            http.get_json("https://example.org/x")

    def test_user_agent_sent(self, monkeypatch):
        seen = {}

        def fake_get(url, params=None, timeout=None, headers=None):
            seen.update(headers)
            return FakeResponse("ok")
        monkeypatch.setattr(http.requests, "get", fake_get)
        http.get_text("https://example.org/x")
        assert seen["User-Agent"] == http.USER_AGENT


class TestWikipedia:
    def test_raw_url(self):
        assert wikitext_url("Climate change") == "https://en.wikipedia.org/wiki/Climate_change?action=raw"
        assert wikitext_url("C++") == "https://en.wikipedia.org/wiki/C%2B%2B?action=raw"

    def test_fetch_uses_raw_url(self, monkeypatch, topic):
        calls = []
        monkeypatch.setattr("fetcher.wikipedia.get_text", lambda url: calls.append(url) or "wikitext")
        assert fetch_wikitext(topic) == "wikitext"
        assert calls == ["https://en.wikipedia.org/wiki/Moon?action=raw"]

    def test_metadata(self, topic):
        payload = {"query": {"pages": [{
            "title": "Moon",
            "pagelanguage": "en",
            "canonicalurl": "https://en.wikipedia.org/wiki/Moon",
            "revisions": [{"revid": 123, "timestamp": "2025-01-01T00:00:00Z"}],
        }]}}
        meta = metadata_from_api(payload, topic, NOW)
        assert meta.source is SourceKind.WIKIPEDIA
        assert meta.page_id == "en:Moon"
        assert meta.revision_id == "123"
        assert meta.revision_timestamp == "2025-01-01T00:00:00Z"

    def test_metadata_fallbacks(self, topic):
        meta = metadata_from_api({"query": {"pages": [{"title": "Moon"}]}}, topic, NOW)
        assert meta.revision_id == "Moon-unknown"
        assert meta.revision_timestamp == NOW
        assert meta.canonical_url == "https://en.wikipedia.org/wiki/Moon"

    @pytest.mark.parametrize("payload", [{}, {"query": {"pages": []}}, {"query": {"pages": [{"missing": True}]}}])
    def test_metadata_missing_page(self, topic, payload):
        with pytest.raises(FetchError):
            metadata_from_api(payload, topic, NOW)


class TestGrokipedia:
    def test_page_url(self):
        assert page_url("Moon") == "https://grokipedia.com/page/Moon"
        assert page_url("/page/Climate_change") == "https://grokipedia.com/page/Climate_change"

    def test_metadata(self, topic):
        meta = grok_metadata(topic, page_url("Moon"), NOW)
        assert meta.page_id == "grok:moon"
        assert meta.revision_id == f"grok-{NOW}"

    def test_citations_from_api(self):
        payload = {"page": {"citations": [
            {"id": "1", "url": "https://moon.nasa.gov/", "title": "NASA"},
            {"id": "2", "title": "no url"},
            "garbage",
        ]}}
        (citation,) = citations_from_api(payload)
        assert citation == ExternalCitation(url="https://moon.nasa.gov/", id="1", title="NASA")
        assert citations_from_api({"page": None}) == []

    def test_citations_fallback_on_error(self, monkeypatch, topic):
        def fail(*args, **kwargs):
            raise FetchError("offline")
        monkeypatch.setattr("fetcher.grokipedia.get_json", fail)
        fallback = [ExternalCitation(url="https://moon.nasa.gov/")]
        assert fetch_grok_citations(topic, fallback) == fallback
        assert fetch_grok_citations(topic) == []

    def test_citations_survive_reparse(self, md_article):
        first = md_article(
            "Body text [link](https://example.org/a) here.",
            [ExternalCitation(url="https://moon.nasa.gov/", id="a1", title="NASA")],
        )
        restored = citations_from_snapshot(article_to_dict(first))
        assert restored == [ExternalCitation(url="https://moon.nasa.gov/", id="a1", title="NASA")]
        second = md_article("Body text [link](https://example.org/a) here.", restored)
        assert [r.citation_id for r in second.references] == [r.citation_id for r in first.references]


class TestHtmlMarkdown:
    def test_page_conversion(self):
        assert html_to_markdown(PAGE_HTML, "https://grokipedia.com", "Moon") == (
            "# Moon\n\n"
            "The Moon is [Earth's satellite](https://example.org/moon).\n\n"
            "Nested paragraph one.\n\n"
            "Nested Earth link.\n\n"
            "## Formation\n\n"
            "Formed early. ![Impact](https://grokipedia.com/img/impact.png)"
        )

    def test_title_added_when_missing(self):
        assert html_to_markdown("<p>Some text here.</p>", "https://grokipedia.com", "Moon") == (
            "# Moon\n\nSome text here."
        )

    def test_banner_lines_removed(self):
        assert strip_grok_banner("a\n\nSearch ⌘K\n\nb\nFact-checked by Grok 3 days ago") == "a\n\nb"

    def test_json_envelope(self):
        raw = '{"content": "<p>Hi there friend.</p>"}'
        assert extract_grok_content(raw, "https://grokipedia.com", "Moon") == "# Moon\n\nHi there friend."

    def test_plain_markdown(self):
        raw = "Fact-checked by Grok 1 day ago\n\nBody text here."
        assert extract_grok_content(raw, "https://grokipedia.com", "Moon") == "# Moon\n\nBody text here."

    def test_empty(self):
        assert extract_grok_content("  ", "https://grokipedia.com", "Moon") == "# Moon"
