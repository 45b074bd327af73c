"""
Unit tests for canonical URL resolution.
"""

from __future__ import annotations

import pytest

from articlequarry.metadata.canonical import extract_canonical_url, resolve_canonical

BASE = "https://news.example.com/2016/05/01/story.html"


class TestResolveCanonical:
    def test_relative_canonical_is_joined(self):
        assert resolve_canonical("/2016/05/01/story", BASE) == "https://news.example.com/2016/05/01/story"

    def test_subdomain_of_same_site_is_kept(self):
        assert resolve_canonical("https://www.example.com/story", BASE) == "https://www.example.com/story"

    @pytest.mark.parametrize(
        "declared",
        [
            "https://news.example.com/",
            "https://news.example.com",
            "https://news.example.com/news/",
            "https://news.example.com/wires",
            "https://news.example.com/errors/page-not-found.shtml",
        ],
    )
    def test_rejected_canonicals_fall_back_to_request_url(self, declared):
        assert resolve_canonical(declared, BASE) == BASE

    def test_root_with_query_is_not_a_root(self):
        assert resolve_canonical("https://news.example.com/?p=42", BASE) == "https://news.example.com/?p=42"

    def test_cross_domain(self):
        assert resolve_canonical("https://other.org/story", BASE) == BASE
        assert resolve_canonical("https://other.org/story", BASE, allow_external=True) == "https://other.org/story"

    def test_without_request_url(self):
        assert resolve_canonical("https://example.com/story", "") == "https://example.com/story"

    def test_nothing_declared(self):
        assert resolve_canonical("", BASE) == BASE

    def test_malformed_url(self):
        assert resolve_canonical("http://[broken/story", BASE) == BASE


class TestExtractCanonical:
    def test_link_element_first(self, parse):
        doc = parse(
            '<html><head><link rel="canonical" href="/a/b"><meta property="og:url" content="https://example.com/og">'
            "</head><body></body></html>"
        )
        assert extract_canonical_url(doc, "https://example.com/x") == "https://example.com/a/b"

    def test_og_url_fallback(self, parse):
        doc = parse('<html><head><meta property="og:url" content="https://example.com/og"></head><body></body></html>')
        assert extract_canonical_url(doc, "https://example.com/x") == "https://example.com/og"

    def test_no_declaration(self, parse):
        doc = parse("<html><head></head><body></body></html>")
        assert extract_canonical_url(doc, "https://example.com/x") == "https://example.com/x"
        assert extract_canonical_url(doc, None) == ""
