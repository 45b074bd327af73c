"""
Unit tests for title extraction.
"""

from __future__ import annotations

import pytest

from articlequarry.metadata.title import clean_title, extract_title


class TestCleanTitle:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Home | Great article about things", "Great article about things"),
            ("A long headline here | Site", "A long headline here"),
            ("Hi | A longer trailing section", "Hi | A longer trailing section"),
            ("Plain title", "Plain title"),
            ("Facebook | Hacker News |", ""),
        ],
    )
    def test_clean_title(self, raw, expected):
        assert clean_title(raw) == expected


class TestExtractTitle:
    def test_boilerplate_parts_dropped(self, parse):
        doc = parse("<html><head><title>Home | Great article about things</title></head><body></body></html>")
        assert extract_title(doc) == "Great article about things"

    def test_headline_preferred_when_contained_in_title(self, parse):
        doc = parse(
            "<html><head><title>Big news story about the city - Gazette</title></head>"
            "<body><h1>Big news story about the city</h1></body></html>"
        )
        assert extract_title(doc) == "Big news story about the city"

    def test_short_headline_ignored(self, parse):
        doc = parse("<html><head><title>Short one - Gazette</title></head><body><h1>Short one</h1></body></html>")
        assert extract_title(doc) == "Short one - Gazette"

    def test_og_title_fallback(self, parse):
        doc = parse(
            '<html><head><meta property="og:title" content="Shared title"></head><body><h1>Heading</h1></body></html>'
        )
        assert extract_title(doc) == "Shared title"

    def test_headline_as_last_resort(self, parse):
        doc = parse("<html><head></head><body><h1>Only a heading</h1></body></html>")
        assert extract_title(doc) == "Only a heading"

    def test_page_title_overrides(self, parse):
        doc = parse(
            "<html><head><title>Document title</title></head>"
            '<body><h2 class="page-title">Section page title</h2></body></html>'
        )
        assert extract_title(doc) == "Section page title"

    def test_no_title(self, parse):
        assert extract_title(parse("<html><body><p>text</p></body></html>")) == ""
