"""
Shared fixtures for articlequarry tests.

The HTML fixtures are small, hand-written pages that exercise one behaviour
each; they are parsed with the same builder the engine uses by default.
"""

from __future__ import annotations

from typing import Callable

import pytest
from bs4 import BeautifulSoup

from articlequarry.dom import ScratchTable, parse_document
from articlequarry.extractor.engine import ArticleExtractor
from articlequarry.extractor.weighting import WeightingEngine

ARTICLE_HTML = """
<html>
<head><title>Short</title></head>
<body>
<div class="article-body"><h1>Title</h1><p>Para one with forty or more characters of real content.</p><p>Para two also long enough to pass the minimum threshold.</p></div><div class="sidebar related">junk link list</div>
</body>
</html>
"""

NEWS_PAGE_HTML = """
<html lang="en-US">
<head>
  <title>Council approves new budget | Springfield Gazette</title>
  <meta name="description" content="The city council voted on Tuesday to approve next year's budget.">
  <meta name="keywords" content="budget, council, springfield,">
  <meta property="og:site_name" content="Springfield Gazette">
  <meta property="og:type" content="article">
  <meta property="og:image" content="https://news.example.com/images/council.jpg">
  <meta property="article:published_time" content="2016-05-01T10:00:00Z">
  <link rel="canonical" href="/2016/05/01/council-budget.html">
  <link rel="alternate" type="application/rss+xml" href="https://news.example.com/feed.xml">
  <link rel="icon" href="https://news.example.com/favicon.ico">
</head>
<body>
  <div id="menu"><ul><li><a href="/">Home</a></li><li><a href="/sports">Sports</a></li></ul></div>
  <div class="byline">By Jane Doe</div>
  <div class="article-body">
    <h1>Council approves new budget for the coming year</h1>
    <p>The Springfield city council voted six to one on Tuesday evening to approve the budget for next year.</p>
    <p>The plan raises spending on road repairs and keeps property taxes flat, according to the <a href="/city/finance">finance office</a>.</p>
    <p>Council members said the vote followed months of public hearings held across every district of the city.</p>
  </div>
  <div class="footer">Copyright Springfield Gazette</div>
</body>
</html>
"""


@pytest.fixture
def parse() -> Callable[[str], BeautifulSoup]:
    return lambda html: parse_document(html, "lxml")


@pytest.fixture
def fragment() -> Callable[[str], BeautifulSoup]:
    """Parses markup without adding ``<html>``/``<body>`` wrappers."""
    return lambda html: BeautifulSoup(html, "html.parser")


@pytest.fixture
def scratch() -> ScratchTable:
    return ScratchTable()


@pytest.fixture
def engine(scratch: ScratchTable) -> WeightingEngine:
    return WeightingEngine(scratch=scratch)


@pytest.fixture
def extractor() -> ArticleExtractor:
    return ArticleExtractor()


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def news_page_html() -> str:
    return NEWS_PAGE_HTML
