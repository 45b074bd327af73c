"""
Title extraction.
"""

from __future__ import annotations

from typing import List

from bs4 import Tag

from articlequarry.dom import element_text, inner_trim

from .cascade import Document, meta_step, run_or_empty, string_cascade, text_step

IGNORED_TITLE_PARTS = frozenset(["hacker news", "facebook", "home", "articles"])
TITLE_SEPARATORS = (" | ", " : ", " - ")
MIN_HEADLINE_LENGTH = 20

_FIRST_H1 = text_step("h1:first-of-type")
_PAGE_TITLE = text_step("h2.page-title:first-of-type")


def document_title(doc: Document) -> str:
    title = doc.find("title")
    return inner_trim(element_text(title)) if isinstance(title, Tag) else ""


def clean_title(title: str) -> str:
    """Drop boilerplate ``|`` separated parts and a trailing part shorter than what precedes it."""
    parts: List[str] = title.split("|")
    while parts and not parts[-1]:
        parts.pop()
    kept: List[str] = []
    for part in parts:
        if part.lower().strip() in IGNORED_TITLE_PARTS:
            continue
        if len(kept) == len(parts) - 1 and len("|".join(kept)) > len(part):
            continue
        kept.append(part)
    return inner_trim("|".join(kept))


FALLBACK_TITLE = string_cascade(
    "title",
    text_step("head title"),
    meta_step("head meta[name=title]"),
    meta_step("head meta[property='og:title']"),
    meta_step("head meta[name='twitter:title']"),
    _FIRST_H1,
)


def extract_title(doc: Document) -> str:
    title = document_title(doc)
    if not title:
        return run_or_empty(FALLBACK_TITLE, doc)

    headline_used = False
    if any(separator in title for separator in TITLE_SEPARATORS):
        # the first headline is often the document title minus the site name
        headline = _FIRST_H1.run(doc)
        if headline and headline.lower() in title.lower() and len(headline) > MIN_HEADLINE_LENGTH:
            title = headline
            headline_used = True

    if not headline_used:
        title = clean_title(title)

    page_title = _PAGE_TITLE.run(doc)
    if page_title:
        title = page_title
    return title