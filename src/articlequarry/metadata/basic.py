"""
Simple page metadata: description, keywords, language, site name, type and
the RSS, video, favicon and image URLs.
"""

from __future__ import annotations

import re
from typing import List

from articlequarry.dom import first_attr, inner_trim, safe_select

from .cascade import Cascade, Document, Step, meta_step, replace_spaces, run_or_empty, string_cascade, url_step

_KEYWORD_SPLIT = re.compile(r"\s*,\s*")

DESCRIPTION = string_cascade(
    "description",
    meta_step("head meta[name=description]"),
    meta_step("head meta[property='og:description']"),
    meta_step("head meta[name='twitter:description']"),
)

SITE_NAME = string_cascade(
    "site_name",
    meta_step("head meta[property='og:site_name']"),
    meta_step("head meta[name='twitter:site']"),
)

TYPE = string_cascade("type", meta_step("head meta[property='og:type']"))

LANGUAGE = string_cascade(
    "language",
    meta_step("head meta[property=language]"),
    Step("html@lang", lambda doc: inner_trim(first_attr(doc, "html", "lang"))),
    meta_step("head meta[property='og:locale']"),
)

IMAGE_URL = string_cascade(
    "image_url",
    url_step("head meta[property='og:image']", "content"),
    url_step("head meta[name='twitter:image']", "content"),
    url_step("link[rel=image_src]"),
    url_step("head meta[name=thumbnail]", "content"),
)

VIDEO_URL = string_cascade("video_url", url_step("head meta[property='og:video']", "content"))

FAVICON_URL = string_cascade(
    "favicon_url",
    url_step("head link[rel=icon]"),
    url_step("head link[rel^=shortcut], link[rel$=icon]"),
)


def _rss(doc: Document) -> str:
    for link in safe_select(doc, "link[rel=alternate]"):
        if link.get("type") == "application/rss+xml" and link.get("href") is not None:
            return replace_spaces(str(link["href"]))
    return ""


RSS_URL: Cascade[str] = string_cascade("rss_url", Step("rss", _rss))


def extract_description(doc: Document) -> str:
    return run_or_empty(DESCRIPTION, doc)


def extract_site_name(doc: Document) -> str:
    return run_or_empty(SITE_NAME, doc)


def extract_type(doc: Document) -> str:
    return run_or_empty(TYPE, doc)


def extract_language(doc: Document) -> str:
    """Two-letter language code from meta tags or ``<html lang>``."""
    return run_or_empty(LANGUAGE, doc)[:2]


def extract_image_url(doc: Document) -> str:
    return run_or_empty(IMAGE_URL, doc)


def extract_video_url(doc: Document) -> str:
    return run_or_empty(VIDEO_URL, doc)


def extract_favicon_url(doc: Document) -> str:
    return run_or_empty(FAVICON_URL, doc)


def extract_rss_url(doc: Document) -> str:
    return run_or_empty(RSS_URL, doc)


def extract_keywords(doc: Document) -> List[str]:
    content = inner_trim(first_attr(doc, "head meta[name=keywords]", "content"))
    if content.startswith("[") and content.endswith("]"):
        content = content[1:-1]
    if not content:
        return []
    parts = _KEYWORD_SPLIT.split(content)
    # trailing comma
    while parts and not parts[-1]:
        parts.pop()
    return parts
