"""
DOM normalizer: turns raw HTML into a BeautifulSoup tree.
"""

from __future__ import annotations

import re
from typing import List

import structlog
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

logger = structlog.get_logger(__name__)

# Extracted text that still carries one of these tags means the first parser
# swallowed markup as character data.
_LEFTOVER_MARKUP = re.compile(r"<\s{0,5}(?:div|p|b|a|li)\s{0,5}>")


def parse_document(html: str, parser: str = "lxml") -> BeautifulSoup:
    """Parse ``html`` with the named BeautifulSoup tree builder."""
    return BeautifulSoup(html, parser)


def has_leftover_markup(text: str) -> bool:
    return bool(text) and _LEFTOVER_MARKUP.search(text) is not None


def safe_select(scope: Tag, selector: str) -> List[Tag]:
    """``scope.select`` that logs and skips selectors soupsieve cannot parse."""
    try:
        return scope.select(selector)
    except SelectorSyntaxError as exc:
        logger.warning("invalid_selector", selector=selector, error=str(exc))
        return []


def first_attr(scope: Tag, selector: str, name: str) -> str:
    """Value of ``name`` on the first element matching ``selector`` that carries it."""
    for element in safe_select(scope, selector):
        value = element.get(name)
        if value is not None:
            return " ".join(value) if isinstance(value, list) else str(value)
    return ""
