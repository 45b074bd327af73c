"""
Unlikely-node pruning.

Removes script/style payloads, subtrees whose class or id matches the
"remove" vocabulary, and nodes matched by per-domain removal selectors.
"""

from __future__ import annotations

from typing import Iterable, Union

import structlog
from bs4 import BeautifulSoup, Tag

from articlequarry.dom import class_name, element_id, safe_select

from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = structlog.get_logger(__name__)

Document = Union[BeautifulSoup, Tag]


def _detach_all(elements: Iterable[Tag]) -> int:
    removed = 0
    for element in list(elements):
        # a parent removed earlier in the same pass already took this one along
        if element.decomposed:
            continue
        element.decompose()
        removed += 1
    return removed


def remove_scripts_and_styles(doc: Document, keep_noscript: bool = False) -> int:
    """Drop ``<script>``, ``<style>`` and, unless kept, ``<noscript>`` elements."""
    names = ["script", "style"] if keep_noscript else ["script", "noscript", "style"]
    return _detach_all(doc.find_all(names))


def strip_unlikely(doc: Document, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> int:
    """Remove every body element whose class or id matches the remove vocabulary."""
    body = doc.find("body")
    if not isinstance(body, Tag):
        return 0
    doomed = []
    for element in [body, *body.find_all(True)]:
        if vocabulary.to_remove.search(class_name(element).lower()) or vocabulary.to_remove.search(
            element_id(element).lower()
        ):
            doomed.append(element)
    removed = _detach_all(doomed)
    if removed:
        logger.debug("unlikely_nodes_removed", count=removed)
    return removed


def remove_domain_nodes(doc: Document, selectors: Iterable[str]) -> int:
    """Remove everything matched by the given removal selectors, in order."""
    removed = 0
    for selector in selectors:
        count = _detach_all(safe_select(doc, selector))
        if count:
            logger.debug("domain_rule_applied", selector=selector, removed=count)
        removed += count
    return removed
