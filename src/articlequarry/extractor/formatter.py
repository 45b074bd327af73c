"""
Output formatter: renders the chosen body node as paragraph text.
"""

from __future__ import annotations

import re
from typing import List, Optional

import structlog
from bs4 import Tag

from soupsieve import SelectorSyntaxError

from articlequarry.dom import (
    ScratchTable,
    TextAccumulator,
    attr,
    count_letters,
    element_text,
    inner_trim,
    is_block,
    is_text_node,
    own_text,
    select_with_self,
    strip_markup,
)

from .rules import FormatterSettings

logger = structlog.get_logger(__name__)

_HIDDEN = re.compile(r"display:none|visibility:hidden")

PARAGRAPH_SEPARATOR = "\n\n"
MIN_TEXT_LENGTH = 100
MIN_TEXT_RATIO = 0.25


def is_hidden(node: object) -> bool:
    """Captions and inline-hidden elements never contribute text."""
    if not isinstance(node, Tag):
        return False
    cls = attr(node, "class")
    if "caption" in cls.lower():
        return True
    return bool(_HIDDEN.search(attr(node, "style")) or _HIDDEN.search(cls))


class OutputFormatter:
    """Turns a body node into paragraphs separated by blank lines.

    Scores stamped into ``scratch`` by the weighting pass decide which
    descendants are pruned; the formatter also records paragraph indexes and
    "already emitted" markers there, so one table must be shared for a pass.
    """

    def __init__(self, settings: Optional[FormatterSettings] = None, scratch: Optional[ScratchTable] = None) -> None:
        self.settings = settings or FormatterSettings()
        self.scratch = scratch if scratch is not None else ScratchTable()

    def min_paragraph_length(self, index: int) -> int:
        if index < 1:
            return self.settings.min_first_paragraph_length
        return self.settings.min_paragraph_length

    def format(self, node: Tag, prune_negative: bool = True) -> str:
        keep = self.settings.keep_selector
        self._index_paragraphs(node, keep)
        if prune_negative:
            self.prune(node)

        paragraphs, count_of_p = self._collect(node, keep)
        text = PARAGRAPH_SEPARATOR.join(paragraphs)

        full_text = element_text(node)
        node_length = len(full_text) or 1
        low_ratio = len(text) / float(node_length) < MIN_TEXT_RATIO
        if len(text) > MIN_TEXT_LENGTH and count_of_p > 0 and not low_ratio:
            return text

        if not text or (full_text and len(text) <= len(own_text(node))) or count_of_p == 0 or low_ratio:
            logger.debug("formatter_fallback", tag=node.name, paragraphs=len(paragraphs), count_of_p=count_of_p)
            text = full_text

        # the parser may have left markup in the text; a second pass removes it
        return PARAGRAPH_SEPARATOR.join(
            chunk for chunk in (strip_markup(part) for part in text.split(PARAGRAPH_SEPARATOR)) if chunk
        )

    def prune(self, node: Tag) -> int:
        """Detach scored descendants that are negative or too short for their position."""
        removed = 0
        for item in node.find_all(True):
            if not self.scratch.has_score(item) or item.parent is None:
                continue
            index = self.scratch.paragraph_index(item)
            if self.scratch.score(item) < 0 or len(element_text(item)) < self.min_paragraph_length(index):
                item.extract()
                removed += 1
        return removed

    def node_text(self, node: Tag) -> str:
        """Visible text of ``node`` skipping hidden children, blocks separated by spaces."""
        acc = TextAccumulator()
        self._append_visible(node, acc)
        return acc.getvalue()

    def _index_paragraphs(self, node: Tag, keep: str) -> None:
        for index, element in enumerate(self._keepable(node, keep)):
            self.scratch.set_paragraph_index(element, index)

    def _keepable(self, node: Tag, keep: str) -> List[Tag]:
        if not keep:
            return []
        try:
            return select_with_self(node, keep)
        except SelectorSyntaxError as exc:
            logger.warning("invalid_selector", selector=keep, error=str(exc))
            return []

    def _collect(self, node: Tag, keep: str) -> tuple[List[str], int]:
        paragraphs: List[str] = []
        emitted = 0
        count_of_p = 0
        seen_paragraph = False

        for element in self._keepable(node, keep):
            # lists before the first paragraph are navigation
            if not seen_paragraph:
                if element.name in ("ul", "li"):
                    continue
                seen_paragraph = True

            if self._under_hidden(element, node) or self.scratch.is_content_extracted(element):
                continue

            text = self.node_text(element)
            if element.name != "em":
                if (
                    not text
                    or len(text) < self.min_paragraph_length(emitted)
                    or len(text) > count_letters(text) * 2
                ):
                    continue

            for nested in select_with_self(element, keep):
                self.scratch.mark_content_extracted(nested)
            if element.name == "p":
                count_of_p += 1

            text = inner_trim(text)
            if paragraphs and len(text) <= 1:
                # a lone period or similar sticks to the previous paragraph
                paragraphs[-1] += text
            elif text:
                paragraphs.append(text)
            emitted += 1

        return paragraphs, count_of_p

    @staticmethod
    def _under_hidden(element: Tag, top: Tag) -> bool:
        current: Optional[Tag] = element
        while current is not None and current is not top:
            if is_hidden(current):
                return True
            current = current.parent
        return False

    def _append_visible(self, node: Tag, acc: TextAccumulator) -> None:
        for child in node.children:
            if is_text_node(child):
                acc.append_normalized(str(child))
            elif isinstance(child, Tag):
                if is_hidden(child) or child.name in ("script", "style"):
                    continue
                if not acc.is_empty() and is_block(child) and not acc.ends_with_space():
                    acc.append_raw(" ")
                elif child.name == "br":
                    acc.append_raw(" ")
                self._append_visible(child, acc)
                if child.name == "cite":
                    acc.append_raw(" ")
