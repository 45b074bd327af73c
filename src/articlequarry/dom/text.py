"""
Text flattening helpers.

Element text is flattened the way browsers render it: runs of
whitespace collapse to one space, block-level elements and ``<br>`` introduce
a word boundary, and script/style payloads are never part of the text.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

import soupsieve
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction, Script, Stylesheet

_HTML_WHITESPACE = re.compile(r"[ \t\n\r\f]+")
_ANY_WHITESPACE = re.compile(r"\s+")

_NON_TEXT_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction, Script, Stylesheet)

BLOCK_TAGS = frozenset(
    [
        "html", "body", "frameset", "script", "noscript", "style", "meta", "link", "title", "frame",
        "noframes", "section", "nav", "aside", "hgroup", "header", "footer", "p", "h1", "h2", "h3",
        "h4", "h5", "h6", "ul", "ol", "pre", "div", "blockquote", "hr", "address", "figure",
        "figcaption", "form", "fieldset", "ins", "del", "dl", "dt", "dd", "li", "table", "caption",
        "thead", "tfoot", "tbody", "colgroup", "col", "tr", "th", "td", "video", "audio", "canvas",
        "details", "menu", "plaintext", "template", "article", "main", "svg", "math", "center",
    ]
)


def is_text_node(node: object) -> bool:
    """True for character data that contributes to visible text."""
    return isinstance(node, NavigableString) and not isinstance(node, _NON_TEXT_STRINGS)


def is_block(tag: Tag) -> bool:
    return tag.name in BLOCK_TAGS


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces without trimming."""
    return _HTML_WHITESPACE.sub(" ", text)


def inner_trim(text: Optional[str]) -> str:
    """Collapse every whitespace run (newlines included) and strip the ends."""
    if not text:
        return ""
    return _ANY_WHITESPACE.sub(" ", text).strip()


class TextAccumulator:
    """Appends text fragments while keeping whitespace normalised across fragments."""

    __slots__ = ("_parts", "_last")

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._last = ""

    def __len__(self) -> int:
        return sum(len(part) for part in self._parts)

    def is_empty(self) -> bool:
        return not self._parts

    def ends_with_space(self) -> bool:
        return bool(self._last) and self._last.isspace()

    def append_raw(self, text: str) -> None:
        if text:
            self._parts.append(text)
            self._last = text[-1]

    def append_normalized(self, text: str) -> None:
        text = normalize_whitespace(text)
        if text.startswith(" ") and (self.is_empty() or self.ends_with_space()):
            text = text[1:]
        self.append_raw(text)

    def append_space(self) -> None:
        if not self.ends_with_space():
            self.append_raw(" ")

    def getvalue(self) -> str:
        return "".join(self._parts)


def _walk(tag: Tag) -> Iterator[Tuple[object, bool]]:
    """Yield ``(node, entering)`` pairs depth first without recursion."""
    stack: List[Tuple[object, bool]] = [(tag, True)]
    while stack:
        node, entering = stack.pop()
        yield node, entering
        if entering and isinstance(node, Tag):
            stack.append((node, False))
            for child in reversed(node.contents):
                stack.append((child, True))


def element_text(tag: Optional[Tag]) -> str:
    """The normalised, trimmed text of ``tag`` and all of its descendants."""
    if tag is None:
        return ""
    acc = TextAccumulator()
    for node, entering in _walk(tag):
        if is_text_node(node):
            if entering:
                acc.append_normalized(str(node))
        elif isinstance(node, Tag):
            if node.name in ("script", "style"):
                continue
            if entering and not acc.is_empty() and (is_block(node) or node.name == "br"):
                acc.append_space()
            elif not entering and is_block(node) and not acc.is_empty():
                acc.append_space()
    return acc.getvalue().strip()


def own_text(tag: Optional[Tag]) -> str:
    """Text of the direct text children only, ``<br>`` counted as a space."""
    if tag is None:
        return ""
    acc = TextAccumulator()
    for child in tag.children:
        if is_text_node(child):
            acc.append_normalized(str(child))
        elif isinstance(child, Tag) and child.name == "br":
            acc.append_space()
    return acc.getvalue().strip()


def strip_markup(text: str) -> str:
    """Re-parse ``text`` as HTML and return only its visible characters."""
    if not text:
        return ""
    return inner_trim(element_text(BeautifulSoup(text, "html.parser")))


def count_letters(text: str) -> int:
    return sum(1 for char in text if char.isalpha())


def attr(tag: object, name: str) -> str:
    """Attribute value as a string; multi-valued attributes are space joined."""
    if not isinstance(tag, Tag):
        return ""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def class_name(tag: object) -> str:
    return attr(tag, "class")


def element_id(tag: object) -> str:
    return attr(tag, "id")


def children(tag: Tag) -> List[Tag]:
    """Direct element children, skipping text and comments."""
    return [child for child in tag.children if isinstance(child, Tag)]


def matches(tag: Tag, selector: str) -> bool:
    if isinstance(tag, BeautifulSoup):
        return False
    return soupsieve.match(selector, tag)


def select_with_self(tag: Tag, selector: str) -> List[Tag]:
    """``tag.select`` that also considers ``tag`` itself as a candidate."""
    found = tag.select(selector)
    if matches(tag, selector):
        return [tag, *found]
    return found
