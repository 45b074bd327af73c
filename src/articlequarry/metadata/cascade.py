"""
First-success-wins strategy chains.

A cascade is an ordered list of named steps. Each step inspects the document
and returns a value or nothing; the first acceptable value wins. The order of
the steps is part of the behaviour: several of them exist for one site's
markup and must keep their place in the list.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

import structlog
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from articlequarry.dom import element_text, first_attr, inner_trim, own_text, safe_select

logger = structlog.get_logger(__name__)

T = TypeVar("T")
Document = Union[BeautifulSoup, Tag]

# Failures a single step may raise; they mean "no match here".
STEP_ERRORS: Tuple[type[BaseException], ...] = (ValueError, TypeError, OverflowError, SelectorSyntaxError)

_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True, slots=True)
class Step(Generic[T]):
    name: str
    run: Callable[[Document], Optional[T]]


def _non_empty(value: object) -> bool:
    return value is not None and value != ""


class Cascade(Generic[T]):
    """Runs steps in order and returns the first accepted value."""

    def __init__(
        self,
        name: str,
        steps: Iterable[Step[T]],
        accept: Callable[[T], bool] = _non_empty,
    ) -> None:
        self.name = name
        self.steps: List[Step[T]] = list(steps)
        self.accept = accept

    def __len__(self) -> int:
        return len(self.steps)

    def run(self, doc: Document) -> Optional[T]:
        for step in self.steps:
            try:
                value = step.run(doc)
            except STEP_ERRORS as exc:
                logger.debug("cascade_step_failed", cascade=self.name, step=step.name, error=str(exc))
                continue
            if value is not None and self.accept(value):
                logger.debug("cascade_hit", cascade=self.name, step=step.name)
                return value
        return None


def replace_spaces(url: str) -> str:
    """Trim a URL and percent-encode any whitespace left inside it."""
    url = url.strip()
    if " " in url:
        url = _WHITESPACE.sub("%20", url)
    return url


# --- step builders ---------------------------------------------------------


def attr_step(selector: str, name: str = "content", clean: Callable[[str], str] = inner_trim) -> Step[str]:
    """Attribute of the first element matching ``selector`` that carries it."""
    return Step(f"{selector}@{name}", lambda doc: clean(first_attr(doc, selector, name)))


def meta_step(selector: str) -> Step[str]:
    return attr_step(selector, "content")


def url_step(selector: str, name: str = "href") -> Step[str]:
    return attr_step(selector, name, clean=replace_spaces)


def text_step(selector: str) -> Step[str]:
    """Text of every element matching ``selector``, space joined."""

    def run(doc: Document) -> str:
        return inner_trim(" ".join(element_text(element) for element in safe_select(doc, selector)))

    return Step(f"{selector}:text", run)


def own_text_step(selector: str) -> Step[str]:
    """Own text of the first element matching ``selector``."""

    def run(doc: Document) -> str:
        found = safe_select(doc, selector)
        return inner_trim(own_text(found[0])) if found else ""

    return Step(f"{selector}:own", run)


def first_text_step(selector: str) -> Step[str]:
    """Full text of the first element matching ``selector``."""

    def run(doc: Document) -> str:
        found = safe_select(doc, selector)
        return inner_trim(element_text(found[0])) if found else ""

    return Step(f"{selector}:first", run)


def string_cascade(name: str, *steps: Step[str]) -> Cascade[str]:
    return Cascade(name, steps)


def run_or_empty(cascade: Cascade[str], doc: Document) -> str:
    return cascade.run(doc) or ""
