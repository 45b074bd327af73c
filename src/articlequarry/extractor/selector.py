"""
Candidate selection.

Collects candidate nodes in document order, weights them, and orders them by
``(weight desc, position asc)``. The winner is the first candidate, in that
order, that the caller accepts after formatting it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import structlog
from bs4 import BeautifulSoup, Tag

from articlequarry.dom import ScratchTable, class_name, element_id, safe_select

from .rules import BUILTIN_RULES, DomainKeys, DomainRuleSet
from .weighting import WeightingEngine

logger = structlog.get_logger(__name__)

CANDIDATE_TAGS = re.compile(r"p|div|td|h1|h2|article|section")
BOOTSTRAP_SCORE = 100

Document = Union[BeautifulSoup, Tag]


@dataclass(frozen=True, slots=True)
class RankedCandidate:
    weight: int
    position: int
    node: Tag

    @property
    def sort_key(self) -> tuple[int, int]:
        return (-self.weight, self.position)


def collect_candidates(doc: Document, scratch: ScratchTable) -> List[Tag]:
    """Candidate tags under ``<body>`` in document order.

    Each one is seeded with a halving bootstrap score (100, 50, 25, ...) that
    only matters to the formatter's negative-score pruning.
    """
    body = doc.find("body")
    if not isinstance(body, Tag):
        return []
    candidates = []
    score = BOOTSTRAP_SCORE
    for element in [body, *body.find_all(True)]:
        if CANDIDATE_TAGS.fullmatch(element.name):
            candidates.append(element)
            scratch.set_score(element, score)
            score //= 2
    return candidates


def rank_candidates(candidates: List[Tag], engine: WeightingEngine) -> List[RankedCandidate]:
    ranked = []
    seen = False
    for position, node in enumerate(candidates):
        weight = engine.weight(node, seen)
        seen = weight.highly_positive_seen
        ranked.append(RankedCandidate(weight=weight.score, position=position, node=node))
        logger.debug(
            "candidate_weighted",
            tag=node.name,
            id=element_id(node),
            cls=class_name(node),
            weight=weight.score,
            position=position,
        )
    ranked.sort(key=lambda candidate: candidate.sort_key)
    return ranked


class CandidateSelector:
    """Picks the article body node for one document."""

    def __init__(self, engine: WeightingEngine, rules: DomainRuleSet = BUILTIN_RULES) -> None:
        self.engine = engine
        self.rules = rules
        self.logger = logger.bind(component="candidate_selector")

    def best_element_override(self, doc: Document, keys: DomainKeys) -> Optional[Tag]:
        for selector in self.rules.best_element_selectors(keys):
            found = safe_select(doc, selector)
            if found:
                self.logger.debug("best_element_override", selector=selector, host=keys.host)
                return found[0]
        return None

    def select(self, doc: Document, keys: DomainKeys, accept: Callable[[Tag], bool]) -> Optional[Tag]:
        """Return the chosen body node, or ``None`` when no candidate is accepted.

        A domain best-element override is handed to ``accept`` once and then
        returned whatever the outcome; scoring never runs for it.
        """
        override = self.best_element_override(doc, keys)
        if override is not None:
            accept(override)
            return override

        ranked = rank_candidates(collect_candidates(doc, self.engine.scratch), self.engine)
        for candidate in ranked:
            if accept(candidate.node):
                self.logger.debug(
                    "best_element_selected",
                    tag=candidate.node.name,
                    weight=candidate.weight,
                    position=candidate.position,
                )
                return candidate.node
        self.logger.debug("no_candidate_accepted", candidates=len(ranked))
        return None
