"""
Weighting engine.

Assigns every candidate node an integer relevance weight from regex
classification of its class, id, itemprop and style attributes, the length
of its own text, and a decayed contribution of its descendants.

Child weighting stamps per-child deltas into the scratch table as a side
effect. Candidates are weighted parent first, so a child that is later
weighted as a candidate of its own already carries the stamp its parent left.
The formatter relies on those stamps to prune negative subtrees.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import structlog
from bs4 import Tag

from articlequarry.dom import ScratchTable, attr, children, class_name, element_id, own_text, select_with_self

from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = structlog.get_logger(__name__)

HEADING_TAGS = frozenset(["h1", "h2", "h3", "h4", "h5", "h6"])
TABULAR_TAGS = frozenset(["table", "li", "td", "th"])
MARKUP_NOISE_TOKENS = ("&quot;", "&lt;", "&gt;", "px")

MIN_CHILD_TEXT_LENGTH = 20
LONG_CHILD_TEXT_LENGTH = 200
PARAGRAPH_TEXT_LENGTH = 50


def round_half_up(value: float) -> int:
    """Round halves towards positive infinity instead of to the nearest even number."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class Weight:
    score: int
    highly_positive_seen: bool = False


class WeightingEngine:
    """Scores candidate nodes.

    ``highly_positive_seen`` is fold state threaded through one selection
    pass: once any node earned a highly-positive bonus, later nodes in the
    same pass cannot earn it again.
    """

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        scratch: Optional[ScratchTable] = None,
        child_decay: float = 0.9,
        descendant_decay: float = 0.45,
        honor_extra_gravity: bool = True,
    ) -> None:
        self.vocabulary = vocabulary
        self.scratch = scratch if scratch is not None else ScratchTable()
        self.child_decay = child_decay
        self.descendant_decay = descendant_decay
        self.honor_extra_gravity = honor_extra_gravity

    def weight(self, node: Tag, highly_positive_seen: bool = False) -> Weight:
        base = self.base_weight(node, highly_positive_seen)
        score = base.score
        score += round_half_up(len(own_text(node)) / 100.0 * 10)
        score += round_half_up(self.weight_children(node) * self.child_decay)
        if self.honor_extra_gravity:
            score += self._extra_gravity(node)
        return Weight(score=score, highly_positive_seen=base.highly_positive_seen)

    def base_weight(self, node: Tag, highly_positive_seen: bool = False) -> Weight:
        """Attribute classification only, without any text contribution."""
        vocab = self.vocabulary
        cls = class_name(node)
        ident = element_id(node)
        itemprop = attr(node, "itemprop")
        score = 0
        seen = highly_positive_seen

        if not highly_positive_seen:
            if node.has_attr("itemprop") and vocab.highly_positive.search(itemprop):
                score += 350
                seen = True
            if vocab.highly_positive.search(cls):
                score += 200
                seen = True
            if vocab.highly_positive.search(ident):
                score += 90
                seen = True

        if vocab.positive.search(cls):
            score += 35
        if vocab.positive.search(ident):
            score += 45
        if vocab.unlikely.search(cls):
            score -= 20
        if vocab.unlikely.search(ident):
            score -= 20
        if vocab.negative.search(cls):
            score -= 50
        if vocab.negative.search(ident):
            score -= 50
        if vocab.highly_negative.search(ident):
            score -= 700

        style = attr(node, "style")
        if style and vocab.negative_style.search(style):
            score -= 50
        if itemprop and vocab.positive.search(itemprop):
            score += 100

        return Weight(score=score, highly_positive_seen=seen)

    def weight_children(self, root: Tag) -> int:
        """Contribution of the direct children, grandchildren and great-grandchildren."""
        weight = 0
        has_caption = False
        paragraph_count = 0

        for child in children(root):
            text = own_text(child)
            if len(text) < MIN_CHILD_TEXT_LENGTH:
                continue
            child_weight = self._text_weight(text)
            if child.name in ("h1", "h2"):
                child_weight += 30
            elif child.name in ("div", "p"):
                child_weight += self._symbol_weight(child, text)
                if child.name == "p" and len(text) > PARAGRAPH_TEXT_LENGTH:
                    paragraph_count += 1
                if class_name(child).lower() == "caption":
                    has_caption = True
            weight += child_weight

        grandchildren_weight = 0
        great_grandchildren_weight = 0
        for child in children(root):
            # navigation-like children penalise the parent instead of feeding it
            if self.vocabulary.negative.search(element_id(child)) or self.vocabulary.negative.search(
                class_name(child)
            ):
                grandchildren_weight -= 30
                continue
            for grandchild in children(child):
                grandchildren_weight += self._descendant_weight(grandchild)
                for great_grandchild in children(grandchild):
                    great_grandchildren_weight += self._descendant_weight(great_grandchild)

        weight += round_half_up(grandchildren_weight * self.descendant_decay)
        weight += round_half_up(great_grandchildren_weight * self.descendant_decay)

        if has_caption:
            weight += 30

        if paragraph_count >= 2:
            for sibling in children(root):
                if sibling.name in HEADING_TAGS:
                    weight += 20
                    self.scratch.add_score(sibling, 20)
                elif sibling.name in TABULAR_TAGS:
                    self.scratch.add_score(sibling, -30)
                if sibling.name == "p":
                    self.scratch.add_score(sibling, 30)

        return weight

    def _descendant_weight(self, node: Tag) -> int:
        text = own_text(node)
        if len(text) < MIN_CHILD_TEXT_LENGTH:
            return 0
        weight = self._text_weight(text)
        if node.name in ("h1", "h2"):
            weight += 30
        elif node.name in ("div", "p"):
            weight += self._symbol_weight(node, text)
        return weight

    @staticmethod
    def _text_weight(text: str) -> int:
        if len(text) > LONG_CHILD_TEXT_LENGTH:
            return max(50, len(text) // 10)
        return 0

    def _symbol_weight(self, node: Tag, text: str) -> int:
        noise = sum(text.count(token) for token in MARKUP_NOISE_TOKENS)
        value = -30 if noise > 5 else round_half_up(len(text) / 35.0)
        self.scratch.add_score(node, value)
        return value

    def _extra_gravity(self, node: Tag) -> int:
        flagged = select_with_self(node, "[extragravityscore]")
        if not flagged:
            return 0
        raw = attr(flagged[0], "extragravityscore")
        try:
            return int(raw.strip())
        except ValueError:
            logger.debug("invalid_extra_gravity", value=raw)
            return 0
