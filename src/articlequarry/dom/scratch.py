"""
Per-pass annotations for DOM nodes.

Scores, paragraph indexes and the "already emitted" marker live in a side
table keyed by a stable arena index instead of being written onto the tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from bs4 import Tag


@dataclass(slots=True)
class ScratchState:
    score: Optional[int] = None
    paragraph_index: Optional[int] = None
    content_extracted: bool = False
    author_weight: Optional[int] = None


class ScratchTable:
    """Maps nodes to their :class:`ScratchState` for one extraction pass.

    Node ids are assigned in first-seen order. The table keeps a reference to
    every registered node so ids stay unique for the lifetime of the table.
    """

    def __init__(self) -> None:
        self._ids: Dict[int, int] = {}
        self._nodes: List[Tag] = []
        self._states: Dict[int, ScratchState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def node_id(self, node: Tag) -> int:
        key = id(node)
        node_id = self._ids.get(key)
        if node_id is None:
            node_id = len(self._nodes)
            self._ids[key] = node_id
            self._nodes.append(node)
        return node_id

    def state(self, node: Tag) -> ScratchState:
        node_id = self.node_id(node)
        state = self._states.get(node_id)
        if state is None:
            state = self._states[node_id] = ScratchState()
        return state

    def peek(self, node: Tag) -> Optional[ScratchState]:
        node_id = self._ids.get(id(node))
        if node_id is None:
            return None
        return self._states.get(node_id)

    # --- score -----------------------------------------------------------

    def has_score(self, node: Tag) -> bool:
        state = self.peek(node)
        return state is not None and state.score is not None

    def score(self, node: Tag) -> int:
        state = self.peek(node)
        if state is None or state.score is None:
            return 0
        return state.score

    def set_score(self, node: Tag, score: int) -> None:
        self.state(node).score = score

    def add_score(self, node: Tag, delta: int) -> None:
        state = self.state(node)
        state.score = (state.score or 0) + delta

    # --- formatter markers -------------------------------------------------

    def paragraph_index(self, node: Tag) -> int:
        state = self.peek(node)
        if state is None or state.paragraph_index is None:
            return -1
        return state.paragraph_index

    def set_paragraph_index(self, node: Tag, index: int) -> None:
        self.state(node).paragraph_index = index

    def is_content_extracted(self, node: Tag) -> bool:
        state = self.peek(node)
        return state is not None and state.content_extracted

    def mark_content_extracted(self, node: Tag) -> None:
        self.state(node).content_extracted = True

    # --- author scoring ----------------------------------------------------

    def author_weight(self, node: Tag) -> int:
        state = self.peek(node)
        if state is None or state.author_weight is None:
            return 0
        return state.author_weight

    def set_author_weight(self, node: Tag, weight: int) -> None:
        self.state(node).author_weight = weight
