"""
In-process result cache.
"""

from __future__ import annotations

import copy
import threading
from collections import OrderedDict
from typing import Optional

from articlequarry.models import ExtractionResult


class LRUResultCache:
    """Thread-safe least-recently-used :class:`~articlequarry.protocols.ResultCache`.

    Results are copied on the way in and out so callers never share a mutable
    result with the cache.
    """

    def __init__(self, max_entries: int = 1024) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, ExtractionResult] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[ExtractionResult]:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return copy.deepcopy(result)

    def put(self, key: str, result: ExtractionResult) -> None:
        with self._lock:
            self._entries[key] = copy.deepcopy(result)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = self.misses = 0
