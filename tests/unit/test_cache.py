"""
Unit tests for the in-process result cache.
"""

from __future__ import annotations

import pytest

from articlequarry.cache import LRUResultCache
from articlequarry.models import ExtractionResult


class TestLRUResultCache:
    def test_miss_then_hit(self):
        cache = LRUResultCache()
        assert cache.get("a") is None
        cache.put("a", ExtractionResult(title="A"))
        assert cache.get("a").title == "A"
        assert (cache.hits, cache.misses) == (1, 1)

    def test_least_recently_used_is_evicted(self):
        cache = LRUResultCache(max_entries=2)
        cache.put("a", ExtractionResult(title="A"))
        cache.put("b", ExtractionResult(title="B"))
        cache.get("a")
        cache.put("c", ExtractionResult(title="C"))
        assert len(cache) == 2
        assert cache.get("b") is None
        assert cache.get("a").title == "A"
        assert cache.get("c").title == "C"

    def test_results_are_copied(self):
        cache = LRUResultCache()
        result = ExtractionResult(keywords=["one"])
        cache.put("a", result)
        result.keywords.append("two")
        cached = cache.get("a")
        assert cached.keywords == ["one"]
        cached.keywords.append("three")
        assert cache.get("a").keywords == ["one"]

    def test_clear(self):
        cache = LRUResultCache()
        cache.put("a", ExtractionResult())
        cache.get("a")
        cache.clear()
        assert len(cache) == 0
        assert (cache.hits, cache.misses) == (0, 0)

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValueError):
            LRUResultCache(max_entries=0)
