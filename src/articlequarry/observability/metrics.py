"""
Prometheus metrics for extraction runs.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram


def _duplicate_safe_factory(metric_cls: Any) -> Any:
    """Return a factory that reuses an existing collector if already registered."""

    def _factory(name: str, documentation: str, *args: Any, **kwargs: Any) -> Any:
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing
        try:
            return metric_cls(name, documentation, *args, **kwargs)
        except ValueError:
            # registration lost the race; use the collector that won
            return _PROM_REGISTRY._names_to_collectors[name]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)
Histogram = _duplicate_safe_factory(_OrigHistogram)

METRICS: Dict[str, Any] = {
    "extractions": Counter(
        "articlequarry_extractions_total",
        "Documents run through the extraction engine",
        ["outcome"],
    ),
    "extraction_seconds": Histogram(
        "articlequarry_extraction_seconds",
        "Wall time of one extraction",
        buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    ),
    "fallbacks": Counter(
        "articlequarry_fallbacks_total",
        "Extractions that needed a second pass",
        ["kind"],
    ),
    "cache_lookups": Counter(
        "articlequarry_cache_lookups_total",
        "Result cache lookups",
        ["result"],
    ),
}


def increment(name: str, value: float = 1.0, **labels: str) -> None:
    """Increment a counter metric."""
    metric = METRICS[name]
    if labels:
        metric = metric.labels(**labels)
    metric.inc(value)


def observe(name: str, value: float) -> None:
    """Observe a histogram metric."""
    METRICS[name].observe(value)
