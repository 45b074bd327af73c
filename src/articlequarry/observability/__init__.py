"""Logging and metrics."""

from __future__ import annotations

from .logging import configure_logging
from .metrics import METRICS, increment, observe

__all__ = ["configure_logging", "METRICS", "increment", "observe"]
