"""
Contracts for the collaborators the extraction engine talks to.

The engine itself does no I/O: entity recognition and result caching are
injected through these protocols so callers can swap in their own clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from articlequarry.metadata.entities import NamedEntity
    from articlequarry.models import ExtractionResult


@runtime_checkable
class EntityRecognizer(Protocol):
    """Named-entity recognition used to disambiguate author names."""

    def get_entities(self, text: str) -> Optional[List[NamedEntity]]:
        """Entities found in ``text``, or ``None`` when the lookup failed."""
        ...


@runtime_checkable
class ResultCache(Protocol):
    """Key to result store shared between extractions."""

    def get(self, key: str) -> Optional[ExtractionResult]:
        ...

    def put(self, key: str, result: ExtractionResult) -> None:
        ...
