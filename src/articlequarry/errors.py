"""
Exception types raised by articlequarry.
"""

from __future__ import annotations


class ArticleQuarryError(Exception):
    """Base class for all articlequarry errors."""

    pass


class EmptyDocumentError(ArticleQuarryError, ValueError):
    """Raised when extraction is requested for an empty HTML string."""

    pass


class EntityServiceError(ArticleQuarryError):
    """Raised internally when the named-entity service cannot be reached or decoded."""

    pass
