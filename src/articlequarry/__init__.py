"""
articlequarry - main-content, metadata and author extraction for web pages.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .cache import LRUResultCache
from .config import Config, load_config
from .errors import ArticleQuarryError, EmptyDocumentError
from .extractor.engine import ArticleExtractor
from .models import AuthorInfo, ExtractionResult, ImageCandidate, LinkCandidate

__all__ = [
    "__version__",
    "ArticleExtractor",
    "ArticleQuarryError",
    "AuthorInfo",
    "Config",
    "EmptyDocumentError",
    "ExtractionResult",
    "ImageCandidate",
    "LinkCandidate",
    "load_config",
    "LRUResultCache",
]
