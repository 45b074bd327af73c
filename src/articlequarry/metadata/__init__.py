"""
Metadata cascades: title, description, canonical URL, date, author and the
smaller page properties.
"""

from .author import AuthorExtractor, cleanup_author_name
from .canonical import extract_canonical_url, resolve_canonical
from .cascade import Cascade, Step
from .dates import DateExtractor, DateParser
from .entities import HttpEntityRecognizer, NamedEntity
from .title import extract_title

__all__ = [
    "AuthorExtractor",
    "Cascade",
    "cleanup_author_name",
    "DateExtractor",
    "DateParser",
    "extract_canonical_url",
    "extract_title",
    "HttpEntityRecognizer",
    "NamedEntity",
    "resolve_canonical",
    "Step",
]
