"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple


class EntityType(Enum):
    """Entity kinds the recognition service reports that author resolution uses."""

    PERSON = "PERSON"
    ORGANIZATION = "ORGANIZATION"


@dataclass(slots=True, frozen=True)
class ImageCandidate:
    """An ``<img>`` found near the article body, with its heuristic weight."""

    url: str
    weight: int
    title: str = ""
    height: int = 0
    width: int = 0
    alt: str = ""
    no_follow: bool = False


@dataclass(slots=True, frozen=True)
class LinkCandidate:
    url: str
    text: str
    offset: int  # position of the anchor's markup inside the body's serialized HTML


@dataclass(slots=True, frozen=True)
class AuthorInfo:
    """Author names as resolved by the entity service."""

    names: Tuple[str, ...]
    entity_type: EntityType

    def joined(self) -> str:
        return ", ".join(self.names)


@dataclass(slots=True)
class ExtractionResult:
    """Everything extracted from one page.

    Cascades fill fields one by one; a cascade that finds nothing leaves its
    field at the default.
    """

    url: str = ""
    title: str = ""
    text: str = ""
    description: str = ""
    canonical_url: str = ""
    domain: Optional[str] = None
    top_private_domain: Optional[str] = None
    type: str = ""
    site_name: str = ""
    language: str = ""
    raw_author_name: str = ""
    author_name: str = ""
    author_description: str = ""
    date: Optional[datetime] = None
    image_url: str = ""
    images: List[ImageCandidate] = field(default_factory=list)
    links: List[LinkCandidate] = field(default_factory=list)
    rss_url: str = ""
    video_url: str = ""
    favicon_url: str = ""
    keywords: List[str] = field(default_factory=list)

    def add_link(self, url: str, text: str, offset: int) -> None:
        self.links.append(LinkCandidate(url=url, text=text, offset=offset))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat() if self.date else None
        return data
