"""
Per-domain override tables.

Each table maps a domain key to the override for that site. A page is looked
up by its exact host first, then by its registrable (eTLD+1) domain, then by
that domain without its suffix; the first key present in a table wins.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlsplit

import structlog
import tldextract

from articlequarry.config import defaults

if TYPE_CHECKING:
    from articlequarry.config import DomainsConfig

logger = structlog.get_logger(__name__)

_DOMAIN_WITHOUT_TLD = re.compile(r"(www\.)?([^.]+).*")

# Bundled public suffix snapshot only; lookups never touch the network.
_SUFFIXES = tldextract.TLDExtract(suffix_list_urls=())


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


@dataclass(frozen=True, slots=True)
class DomainKeys:
    """The lookup keys derived from a page URL, most specific first."""

    host: Optional[str] = None
    top_private: Optional[str] = None
    without_tld: Optional[str] = None

    @classmethod
    def from_url(cls, url: Optional[str]) -> DomainKeys:
        if not url:
            return cls()
        try:
            host = urlsplit(url).hostname
        except ValueError:
            logger.debug("unparseable_url", url=url)
            return cls()
        if not host:
            return cls()
        host = host.rstrip(".").lower()
        if _is_ip(host):
            return cls()

        extracted = _SUFFIXES(host)
        if not (extracted.domain and extracted.suffix):
            return cls(host=host)
        top_private = f"{extracted.domain}.{extracted.suffix}"
        match = _DOMAIN_WITHOUT_TLD.fullmatch(top_private)
        return cls(host=host, top_private=top_private, without_tld=match.group(2) if match else None)

    def chain(self, include_without_tld: bool = True) -> Tuple[str, ...]:
        keys = [self.host, self.top_private]
        if include_without_tld:
            keys.append(self.without_tld)
        ordered: list[str] = []
        for key in keys:
            if key and key not in ordered:
                ordered.append(key)
        return tuple(ordered)


@dataclass(frozen=True, slots=True)
class FormatterSettings:
    min_first_paragraph_length: int = defaults.MIN_FIRST_PARAGRAPH_LENGTH
    min_paragraph_length: int = defaults.MIN_PARAGRAPH_LENGTH
    keep_selector: str = defaults.KEEP_SELECTOR


def _freeze_lists(table: Mapping[str, Iterable[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in table.items()})


@dataclass(frozen=True)
class DomainRuleSet:
    """Immutable override tables, built once and shared by every extraction."""

    removal: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    best_element: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    formatters: Mapping[str, FormatterSettings] = field(default_factory=dict)
    authors: Mapping[str, str] = field(default_factory=dict)
    keep_noscript: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "removal", _freeze_lists(self.removal))
        object.__setattr__(self, "best_element", _freeze_lists(self.best_element))
        object.__setattr__(self, "formatters", MappingProxyType(dict(self.formatters)))
        object.__setattr__(self, "authors", MappingProxyType(dict(self.authors)))
        object.__setattr__(self, "keep_noscript", frozenset(self.keep_noscript))

    @staticmethod
    def _first(table: Mapping[str, object], keys: Sequence[str]) -> Optional[object]:
        for key in keys:
            value = table.get(key)
            if value:
                return value
        return None

    def removal_selectors(self, keys: DomainKeys) -> Tuple[str, ...]:
        return self._first(self.removal, keys.chain()) or ()  # type: ignore[return-value]

    def best_element_selectors(self, keys: DomainKeys) -> Tuple[str, ...]:
        return self._first(self.best_element, keys.chain(include_without_tld=False)) or ()  # type: ignore[return-value]

    def formatter_for(self, keys: DomainKeys) -> Optional[FormatterSettings]:
        return self._first(self.formatters, keys.chain(include_without_tld=False))  # type: ignore[return-value]

    def author_selector(self, keys: DomainKeys) -> Optional[str]:
        return self._first(self.authors, keys.chain())  # type: ignore[return-value]

    def keeps_noscript(self, keys: DomainKeys) -> bool:
        return keys.host in self.keep_noscript

    def merged(
        self,
        *,
        removal: Optional[Mapping[str, Iterable[str]]] = None,
        best_element: Optional[Mapping[str, Iterable[str]]] = None,
        formatters: Optional[Mapping[str, FormatterSettings]] = None,
        authors: Optional[Mapping[str, str]] = None,
        keep_noscript: Iterable[str] = (),
    ) -> DomainRuleSet:
        """A new rule set with the given entries added or replacing existing keys."""
        return DomainRuleSet(
            removal={**self.removal, **_freeze_lists(removal or {})},
            best_element={**self.best_element, **_freeze_lists(best_element or {})},
            formatters={**self.formatters, **(formatters or {})},
            authors={**self.authors, **(authors or {})},
            keep_noscript=self.keep_noscript | frozenset(keep_noscript),
        )

    @classmethod
    def from_config(cls, config: DomainsConfig, base: Optional[DomainRuleSet] = None) -> DomainRuleSet:
        base = BUILTIN_RULES if base is None else base
        formatters: Dict[str, FormatterSettings] = {
            domain: FormatterSettings(**override.model_dump()) for domain, override in config.formatter.items()
        }
        return base.merged(
            removal=config.remove,
            best_element=config.best_element,
            formatters=formatters,
            authors=config.author,
            keep_noscript=config.keep_noscript,
        )


_HEADLINE_FORMATTER = FormatterSettings(keep_selector="p, ol, em, ul, li, h2")
_LISTICLE_FORMATTER = FormatterSettings(min_first_paragraph_length=30, min_paragraph_length=30, keep_selector="p, ol, em, ul, li, h2")

BUILTIN_RULES = DomainRuleSet(
    removal={
        "golocalprov.com": ["[id=slideshow-wrap]"],
        "cmo.com": ["[id=getupdatesform]"],
        "bestpaths.com": ["[id=secondary]"],
        "beet.tv": [".single-recent-post-container"],
        "efytimes.com": [".data-para"],
        "wn.com": [".caroufredsel_wrapper"],
        "www.reuters.com": [
            # this class holds only the headline on reuters
            ".section.main-content",
            "div[id=specialFeature]",
            "div.next-articles",
            "span.articleLocation",
        ],
        "investors.com": [".special-report", ".more-news"],
        "einnews.com": [".headlines.mini"],
        "fortune.com": ["[id=reprint-modal]"],
        "drimble.nl": [".dinfoo", ".dvv", ".ip"],
        "americanbanker.com": ["[id=whatis-pso-rss-content]"],
        "schwab.com": [".article-disclosure", ".article-call-to-action"],
        "theverge.com": [
            ".m-linkset__entries-item",
            ".m-linkset",
            ".feature-photos-story.feature-photos-column",
            ".js-carousel-pane",
            "[id=feature-photos-model]",
        ],
        "today.com": [".j-video-feeds", ".player-closedcaption"],
        "bizjournals.com": [
            ".breadcrumbs",
            '[class*="module module--padded"]',
            ".module.module--ruled",
            "[class^=promo]",
            ".item.item--flag",
        ],
        # every paragraph after the "Related Stories:" heading
        "therivardreport.com": ['h2:-soup-contains("Related Stories:") ~ p'],
        "inforisktoday": ['p:has(b):-soup-contains("See Also:")'],
        "nytimes.com": [".hidden"],
        "teenvogue.com": [".rendition-social-outer", "cite"],
        "philly.com": ['[class="pad-and-half--top cb"]'],
        "foxnews.com": ['p:-soup-contains("RELATED:") ~ ul'],
        "thehill.com": ["span.rollover-people-block"],
    },
    best_element={
        "video.foxbusiness.com": ["div.video-meta"],
        "macnn.com": ["div.container-wrapper"],
        "selling-stock.com": ["div.storycontent"],
        "prnewswire.com": ["div.release-body"],
        "theverge.com": ["article.m-feature"],
        "iheart.com": ["article"],
        "blog.linkedin.com": [".full-content"],
        "computerweekly.com": [".main-article-chapter"],
        "nytimes.com": [".theme-main"],
        "bizjournals.com": ["article[class=detail]"],
        "sltrib.com": ["#main-content > div.row"],
        "sfchronicle.com": ["div.article-text"],
        "teenvogue.com": ["div.listicle-wrapper", "noscript[data-reactid]"],
        "popsugar.com": [".shoppable-container"],
        "thehill.com": ["article"],
    },
    formatters={
        "drimble.nl": _HEADLINE_FORMATTER,
        "teenvogue.com": _LISTICLE_FORMATTER,
        "www.teenvogue.com": _LISTICLE_FORMATTER,
        "publicnet.co.uk": FormatterSettings(min_paragraph_length=25),
    },
    keep_noscript=frozenset({"teenvogue.com", "www.teenvogue.com"}),
)
