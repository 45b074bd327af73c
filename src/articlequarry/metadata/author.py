"""
Author extraction.

Author candidates are scored with their own vocabulary, separate from the
article-body weighting: byline, author-card and vcard markup counts most,
address, writer and post-date markup counts less. Scoring runs on a private
copy of the document so junk removal never leaks into the other cascades.

The raw text of the winning element is cleaned (profile URLs, "by" style
prefixes, dates, digits and stray symbols removed) and, when a
:class:`~articlequarry.protocols.EntityRecognizer` is configured, resolved to
person or organisation names.
"""

from __future__ import annotations

import copy
import re
from collections import Counter
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple

import structlog
from bs4 import Tag

from articlequarry.dom import (
    ScratchTable,
    attr,
    children,
    class_name,
    element_id,
    element_text,
    inner_trim,
    is_text_node,
    own_text,
    safe_select,
    select_with_self,
)
from articlequarry.extractor.rules import BUILTIN_RULES, DomainKeys, DomainRuleSet
from articlequarry.extractor.selector import RankedCandidate, rank_candidates
from articlequarry.extractor.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from articlequarry.extractor.weighting import WeightingEngine
from articlequarry.models import AuthorInfo, EntityType

from .cascade import (
    Document,
    Step,
    first_text_step,
    meta_step,
    own_text_step,
    run_or_empty,
    string_cascade,
    url_step,
)
from .dates import DOCUMENT_DATE_PATTERNS, MONTH_NAMES

if TYPE_CHECKING:
    from articlequarry.protocols import EntityRecognizer

logger = structlog.get_logger(__name__)

MIN_AUTHOR_LENGTH = 3
MAX_AUTHOR_LENGTH = 150
MAX_AUTHOR_NAME_LENGTH = 255
MAX_CANDIDATES = 3
MAX_CLUSTER_SIZE = 2
MIN_NAME_LENGTH_FOR_DESCRIPTION_SEARCH = 8

AUTHOR_HIGHLY_POSITIVE = re.compile(
    r"autor|author|author[\-_]*name|article[\-_]*author[\-_]*name|author[\-_]*card|story[\-_]*author|"
    r"author[\-_]*link|date[\-_]*author|author[\-_]*date|byline|byline[\-_]*name|byLine[\-_]Tag|"
    r"contrib[\-_]*byline|vcard|profile",
    re.IGNORECASE,
)
AUTHOR_POSITIVE = re.compile(
    r"address|time[\-_]date|post[\-_]*date|source|news[\-_]*post[\-_]*source|meta[\-_]*author|"
    r"author[\-_]*meta|writer|submitted|creator|about[\-_]*reporter|profile-data|posted|contact",
    re.IGNORECASE,
)
AUTHOR_JUNK = re.compile(
    r"no_print|related[\-_]*post(s)?|sidenav|navigation|feedback[\-_]*prompt|related[\-_]*combined[\-_]*coverage|"
    r"visually[\-_]*hidden|page-footer|ad[\-_]*topjobs|slideshow[\-_]*overlay[\-_]*data|"
    r"next[\-_]*post[\-_]*thumbnails|video[\-_]*desc|related[\-_]*links|widget popular|^widget marketplace$|"
    r"^widget ad panel$|slideshowOverlay|^share-twitter$|^share-facebook$|dont_miss_container|"
    r"^share-google-plus-1$|^inline-list tags$|^tag_title$|article_meta comments|^related-news$|^recomended$|"
    r"^news_preview$|related--galleries|image-copyright--copyright|^credits$|^photocredit$|^morefromcategory$|"
    r"^pag-photo-credit$|gallery-viewport-credit|^image-credit$|story-secondary$|carousel-body|slider_container|"
    r"widget_stories|post-thumbs|^custom-share-links|socialTools|trendingStories|jcarousel-container|"
    r"module-video-slider|jcarousel-skin-tango|^most-read-content$|^commentBox$|^faqModal$|^widget-area|"
    r"login-panel|^copyright$|relatedSidebar|shareFooterCntr|most-read-container|email-signup|outbrain|"
    r"^wnStoryBodyGraphic|articleadditionalcontent|most-popular|shatner-box|form-errors|theme-summary|"
    r"story-supplement|global-magazine-recent|nocontent|hidden-print|externallinks|comment[\-_]*(list|thread)",
    re.IGNORECASE,
)
AUTHOR_ITEMPROP = re.compile(r"person|name|author|creator", re.IGNORECASE)

# Only text sitting directly inside these tags counts towards a byline.
AUTHOR_TEXT_TAGS = frozenset(["div", "p", "span", "em", "h1", "h2", "h3", "h4", "a", "li", "td", "b", "strong", "i"])

_SPECIAL_SYMBOLS = r"(\.|\+|-|@|:|\(|\)|/|\.\.\.|…)"
_MONTH_WORD = re.compile(r"(?:^|\s+)" + MONTH_NAMES + r"(?:\s+|$)")
IGNORED_AUTHOR_PARTS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"((https?://)?(www\.)?facebook.com/)"),
    re.compile(
        r"(?<!\w)(about the|from|Door|Über|by|name|author|posted|twitter|handle|news|locally researched|"
        r"report(ing|ed)?( by)?|edit(ing|ed)( by)?)(?!\w)",
        re.IGNORECASE,
    ),
    re.compile(r"\s+" + MONTH_NAMES + r"\s+"),
    re.compile(r"(\d+)"),
    re.compile(r"(?<!\w)" + _SPECIAL_SYMBOLS + r"(?!\w)"),
    re.compile(r"^\s*" + _SPECIAL_SYMBOLS),
    re.compile(_SPECIAL_SYMBOLS + r"\s*$"),
)
_NAME_NOISE = re.compile(r"[^\w.\-' ]+")
_WORD = re.compile(r"[^ \-]+")


def capitalize_fully(name: str) -> str:
    """Upper-case the first letter of every space or hyphen separated word, lower-case the rest."""
    return _WORD.sub(lambda m: m.group(0).capitalize(), name)


def recapitalize(name: str) -> str:
    """Fix the case of all-upper or all-lower names; mixed case is left alone."""
    if name.isupper() or name.islower():
        return capitalize_fully(name)
    return name


def cleanup_author_name(raw: str) -> str:
    """Strip profile URLs, labels, dates, digits and stray symbols from a byline."""
    name = raw or ""
    for pattern in DOCUMENT_DATE_PATTERNS:
        name = pattern.sub("", name)
    name = _MONTH_WORD.sub(" ", name)
    for pattern in IGNORED_AUTHOR_PARTS:
        name = pattern.sub(" ", name)
    return inner_trim(name[:MAX_AUTHOR_NAME_LENGTH])


def is_plausible_author(cleaned: str) -> bool:
    return MIN_AUTHOR_LENGTH <= len(cleaned) < MAX_AUTHOR_LENGTH


def author_text(element: Tag) -> str:
    """Text nodes whose parent is a text-bearing tag, space joined."""
    if element.name == "meta":
        return attr(element, "content")
    parts = [
        str(node)
        for node in element.descendants
        if is_text_node(node) and node.parent is not None and node.parent.name in AUTHOR_TEXT_TAGS
    ]
    return inner_trim(" ".join(parts))


# --- author description --------------------------------------------------------


def _joined_hrefs(selector: str) -> Step[str]:
    def run(doc: Document) -> str:
        return inner_trim(", ".join(attr(element, "href") for element in safe_select(doc, selector)))

    return Step(f"{selector}@href*", run)


def _parent_text(selector: str) -> Step[str]:
    def run(doc: Document) -> str:
        found = safe_select(doc, selector)
        if not found or not isinstance(found[0].parent, Tag):
            return ""
        return inner_trim(element_text(found[0].parent))

    return Step(f"{selector}:parent", run)


AUTHOR_DESCRIPTION = string_cascade(
    "author_description",
    first_text_step(".byline > .bio"),  # entrepreneur.com
    url_step("span.article-shared a"),  # patch.com
    first_text_step("section.about-the-author"),
    own_text_step("a.author-link"),
    first_text_step("span.author-card__microbio"),  # huffingtonpost.com
    first_text_step("body .author-function"),
    first_text_step("div.post-content p strong em"),
    first_text_step(".pb-author-bio"),  # washingtonpost.com
    first_text_step("span.author-title"),
    meta_step("meta[property='article:author']"),  # fortune.com
    first_text_step(".author_tag_firm_name"),  # jdsupra.com
    first_text_step("[id*=contentbios]"),
    first_text_step("body [class*=user-biography]"),
    first_text_step("#author_d"),  # mediapost.com
    _parent_text(".content.clearfix p em a"),
    first_text_step("p.contrib-byline"),
    _joined_hrefs("div .main-article-author-contact a"),  # computerweekly.com
    _joined_hrefs("ul.author-info li a"),  # wsj.com
    own_text_step("div.timedate"),
    url_step(".vcard > a"),  # politico.com
    url_step("table.storyauthor td a"),
    url_step("span[itemprop=name] a"),
    own_text_step("div[class=ra-credits]"),
    first_text_step("div.date_author"),
)


# --- extractor -----------------------------------------------------------------


class AuthorExtractor:
    """Finds the byline of a page and, optionally, resolves it to entity names."""

    def __init__(
        self,
        rules: DomainRuleSet = BUILTIN_RULES,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        recognizer: Optional[EntityRecognizer] = None,
        exclusions: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.rules = rules
        self.vocabulary = vocabulary
        self.recognizer = recognizer
        self.exclusions: Dict[str, str] = {name.lower(): kind.upper() for name, kind in (exclusions or {}).items()}
        self.logger = logger.bind(component="author_extractor")

    # raw byline ------------------------------------------------------------

    def extract_raw(self, doc: Document, keys: Optional[DomainKeys] = None) -> str:
        """Raw byline text: domain selector, then weighted scoring, then meta tags."""
        if keys is not None:
            selector = self.rules.author_selector(keys)
            if selector:
                found = safe_select(doc, selector)
                text = inner_trim(element_text(found[0])) if found else ""
                if text:
                    self.logger.debug("author_domain_rule", selector=selector, host=keys.host)
                    return text

        raw = self._best_scored(doc)
        if raw:
            return raw
        return self._from_meta(doc)

    def _best_scored(self, doc: Document) -> str:
        clone = copy.copy(doc)
        scratch = ScratchTable()
        for element in [el for el in clone.find_all(True) if AUTHOR_JUNK.search(class_name(el))]:
            if not element.decomposed:
                element.decompose()

        ranked: List[RankedCandidate] = []
        for position, element in enumerate(clone.find_all(True)):
            if element.name == "meta" or not element_text(element):
                continue
            weight = self._special_weight(element, scratch)
            weight += self._highly_positive_weight(element)
            weight += self._positive_weight(element)
            if weight > 0:
                scratch.set_author_weight(element, weight)
                ranked.append(RankedCandidate(weight=weight, position=position, node=element))

        ranked = self._drop_clusters(ranked)
        ranked.sort(key=lambda candidate: candidate.sort_key)
        for candidate in ranked[:MAX_CANDIDATES]:
            raw = author_text(candidate.node)
            self.logger.debug("author_candidate", tag=candidate.node.name, weight=candidate.weight, text=raw[:80])
            if raw and is_plausible_author(cleanup_author_name(raw)):
                return raw
        return ""

    @staticmethod
    def _drop_clusters(ranked: List[RankedCandidate]) -> List[RankedCandidate]:
        """Discard elements repeated with the same tag, class and weight, e.g. bylines in a related list."""

        def key(candidate: RankedCandidate) -> Tuple[str, str, int]:
            return (candidate.node.name, class_name(candidate.node), candidate.weight)

        sizes = Counter(key(candidate) for candidate in ranked)
        return [candidate for candidate in ranked if sizes[key(candidate)] <= MAX_CLUSTER_SIZE]

    @staticmethod
    def _special_weight(element: Tag, scratch: ScratchTable) -> int:
        weight = 0
        if element.has_attr("itemprop") and scratch.author_weight(element) == 0:
            if AUTHOR_ITEMPROP.search(attr(element, "itemprop")):
                weight = 250
                for inner in select_with_self(element, "*"):
                    if inner.has_attr("itemprop") and AUTHOR_ITEMPROP.search(attr(inner, "itemprop")):
                        scratch.set_author_weight(inner, 300)
                    weight += 200
        else:
            count = sum(
                1
                for child in children(element)
                if child.has_attr("itemprop") and AUTHOR_ITEMPROP.search(attr(child, "itemprop"))
            )
            if count > 1:
                weight = count * 200 + 450

        if element.name == "a" and "/author" in attr(element, "href"):
            weight += 30
        return weight

    @staticmethod
    def _highly_positive_weight(element: Tag) -> int:
        weight = 0
        if AUTHOR_HIGHLY_POSITIVE.search(class_name(element)):
            weight += 200
        if AUTHOR_HIGHLY_POSITIVE.search(element_id(element)):
            weight += 100
        return weight

    @staticmethod
    def _positive_weight(element: Tag) -> int:
        weight = 0
        if AUTHOR_POSITIVE.search(element_id(element)):
            weight += 80
        if AUTHOR_POSITIVE.search(class_name(element)):
            weight += 40
        return weight

    @staticmethod
    def _from_meta(doc: Document) -> str:
        for element in safe_select(doc, "meta[property*=author], meta[property*=creator], meta[name=author]"):
            content = inner_trim(attr(element, "content"))
            if content and is_plausible_author(cleanup_author_name(content)):
                return content
        return ""

    # entity resolution -----------------------------------------------------

    def resolve(self, cleaned: str) -> Optional[AuthorInfo]:
        """Person names (two most salient) or else one organisation, or ``None``."""
        if self.recognizer is None or not cleaned:
            return None
        entities = self.recognizer.get_entities(cleaned)
        if not entities:
            return None

        def pick(kind: EntityType, limit: int) -> Tuple[str, ...]:
            matching = [
                entity
                for entity in entities
                if entity.type is kind and entity.representative and not self._excluded(entity.representative, kind)
            ]
            matching.sort(key=lambda entity: entity.salience, reverse=True)
            names = []
            for entity in matching:
                name = recapitalize(_NAME_NOISE.sub("", entity.representative).strip())
                if name and name not in names:
                    names.append(name)
                if len(names) == limit:
                    break
            return tuple(names)

        persons = pick(EntityType.PERSON, 2)
        if persons:
            return AuthorInfo(names=persons, entity_type=EntityType.PERSON)
        organizations = pick(EntityType.ORGANIZATION, 1)
        if organizations:
            return AuthorInfo(names=organizations, entity_type=EntityType.ORGANIZATION)
        self.logger.debug("no_author_entities", text=cleaned)
        return None

    def _excluded(self, name: str, kind: EntityType) -> bool:
        excluded_kind = self.exclusions.get(name.lower())
        return excluded_kind is not None and excluded_kind in (kind.value, "*")

    # description -----------------------------------------------------------

    def extract_description(self, doc: Document, author_name: str) -> str:
        if not author_name:
            return ""
        description = run_or_empty(AUTHOR_DESCRIPTION, doc)
        if description:
            return description

        name = author_name.strip()
        if len(name) <= MIN_NAME_LENGTH_FOR_DESCRIPTION_SEARCH:
            return ""
        lowered = name.lower()
        nodes = [element for element in doc.find_all(True) if lowered in own_text(element).lower()]
        if not nodes:
            return ""
        engine = WeightingEngine(self.vocabulary, ScratchTable(), honor_extra_gravity=False)
        best = rank_candidates(nodes, engine)[0].node
        return inner_trim(element_text(best))
