"""
Main-content extraction engine.

One call owns one document tree. Metadata cascades run first, on the tree as
parsed; only then is the tree pruned, weighted and formatted, so the body
pass can never change what the title, date or author cascades saw.
"""

from __future__ import annotations

import asyncio
import copy
import hashlib
import time
from typing import TYPE_CHECKING, List, Mapping, Optional, Tuple, Union
from urllib.parse import urljoin, urlparse

import structlog
from bs4 import BeautifulSoup, Tag
from structlog.contextvars import bound_contextvars

from articlequarry.config.config import ExtractionSettings
from articlequarry.dom import ScratchTable, attr, element_text, has_leftover_markup, parse_document
from articlequarry.errors import EmptyDocumentError
from articlequarry.metadata.author import AuthorExtractor, cleanup_author_name
from articlequarry.metadata.basic import (
    extract_description,
    extract_favicon_url,
    extract_image_url,
    extract_keywords,
    extract_language,
    extract_rss_url,
    extract_site_name,
    extract_type,
    extract_video_url,
)
from articlequarry.metadata.canonical import extract_canonical_url
from articlequarry.metadata.cascade import replace_spaces
from articlequarry.metadata.dates import DateExtractor, DateParser
from articlequarry.metadata.entities import HttpEntityRecognizer
from articlequarry.metadata.title import extract_title
from articlequarry.models import ExtractionResult, ImageCandidate
from articlequarry.observability.metrics import increment, observe

from .formatter import OutputFormatter
from .images import determine_image_source
from .pruner import remove_domain_nodes, remove_scripts_and_styles, strip_unlikely
from .rules import BUILTIN_RULES, DomainKeys, DomainRuleSet, FormatterSettings
from .selector import CandidateSelector
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .weighting import WeightingEngine

if TYPE_CHECKING:
    from articlequarry.config import Config
    from articlequarry.protocols import EntityRecognizer, ResultCache

logger = structlog.get_logger(__name__)

Document = Union[BeautifulSoup, Tag]

SNIPPET_LENGTH = 50


def _snippet(text: str) -> str:
    return text[:SNIPPET_LENGTH]


class ArticleExtractor:
    """Extracts article text and metadata from raw HTML.

    Instances hold only read-only tables and may be shared between threads;
    every call parses (or copies) its own tree and uses its own scratch table.
    """

    def __init__(
        self,
        *,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        rules: DomainRuleSet = BUILTIN_RULES,
        formatter_settings: Optional[FormatterSettings] = None,
        settings: Optional[ExtractionSettings] = None,
        date_parser: Optional[DateParser] = None,
        recognizer: Optional[EntityRecognizer] = None,
        entity_exclusions: Optional[Mapping[str, str]] = None,
        cache: Optional[ResultCache] = None,
    ) -> None:
        self.vocabulary = vocabulary
        self.rules = rules
        self.formatter_settings = formatter_settings or FormatterSettings()
        self.settings = settings or ExtractionSettings()
        self.dates = DateExtractor(date_parser or DateParser())
        self.authors = AuthorExtractor(
            rules=rules, vocabulary=vocabulary, recognizer=recognizer, exclusions=entity_exclusions
        )
        self.cache = cache
        self.logger = logger.bind(component="article_extractor")

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        recognizer: Optional[EntityRecognizer] = None,
        cache: Optional[ResultCache] = None,
    ) -> ArticleExtractor:
        """Build every immutable table once from ``config``.

        When ``ner.enabled`` is set and no ``recognizer`` is passed, an HTTP
        recognizer is created from the ``ner`` section.
        """
        if recognizer is None and config.ner.enabled:
            recognizer = HttpEntityRecognizer.from_config(config.ner)
        formatter = config.formatter
        return cls(
            vocabulary=Vocabulary.from_config(config.vocabulary),
            rules=DomainRuleSet.from_config(config.domains),
            formatter_settings=FormatterSettings(
                min_first_paragraph_length=formatter.min_first_paragraph_length,
                min_paragraph_length=formatter.min_paragraph_length,
                keep_selector=formatter.keep_selector,
            ),
            settings=config.extraction,
            date_parser=DateParser.from_config(config.dates),
            recognizer=recognizer,
            entity_exclusions=config.ner.exclusions,
            cache=cache,
        )

    # --- entry points -------------------------------------------------------

    def extract(self, html: str, url: str = "") -> ExtractionResult:
        """Extract from raw HTML.

        Raises:
            EmptyDocumentError: ``html`` is empty. Markup that parses but
                holds nothing useful yields an empty result instead.
        """
        if not html:
            raise EmptyDocumentError("html string is empty")

        key = self.cache_key(html, url)
        if self.cache is not None:
            cached = self.cache.get(key)
            increment("cache_lookups", result="hit" if cached is not None else "miss")
            if cached is not None:
                return cached

        started = time.perf_counter()
        with bound_contextvars(document_url=url):
            result = self._extract_document(parse_document(html, self.settings.parser), url)
            if has_leftover_markup(result.text):
                # the first parser kept tags as character data; try the other one
                self.logger.info("reparsing_with_fallback_parser", parser=self.settings.fallback_parser)
                increment("fallbacks", kind="reparse")
                result = self._extract_document(parse_document(html, self.settings.fallback_parser), url)

        observe("extraction_seconds", time.perf_counter() - started)
        increment("extractions", outcome="text" if result.text else "empty")
        if self.cache is not None:
            self.cache.put(key, result)
        return result

    def extract_tree(self, doc: Document, url: str = "") -> ExtractionResult:
        """Extract from an already parsed tree. ``doc`` itself is left untouched."""
        with bound_contextvars(document_url=url):
            return self._extract_document(copy.copy(doc), url)

    async def extract_async(self, html: str, url: str = "") -> ExtractionResult:
        """Run :meth:`extract` in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.extract, html, url)

    @staticmethod
    def cache_key(html: str, url: str) -> str:
        digest = hashlib.sha1(html.encode("utf-8", errors="replace")).hexdigest()
        return f"{url}#{digest}"

    def close(self) -> None:
        recognizer = self.authors.recognizer
        if isinstance(recognizer, HttpEntityRecognizer):
            recognizer.close()

    # --- passes -------------------------------------------------------------

    def _extract_document(self, doc: Document, url: str) -> ExtractionResult:
        pristine = copy.copy(doc)
        result = self._run(doc, url, clean_scripts=True)
        if not result.text:
            # some pages keep their body inside <noscript> or script templates
            self.logger.debug("retrying_without_script_removal")
            increment("fallbacks", kind="keep_scripts")
            result = self._run(pristine, url, clean_scripts=False)
        if not result.text.strip():
            result.text = result.description
        return result

    def _run(self, doc: Document, url: str, clean_scripts: bool) -> ExtractionResult:
        settings = self.settings
        keys = DomainKeys.from_url(url)
        result = ExtractionResult(url=url)

        result.title = extract_title(doc)
        result.description = extract_description(doc)
        result.canonical_url = extract_canonical_url(doc, url, settings.allow_external_canonical)
        result.domain = keys.host
        result.top_private_domain = keys.top_private
        result.type = extract_type(doc)
        result.site_name = extract_site_name(doc)
        result.language = extract_language(doc)
        self._add_author(result, doc, keys)
        result.date = self.dates.extract(doc, url)

        if clean_scripts:
            remove_scripts_and_styles(doc, keep_noscript=self.rules.keeps_noscript(keys))
        strip_unlikely(doc, self.vocabulary)
        remove_domain_nodes(doc, self.rules.removal_selectors(keys))

        scratch = ScratchTable()
        engine = WeightingEngine(
            self.vocabulary,
            scratch,
            child_decay=settings.child_decay,
            descendant_decay=settings.descendant_decay,
            honor_extra_gravity=settings.honor_extra_gravity,
        )
        formatter = OutputFormatter(self.rules.formatter_for(keys) or self.formatter_settings, scratch)

        scored_images: Tuple[Optional[Tag], List[ImageCandidate]] = (None, [])

        def accept(node: Tag) -> bool:
            nonlocal scored_images
            if settings.extract_images:
                # formatting detaches image-only paragraphs, so score images first
                scored_images = determine_image_source(node, base_url=url)
            text = formatter.format(node, prune_negative=True)
            if not text:
                return False
            # short social posts can be shorter than their title; keep the title then
            if len(text) > len(result.title):
                if settings.max_content_size and len(text) > settings.max_content_size:
                    text = text[: settings.max_content_size]
                result.text = text
            return True

        best = CandidateSelector(engine, self.rules).select(doc, keys, accept)
        if best is not None:
            if settings.extract_images:
                self._add_images(result, *scored_images, url)
            self._add_links(result, best, url)

        if settings.extract_images and not result.image_url:
            result.image_url = extract_image_url(doc)
        result.rss_url = extract_rss_url(doc)
        result.video_url = extract_video_url(doc)
        result.favicon_url = extract_favicon_url(doc)
        result.keywords = extract_keywords(doc)

        self._check_author_description(result)
        if len(result.image_url) > settings.max_image_url_length:
            result.image_url = ""
        return result

    def _add_author(self, result: ExtractionResult, doc: Document, keys: DomainKeys) -> None:
        result.raw_author_name = self.authors.extract_raw(doc, keys)
        name = cleanup_author_name(result.raw_author_name)
        info = self.authors.resolve(name)
        if info is not None:
            name = info.joined()
        result.author_name = name
        result.author_description = self.authors.extract_description(doc, name)

    @staticmethod
    def _add_images(result: ExtractionResult, best: Optional[Tag], candidates: List[ImageCandidate], url: str) -> None:
        if best is None:
            return
        src = attr(best, "src")
        result.image_url = replace_spaces(urljoin(url, src) if url else src)
        result.images = candidates

    def _add_links(self, result: ExtractionResult, node: Tag, url: str) -> None:
        """Record every anchor of the body node with its offset in the node markup.

        Without a page URL relative hrefs cannot be resolved and are recorded
        as an empty URL; absolute hrefs are kept as they are.
        """
        markup = str(node)
        last = 0
        for anchor in node.select("a[href]"):
            href = attr(anchor, "href")
            if url:
                absolute = urljoin(url, href)
            else:
                absolute = href if urlparse(href).scheme else ""
            if len(absolute) > self.settings.max_link_length:
                continue
            position = markup.find(str(anchor), max(last, 0))
            result.add_link(absolute, element_text(anchor), position)
            last = position

    def _check_author_description(self, result: ExtractionResult) -> None:
        description = result.author_description
        if not description:
            return
        snippet = _snippet(description)
        if _snippet(result.text) == snippet or _snippet(result.description) == snippet:
            result.author_description = ""
        elif len(description) > self.settings.max_author_description_length:
            result.author_description = description[: self.settings.max_author_description_length]
