"""
Publication date extraction.

Three sources are tried in order: a long list of site-specific selectors and
meta tags, a scan of the whole document for date-looking text, and finally a
``/yyyy/mm/dd/`` path in the page URL. Every candidate string is cleaned of
label text ("Published:", "Posted on", ...) and parsed against a fixed list
of formats; dates outside the configured year range count as no match.
"""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

import structlog
from bs4 import Tag
from dateutil import tz

from articlequarry.dom import element_text, first_attr, inner_trim, own_text, safe_select

from .cascade import Cascade, Document, Step

if TYPE_CHECKING:
    from articlequarry.config import DateConfig

logger = structlog.get_logger(__name__)

MONTH_NAMES = r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec|January|February|March|April|May|June|July|August|September|October|November|December)"
_TIME_SUFFIX = r"\s*(\d{2}[\-.:]?\d{2}([\-.:]?\d{2})?)?"

# Date-looking text anywhere in the markup, most specific layout first.
DOCUMENT_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d{4}[\-./]?\d{2}[\-./]?\d{2}" + _TIME_SUFFIX),
    re.compile(r"\d{2} " + MONTH_NAMES + r"\s\d{4}" + _TIME_SUFFIX, re.IGNORECASE),
    re.compile(MONTH_NAMES + r"\s\d{2},\s\d{4}" + _TIME_SUFFIX, re.IGNORECASE),
    re.compile(r"\d{2}[\-./]?\d{2}[\-./]?\d{4}" + _TIME_SUFFIX),
)

# Label text around the date; the first full match wins and its group is kept.
LABEL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"Published ([A-Za-z]* \d{1,2}, \d{4}).*",
        r"Published Online:(.*)",
        r"Published on:(.*)",
        r"Published on(.*)",
        r"Published:(.*)",
        r"Published(.*)",
        r"Posted on:(.*)",
        r"Posted on(.*)",
        r"Posted:(.*)",
        r"Posted(.*)",
        r"Updated on:(.*)",
        r"Updated on(.*)",
        r"Updated:(.*)",
        r"Updated(.*)",
        r"on:(.*)",
        r"on(.*)",
        r"(.*)Uhr",
    )
)

SCRIPT_DATE_PATTERN = re.compile(
    r'"(ptime|publish(ed)?[_\-]?(date|time)?|(date|time)?[_\-]?publish(ed)?|posted[_\-]?on|display[_\-]?(date|time)?)"'
    r'\s*:\s*"(?P<date>[^"]*?)"',
    re.IGNORECASE,
)
SCRIPT_LINK_TEXT = re.compile(r"<a[^>]*>([^<]*)</a>")

# Tried in order; earlier formats win for ambiguous day/month layouts.
DATE_FORMATS: tuple[str, ...] = (
    "%d %b %Y at %I:%M%p",
    "%d %b %Y %H:%M",
    "%d %b %Y %H:%M:%S",
    "%d %b %Y",
    "%d-%m-%Y %H:%M",
    "%d-%m-%Y %H:%M:%S",
    "%d.%m.%Y - %H:%M",
    "%m/%d/%y %I:%M%p",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%a %b %d, %Y %I:%M%p",  # Thursday November 12, 2015 10:17AM
    "%a %d %b, %Y",  # Friday 9 December, 2016
    "%a, %d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S",
    "%a, %d %b %Y",
    "%a, %b %d, %Y %H:%M",
    "%a, %b %d, %Y %I:%M:%S %z %p",
    "%a, %b %d, %Y %H:%M:%S",
    "%a, %b %d, %Y",
    "%H:%M %z, %d %b %Y",  # 09:09 EST, 20 September 2014
    "%H:%M, UK, %a %d %b %Y",  # 09:39, UK, Thursday 09 July 2015
    "%m-%d-%Y %I:%M %p %z",
    "%m-%d-%Y %I:%M %p",
    "%m-%d-%Y %H:%M",
    "%m-%d-%Y %I:%M:%S %p %z",
    "%m-%d-%Y %I:%M:%S %p",
    "%m-%d-%Y %H:%M:%S",
    "%m-%d-%Y",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M:%S %p %z",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M%p",
    "%m/%d/%Y %I:%M%p",  # 10/31/2011 2:00PM
    "%m/%d/%Y",
    "%b %d, %Y at %I:%M %p %z",
    "%b %d, %Y at %I:%M %p",
    "%b %d, %Y at %I:%M",
    "%b %d, %Y %I:%M %p %z",
    "%b %d, %Y %I:%M %p",
    "%b %d, %Y %H:%M",
    "%b %d, %Y %I:%M:%S %p %z",
    "%b %d, %Y %I:%M:%S %p",
    "%b %d, %Y %H:%M:%S",
    "%b %d, %Y",
    "%b. %d, %Y %I:%M %p %z",
    "%b. %d, %Y %I:%M %p",
    "%b. %d, %Y %H:%M",
    "%b. %d, %Y %I:%M:%S %p %z",
    "%b. %d, %Y %I:%M:%S %p",
    "%b. %d, %Y %H:%M:%S",
    "%b. %d, %Y",
    "%Y-%m-%d %I:%M %p %z",
    "%Y-%m-%d %I:%M %p",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %I:%M:%S %p %z",
    "%Y-%m-%d %I:%M:%S %p",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%f%z",  # 2015-08-05T11:52:09.720380-0700
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M%z",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %I:%M:%S %p %z",
    "%Y/%m/%d %I:%M:%S %p",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y%m%d %H%M",
    "%Y%m%d %H%M%S",
    "%Y%m%d",
    "%Y%m%d%H%M",
    "%Y%m%d%H%M%S",
    "%I:%M %p %z %b %d, %Y",  # 07:41 PM CDT Jun 14, 2015
    "%a %b %d %H:%M:%S %z %Y",  # Thu Feb 07 00:00:00 EST 2013
    "%Y-%m-%d %H:%M:%S.0",  # 2015-12-28 06:30:00.0
    "%Y-%m-%d %H:%M:%S %z",  # 2016-01-17 15:21:00 -0800
    "%b %d %Y",  # October 05 2015
    "%I:%M %p %z, %a %b %d, %Y",  # 08:51 am EST, Thu March 3, 2016
    "%d-%m-%Y",  # 20-05-2016
    "%H:%M, %b %d %Y",  # 15:56, June 15 2016
    "%I:%M %p - %d %b %y",  # 11:45 AM - 7 Aug 15
    "%b %d, %Y %I:%M%p",  # July 12, 2016  6:31am
    "%d.%m.%y",  # 22.09.16
    "%d-%b-%Y",  # 14-Oct-2016
    "%Y-%m-%d %H:%M:%S.%f %z",
)

_TRAILING_ZULU = re.compile(r"Z$")
_OFFSET_COLON = re.compile(r"(.*[+-]\d\d):(\d\d)")
_ORDINAL = re.compile(r"(\d)(?:st|nd|rd|th)")
_FULL_MONTH = re.compile(
    r"\b(January|February|March|April|June|July|August|September|Sept|October|November|December)\b", re.IGNORECASE
)
_FULL_WEEKDAY = re.compile(r"\b(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday|Tues|Thurs)\b", re.IGNORECASE)
_GMT_OFFSET = re.compile(r"\b(?:GMT|UTC)\s?([+-]\d\d):?(\d\d)\b")
_ZONE_NAMES = {
    "EST": "-0500",
    "EDT": "-0400",
    "CST": "-0600",
    "CDT": "-0500",
    "MST": "-0700",
    "MDT": "-0600",
    "PST": "-0800",
    "PDT": "-0700",
    "GMT": "+0000",
    "UTC": "+0000",
    "BST": "+0100",
    "CET": "+0100",
    "CEST": "+0200",
}
_ZONE_NAME = re.compile(r"\b(" + "|".join(_ZONE_NAMES) + r")\b")


def clean_date(text: str) -> str:
    """Strip labels and normalise punctuation so ``text`` fits one of :data:`DATE_FORMATS`."""
    text = _TRAILING_ZULU.sub("+0000", text)
    if "GMT" not in text:
        text = _OFFSET_COLON.sub(r"\1\2", text)

    for pattern in LABEL_PATTERNS:
        match = pattern.fullmatch(text)
        if match:
            text = inner_trim(match.group(1))
            break

    text = text.replace("@", "")
    text = _ORDINAL.sub(r"\1", text)
    text = text.replace("a.m.", "AM").replace("p.m.", "PM")

    text = _FULL_MONTH.sub(lambda m: m.group(1)[:3], text)
    text = _FULL_WEEKDAY.sub(lambda m: m.group(1)[:3], text)
    text = _GMT_OFFSET.sub(r"\1\2", text)
    text = _ZONE_NAME.sub(lambda m: _ZONE_NAMES[m.group(1)], text)
    return text.strip()


def estimate_date_from_url(url: Optional[str]) -> Optional[str]:
    """``yyyy[/mm[/dd]]`` taken from consecutive URL path segments, if any."""
    if not url:
        return None
    scheme_end = url.find("://")
    if scheme_end > 0:
        url = url[scheme_end + 3 :]

    year = month = day = -1
    year_segment = month_segment = -1
    for index, segment in enumerate(url.split("/")):
        if len(segment) == 4:
            if not segment.isdigit():
                continue
            year = int(segment)
            if not 1970 <= year <= 3000:
                year = -1
                continue
            year_segment = index
        elif len(segment) == 2:
            if month_segment < 0 and index == year_segment + 1:
                if not segment.isdigit():
                    continue
                month = int(segment)
                if not 1 <= month <= 12:
                    month = -1
                    continue
                month_segment = index
            elif index == month_segment + 1:
                day = int(segment) if segment.isdigit() else -1
                if not 1 <= day <= 31:
                    day = -1
                    continue
                break

    if year < 0:
        return None
    if month < 1:
        return str(year)
    if day < 1:
        return f"{year}/{month:02d}"
    return f"{year}/{month:02d}/{day:02d}"


def complete_date(date: Optional[str]) -> Optional[str]:
    """Pad a partial ``yyyy[/mm]`` date to a full ``yyyy/mm/dd``."""
    if date is None:
        return None
    separators = date.count("/")
    if separators >= 2:
        return date
    if separators == 1:
        return date + "/01"
    return date + "/01/01"


class DateParser:
    """Parses free-form date strings into timezone-aware datetimes."""

    def __init__(self, default_timezone: str = "UTC", min_year: int = 1970, max_year: int = 2100) -> None:
        zone = tz.gettz(default_timezone)
        if zone is None:
            raise ValueError(f"unknown timezone: {default_timezone}")
        self.default_timezone: tzinfo = zone
        self.min_year = min_year
        self.max_year = max_year

    @classmethod
    def from_config(cls, config: DateConfig) -> DateParser:
        return cls(default_timezone=config.default_timezone, min_year=config.min_year, max_year=config.max_year)

    def is_plausible(self, value: datetime) -> bool:
        return self.min_year <= value.year < self.max_year

    def parse(self, text: Optional[str]) -> Optional[datetime]:
        if not text:
            return None
        cleaned = clean_date(text)
        if not cleaned:
            return None
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(cleaned, fmt)
            except ValueError:
                continue
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=self.default_timezone)
            if not self.is_plausible(parsed):
                logger.debug("implausible_date", value=cleaned, year=parsed.year)
                return None
            return parsed
        return None

    def parse_first(self, candidates: Iterable[str]) -> Optional[datetime]:
        for candidate in candidates:
            parsed = self.parse(candidate)
            if parsed is not None:
                return parsed
        return None

    def from_url(self, url: Optional[str]) -> Optional[datetime]:
        return self.parse(complete_date(estimate_date_from_url(url)))

    def scan(self, markup: str) -> Optional[datetime]:
        """First parseable date-looking string anywhere in ``markup``."""
        for pattern in DOCUMENT_DATE_PATTERNS:
            for match in pattern.finditer(markup):
                parsed = self.parse(match.group(0))
                if parsed is not None:
                    return parsed
        return None


# --- cascade steps -------------------------------------------------------------

Reader = Callable[[Tag], List[str]]


def _content(element: Tag) -> List[str]:
    return [str(element["content"])] if element.has_attr("content") else []


def _content_or_text(element: Tag) -> List[str]:
    return _content(element) or [element_text(element)]


def _datetime_or_text(element: Tag) -> List[str]:
    if element.has_attr("datetime"):
        return [str(element["datetime"])]
    return [element_text(element)]


def _datetime_then_text(element: Tag) -> List[str]:
    found = [str(element["datetime"])] if element.has_attr("datetime") else []
    return found + [element_text(element)]


def _text(element: Tag) -> List[str]:
    return [element_text(element)]


def _own(element: Tag) -> List[str]:
    return [own_text(element)]


def _content_attr(element: Tag) -> List[str]:
    value = element.get("content")
    return [str(value) if value is not None else ""]


def _first_of(selector: str, read: Reader, parser: DateParser) -> Step[datetime]:
    def run(doc: Document) -> Optional[datetime]:
        found = safe_select(doc, selector)
        return parser.parse_first(read(found[0])) if found else None

    return Step(selector, run)


def _published_meta(parser: DateParser) -> Step[datetime]:
    selectors = (
        "meta[name=ptime]",  # nytimes
        "meta[name=utime]",
        "meta[name=pdate]",
        'meta[property="article:published"]',
        'meta[property="og:article:published_time"]',
    )

    def run(doc: Document) -> Optional[datetime]:
        for selector in selectors:
            value = inner_trim(first_attr(doc, selector, "content"))
            if value:
                return parser.parse(value)
        return None

    return Step("published_meta", run)


def _script_link_text(parser: DateParser) -> Step[datetime]:
    def run(doc: Document) -> Optional[datetime]:
        for script in safe_select(doc, 'script[type="text/javascript"]'):
            markup = str(script)
            if "main-article-author-date" not in markup:
                continue
            match = SCRIPT_LINK_TEXT.search(markup)
            if match:
                parsed = parser.parse(match.group(1))
                if parsed is not None:
                    return parsed
        return None

    return Step("script_author_date", run)


def _script_json(parser: DateParser) -> Step[datetime]:
    def run(doc: Document) -> Optional[datetime]:
        for script in safe_select(doc, 'script[type="text/javascript"], script[type="application/ld+json"]'):
            for match in SCRIPT_DATE_PATTERN.finditer(str(script)):
                parsed = parser.parse(match.group("date"))
                if parsed is not None:
                    return parsed
        return None

    return Step("script_json_date", run)


def build_date_cascade(parser: DateParser) -> Cascade[datetime]:
    """Selector strategies, most trusted first. Several exist for a single site."""
    text_selectors = (
        "[id=articleDate]",
        '[class*=articlePosted], [class*="_date -body-copy"], .date-display-single',
        '*[href*="query=date:"]',  # archive.org
    )
    trailing_text_selectors = (
        "p.story-footer",
        "[data-reactid].date",  # yahoo
        ".bodyDate",
        "span.entry-date",
        "div.date.date--v2",  # bbc.com
        "section[id=publishedContent] span.date",
        ".article-byline .text-nowrap",
        "header p.details",
        ".meta-box span b",
        ".container [data-bvo-type*=published-date]",
        ".meta .date",
        ".status-update .info",
        "article div.date",
        ".publish-info .date",
        ".article_box span",
        "article span em",
        "time[pubdate]",
    )
    steps: List[Step[datetime]] = [
        _published_meta(parser),
        _first_of('meta[property="article:published_time"]', _content, parser),
        _script_link_text(parser),  # computerweekly.com
        _first_of("[id=post-time]", _own, parser),
        _first_of("meta[property=dateCreated], span[property=dateCreated]", _content_or_text, parser),
        _first_of("time.dateCreated", _datetime_or_text, parser),
        _first_of('meta[name="dc.date"]', _content, parser),
        _first_of("meta[name=OriginalPublicationDate]", _content, parser),
        _first_of("meta[name=DisplayDate]", _content, parser),
        _first_of("meta[name*=date]", _content, parser),
        _first_of(".date-header", _text, parser),  # blogger
        _first_of("time.published, time.entry-date.published", _text, parser),
        _first_of("*[itemprop=datePublished]", _datetime_then_text, parser),
        _first_of("*[itemprop=dateCreated]", _datetime_then_text, parser),
        _first_of("[id=post-date], [id*=posted_time], [id*=fhtime]", _text, parser),
        _first_of(".storydatetime", _text, parser),
        _first_of(".storyDate", _text, parser),
        _first_of(".posted", _datetime_then_text, parser),
        _first_of(
            ".published-date, [class*=postedAt], .published, [class*=blogdate], [class*=posted_date], "
            "[class*=post_date], [class*=origin-date], [class*=xn-chron], [class*=article-timestamp], "
            ".post-date, [class*=masthead__date], [class*=content-container__date]",
            _text,
            parser,
        ),
        _first_of("[class*=updated]", _datetime_then_text, parser),
        _first_of("[class*=content-times], [class*=item--time]", _text, parser),
        _first_of("time[data-always-show=true]", _datetime_then_text, parser),  # msn.com
        _first_of(".author_tag_space time", _text, parser),
    ]
    steps.extend(_first_of(selector, _text, parser) for selector in text_selectors)
    steps.append(_first_of("*[itemprop=datePublished]", _content_attr, parser))
    steps.append(_first_of('*[itemprop="datePublished dateModified"]', _content_attr, parser))
    steps.extend(_first_of(selector, _text, parser) for selector in trailing_text_selectors)
    steps.append(_first_of("[itemprop=uploadDate]", _content_attr, parser))
    steps.append(_first_of(".byline-date", _own, parser))
    steps.append(_script_json(parser))
    return Cascade("date", steps)


class DateExtractor:
    """Selector cascade, then a whole-document scan, then the URL path."""

    def __init__(self, parser: Optional[DateParser] = None) -> None:
        self.parser = parser or DateParser()
        self.cascade = build_date_cascade(self.parser)
        self.logger = logger.bind(component="date_extractor")

    def extract(self, doc: Document, url: Optional[str] = None) -> Optional[datetime]:
        found = self.cascade.run(doc)
        if found is not None:
            return found
        found = self.parser.scan(str(doc))
        if found is not None:
            self.logger.debug("date_from_document_scan")
            return found
        found = self.parser.from_url(url)
        if found is not None:
            self.logger.debug("date_from_url", url=url)
        return found
