"""
Canonical URL resolution.

The declared canonical is resolved against the request URL and then rejected
(falling back to the request URL) when it points at a site root, matches a
known-bad landing-page pattern, or leaves the request's registrable domain.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

import structlog

from articlequarry.extractor.rules import DomainKeys

from .cascade import Document, run_or_empty, string_cascade, url_step

logger = structlog.get_logger(__name__)

BAD_CANONICAL_PATTERNS = (
    re.compile(r"https?://abcnews\.go\.com/[^/]*/?"),
    re.compile(r"https?://[^/]*/news/?"),
    re.compile(r"https?://[^/]*/wires/?"),
    re.compile(r".*/page-not-found\.shtml"),
    re.compile(r"https?://www\.cnbc\.com/press-releases/"),
)

DECLARED_CANONICAL = string_cascade(
    "canonical",
    url_step("head link[rel=canonical]"),
    url_step("head meta[property='og:url']", "content"),
    url_step("head meta[name='twitter:url']", "content"),
)


def _points_at_root(url: str) -> bool:
    parts = urlsplit(url)
    return parts.path in ("", "/") and not parts.query


def _is_known_bad(url: str) -> bool:
    return any(pattern.fullmatch(url) for pattern in BAD_CANONICAL_PATTERNS)


def _crosses_domain(url: str, base_url: str) -> bool:
    if not base_url:
        return False
    base_domain = DomainKeys.from_url(base_url).top_private
    url_domain = DomainKeys.from_url(url).top_private
    return base_domain is not None and url_domain is not None and base_domain != url_domain


def resolve_canonical(declared: str, base_url: str, allow_external: bool = False) -> str:
    if not declared:
        return base_url
    try:
        url = urljoin(base_url, declared) if base_url else declared
        if _points_at_root(url) or _is_known_bad(url):
            return base_url
        if not allow_external and _crosses_domain(url, base_url):
            return base_url
    except ValueError as exc:
        logger.debug("bad_canonical_url", url=declared, error=str(exc))
        return base_url
    return url


def extract_canonical_url(doc: Document, base_url: Optional[str], allow_external: bool = False) -> str:
    return resolve_canonical(run_or_empty(DECLARED_CANONICAL, doc), base_url or "", allow_external)
