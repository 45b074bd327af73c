"""
Lead image scoring for the chosen body node.
"""

from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import Tag

from articlequarry.dom import attr
from articlequarry.models import ImageCandidate


def is_ad_image(url: str) -> bool:
    return url.count("ad") >= 2


def _dimension(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        return None


def determine_image_source(node: Tag, base_url: str = "") -> Tuple[Optional[Tag], List[ImageCandidate]]:
    """Pick the lead ``<img>`` of ``node`` (or of its parent when it has none).

    Returns the winning element and every scored candidate, heaviest first.
    Each time a new maximum is found, later images count half as much.
    """
    images = node.find_all("img")
    if not images and isinstance(node.parent, Tag):
        images = node.parent.find_all("img")

    best: Optional[Tag] = None
    max_weight = 0
    factor = 1.0
    candidates: List[ImageCandidate] = []

    for image in images:
        src = attr(image, "src")
        if not src or is_ad_image(src):
            continue

        weight = 0
        height = _dimension(attr(image, "height"))
        if height is not None:
            weight += 20 if height >= 50 else -20
        width = _dimension(attr(image, "width"))
        if width is not None:
            weight += 20 if width >= 50 else -20

        alt = attr(image, "alt")
        if len(alt) > 35:
            weight += 20
        title = attr(image, "title")
        if len(title) > 35:
            weight += 20

        no_follow = "nofollow" in attr(image.parent, "rel")
        if no_follow:
            weight -= 40

        weight = int(weight * factor)
        if weight > max_weight:
            max_weight = weight
            best = image
            factor /= 2

        candidates.append(
            ImageCandidate(
                url=urljoin(base_url, src) if base_url else src,
                weight=weight,
                title=title,
                height=height or 0,
                width=width or 0,
                alt=alt,
                no_follow=no_follow,
            )
        )

    candidates.sort(key=lambda candidate: candidate.weight, reverse=True)
    return best, candidates
