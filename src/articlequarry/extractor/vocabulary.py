"""
Compiled regex vocabularies for node classification.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Pattern

from articlequarry.config import defaults

if TYPE_CHECKING:
    from articlequarry.config import VocabularyConfig


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Vocabulary:
    """Read-only, shareable set of compiled classification patterns."""

    unlikely: Pattern[str]
    positive: Pattern[str]
    highly_positive: Pattern[str]
    negative: Pattern[str]
    highly_negative: Pattern[str]
    to_remove: Pattern[str]
    negative_style: Pattern[str]

    @classmethod
    def from_strings(
        cls,
        *,
        unlikely: str = defaults.UNLIKELY,
        positive: str = defaults.POSITIVE,
        highly_positive: str = defaults.HIGHLY_POSITIVE,
        negative: str = defaults.NEGATIVE,
        highly_negative: str = defaults.HIGHLY_NEGATIVE,
        to_remove: str = defaults.TO_REMOVE,
        negative_style: str = defaults.NEGATIVE_STYLE,
    ) -> Vocabulary:
        return cls(
            unlikely=_compile(unlikely),
            positive=_compile(positive),
            highly_positive=_compile(highly_positive),
            negative=_compile(negative),
            highly_negative=_compile(highly_negative),
            to_remove=_compile(to_remove),
            negative_style=_compile(negative_style),
        )

    @classmethod
    def from_config(cls, config: VocabularyConfig) -> Vocabulary:
        return cls.from_strings(**config.model_dump())


DEFAULT_VOCABULARY = Vocabulary.from_strings()
