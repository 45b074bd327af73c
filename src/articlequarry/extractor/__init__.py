"""
Content scoring and extraction: pruning, weighting, candidate selection and
output formatting. :class:`~articlequarry.extractor.engine.ArticleExtractor`
ties them together.
"""

from .formatter import OutputFormatter
from .rules import BUILTIN_RULES, DomainKeys, DomainRuleSet, FormatterSettings
from .selector import CandidateSelector, RankedCandidate, collect_candidates, rank_candidates
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .weighting import Weight, WeightingEngine

__all__ = [
    "BUILTIN_RULES",
    "CandidateSelector",
    "collect_candidates",
    "DEFAULT_VOCABULARY",
    "DomainKeys",
    "DomainRuleSet",
    "FormatterSettings",
    "OutputFormatter",
    "rank_candidates",
    "RankedCandidate",
    "Vocabulary",
    "Weight",
    "WeightingEngine",
]
