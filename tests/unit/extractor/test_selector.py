"""
Unit tests for candidate collection, ranking and best-node selection.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from articlequarry.dom import ScratchTable
from articlequarry.extractor.rules import DomainKeys, DomainRuleSet
from articlequarry.extractor.selector import CandidateSelector, RankedCandidate, collect_candidates, rank_candidates
from articlequarry.extractor.weighting import WeightingEngine


class TestCollectCandidates:
    def test_document_order_and_bootstrap_scores(self, parse, scratch):
        doc = parse("<html><body><div><p>a</p><span>b</span><section><h2>c</h2></section></div></body></html>")
        candidates = collect_candidates(doc, scratch)
        assert [node.name for node in candidates] == ["div", "p", "section", "h2"]
        assert [scratch.score(node) for node in candidates] == [100, 50, 25, 12]

    def test_no_body(self, fragment, scratch):
        assert collect_candidates(fragment("<p>no body here</p>"), scratch) == []


class TestRankCandidates:
    def test_equal_weights_keep_document_order(self, parse, engine, scratch):
        doc = parse("<html><body><p>aaaa</p><p>bbbb</p><p>cccc</p></body></html>")
        ranked = rank_candidates(collect_candidates(doc, scratch), engine)
        assert [candidate.weight for candidate in ranked] == [0, 0, 0]
        assert [candidate.position for candidate in ranked] == [0, 1, 2]

    def test_weight_descending(self, parse, engine, scratch):
        doc = parse('<html><body><div class="widget">x</div><div class="content">y</div></body></html>')
        ranked = rank_candidates(collect_candidates(doc, scratch), engine)
        assert [candidate.node["class"] for candidate in ranked] == [["content"], ["widget"]]

    def test_highly_positive_counted_once_per_pass(self, parse, engine, scratch):
        doc = parse('<html><body><div class="articlebody">x</div><div class="articlebody">y</div></body></html>')
        ranked = rank_candidates(collect_candidates(doc, scratch), engine)
        assert [(candidate.position, candidate.weight) for candidate in ranked] == [(0, 235), (1, 35)]

    def test_sort_key(self, fragment):
        node = fragment("<p>x</p>").p
        assert RankedCandidate(weight=7, position=3, node=node).sort_key == (-7, 3)


class TestCandidateSelector:
    def test_first_accepted_candidate_wins(self, parse):
        doc = parse('<html><body><div class="content">first</div><div>second</div></body></html>')
        selector = CandidateSelector(WeightingEngine(scratch=ScratchTable()))
        rejected = []

        def accept(node):
            if node.get_text() == "first":
                rejected.append(node)
                return False
            return True

        best = selector.select(doc, DomainKeys(), accept)
        assert rejected and best is not None
        assert best.get_text() == "second"

    def test_none_when_nothing_accepted(self, parse):
        doc = parse("<html><body><div>a</div><p>b</p></body></html>")
        selector = CandidateSelector(WeightingEngine(scratch=ScratchTable()))
        accept = MagicMock(return_value=False)
        assert selector.select(doc, DomainKeys(), accept) is None
        assert accept.call_count == 2

    def test_best_element_override_skips_scoring(self, parse):
        doc = parse('<html><body><div class="content">scored</div><div class="story">forced</div></body></html>')
        rules = DomainRuleSet(best_element={"example.com": ["div.missing", "div.story"]})
        engine = MagicMock(spec=WeightingEngine)
        selector = CandidateSelector(engine, rules)
        accept = MagicMock(return_value=False)

        best = selector.select(doc, DomainKeys.from_url("https://example.com/a"), accept)

        assert best is not None and best.get_text() == "forced"
        accept.assert_called_once_with(best)
        engine.weight.assert_not_called()

    def test_override_ignored_for_other_domains(self, parse):
        doc = parse('<html><body><div class="story">forced</div></body></html>')
        rules = DomainRuleSet(best_element={"example.com": ["div.story"]})
        selector = CandidateSelector(WeightingEngine(scratch=ScratchTable()), rules)
        assert selector.best_element_override(doc, DomainKeys.from_url("https://other.org/a")) is None
