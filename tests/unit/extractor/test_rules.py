"""
Unit tests for domain keys and the per-domain override tables.
"""

from __future__ import annotations

import pytest

from articlequarry.config import DomainsConfig, FormatterOverride
from articlequarry.extractor.rules import BUILTIN_RULES, DomainKeys, DomainRuleSet, FormatterSettings


class TestDomainKeys:
    def test_registrable_domain(self):
        keys = DomainKeys.from_url("https://www.bbc.co.uk/news/world-123")
        assert keys.host == "www.bbc.co.uk"
        assert keys.top_private == "bbc.co.uk"
        assert keys.without_tld == "bbc"
        assert keys.chain() == ("www.bbc.co.uk", "bbc.co.uk", "bbc")

    def test_bare_domain_is_not_duplicated(self):
        keys = DomainKeys.from_url("https://example.com/story")
        assert keys.chain() == ("example.com", "example")
        assert keys.chain(include_without_tld=False) == ("example.com",)

    def test_host_is_lowercased(self):
        assert DomainKeys.from_url("https://News.Example.COM/a").host == "news.example.com"

    @pytest.mark.parametrize("url", ["", None, "not a url", "http://127.0.0.1/page", "http://[::1]/page"])
    def test_no_keys(self, url):
        assert DomainKeys.from_url(url).chain() == ()


class TestLookups:
    def test_exact_host_wins_over_registrable_domain(self):
        rules = DomainRuleSet(
            removal={"www.example.com": ["div.exact"], "example.com": ["div.registrable"], "example": ["div.bare"]}
        )
        keys = DomainKeys.from_url("https://www.example.com/a")
        assert rules.removal_selectors(keys) == ("div.exact",)

    def test_same_key_for_host_and_registrable_domain_applies_once(self):
        rules = DomainRuleSet(removal={"example.com": ["div.one", "div.two"]})
        assert rules.removal_selectors(DomainKeys.from_url("https://example.com/a")) == ("div.one", "div.two")

    def test_domain_without_suffix(self):
        rules = DomainRuleSet(removal={"inforisktoday": ["p.see-also"]})
        assert rules.removal_selectors(DomainKeys.from_url("https://www.inforisktoday.asia/x")) == ("p.see-also",)

    def test_best_element_ignores_domain_without_suffix(self):
        rules = DomainRuleSet(best_element={"example": ["article"]})
        assert rules.best_element_selectors(DomainKeys.from_url("https://example.com/a")) == ()

    def test_formatter_lookup(self):
        settings = FormatterSettings(min_paragraph_length=10)
        rules = DomainRuleSet(formatters={"example.com": settings})
        assert rules.formatter_for(DomainKeys.from_url("https://news.example.com/a")) is settings
        assert rules.formatter_for(DomainKeys.from_url("https://other.org/a")) is None

    def test_builtin_noscript_hosts(self):
        assert BUILTIN_RULES.keeps_noscript(DomainKeys.from_url("https://www.teenvogue.com/story/x"))
        assert not BUILTIN_RULES.keeps_noscript(DomainKeys.from_url("https://example.com/"))

    def test_builtin_reuters_rules(self):
        selectors = BUILTIN_RULES.removal_selectors(DomainKeys.from_url("https://www.reuters.com/article/x"))
        assert ".section.main-content" in selectors


class TestImmutability:
    def test_tables_cannot_be_mutated(self):
        with pytest.raises(TypeError):
            BUILTIN_RULES.removal["example.com"] = ("div",)  # type: ignore[index]

    def test_rule_set_is_frozen(self):
        with pytest.raises(AttributeError):
            BUILTIN_RULES.removal = {}  # type: ignore[misc]

    def test_source_mapping_is_copied(self):
        source = {"example.com": ["div.a"]}
        rules = DomainRuleSet(removal=source)
        source["example.com"].append("div.b")
        assert rules.removal["example.com"] == ("div.a",)


class TestMerging:
    def test_merged_returns_new_rule_set(self):
        merged = BUILTIN_RULES.merged(removal={"example.com": ["div.ad"]}, keep_noscript=["example.com"])
        assert merged is not BUILTIN_RULES
        assert merged.removal["example.com"] == ("div.ad",)
        assert "example.com" not in BUILTIN_RULES.removal
        assert "www.reuters.com" in merged.removal
        assert "example.com" in merged.keep_noscript

    def test_from_config(self):
        config = DomainsConfig(
            remove={"example.com": ["div.promo"]},
            best_element={"example.com": ["article.story"]},
            formatter={"example.com": FormatterOverride(min_paragraph_length=12)},
            author={"example.com": ".writer"},
        )
        rules = DomainRuleSet.from_config(config)
        keys = DomainKeys.from_url("https://example.com/a")
        assert rules.removal_selectors(keys) == ("div.promo",)
        assert rules.best_element_selectors(keys) == ("article.story",)
        assert rules.formatter_for(keys) == FormatterSettings(min_paragraph_length=12)
        assert rules.author_selector(keys) == ".writer"
        assert rules.best_element["nytimes.com"] == (".theme-main",)

    def test_config_overrides_builtin_key(self):
        config = DomainsConfig(best_element={"nytimes.com": ["article#story"]})
        rules = DomainRuleSet.from_config(config)
        assert rules.best_element["nytimes.com"] == ("article#story",)
