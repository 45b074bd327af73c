"""
Tests for configuration loading and validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from articlequarry.config import (
    Config,
    DateConfig,
    EntityServiceConfig,
    MonitoringConfig,
    VocabularyConfig,
    load_config,
)
from articlequarry.config import defaults


class TestDefaults:
    def test_default_values(self):
        config = Config()
        assert config.extraction.parser == "lxml"
        assert config.extraction.fallback_parser == "html.parser"
        assert config.extraction.max_content_size == 0
        assert config.extraction.honor_extra_gravity is True
        assert config.formatter.min_paragraph_length == defaults.MIN_PARAGRAPH_LENGTH
        assert config.dates.default_timezone == "UTC"
        assert config.ner.enabled is False
        assert config.vocabulary.positive == defaults.POSITIVE

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ARTICLEQUARRY_EXTRACTION__MAX_LINK_LENGTH", "64")
        monkeypatch.setenv("ARTICLEQUARRY_MONITORING__LOG_LEVEL", "debug")
        config = Config()
        assert config.extraction.max_link_length == 64
        assert config.monitoring.log_level == "DEBUG"


class TestYamlLoading:
    def test_from_yaml(self, tmp_path):
        path = tmp_path / "articlequarry.yaml"
        path.write_text(
            "extraction:\n"
            "  max_content_size: 5000\n"
            "dates:\n"
            "  default_timezone: Europe/London\n"
            "domains:\n"
            "  remove:\n"
            "    example.com: ['div.promo', 'aside']\n"
            "  formatter:\n"
            "    example.com:\n"
            "      min_paragraph_length: 10\n"
            "ner:\n"
            "  enabled: true\n"
            "  base_url: http://ner.local\n"
            "  exclusions:\n"
            "    Reuters: ORGANIZATION\n",
            encoding="utf-8",
        )
        config = Config.from_yaml(path)
        assert config.extraction.max_content_size == 5000
        assert config.dates.default_timezone == "Europe/London"
        assert config.domains.remove == {"example.com": ["div.promo", "aside"]}
        assert config.domains.formatter["example.com"].min_paragraph_length == 10
        assert config.domains.formatter["example.com"].keep_selector == defaults.KEEP_SELECTOR
        assert config.ner.exclusions == {"Reuters": "ORGANIZATION"}

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.from_yaml(path).extraction.parser == "lxml"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_load_config_finds_file_in_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "articlequarry.yml").write_text("extraction:\n  max_link_length: 99\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert load_config().extraction.max_link_length == 99

    def test_load_config_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config().extraction.max_link_length == 512


class TestValidation:
    def test_invalid_regex(self):
        with pytest.raises(ValidationError):
            VocabularyConfig(positive="(unclosed")

    def test_year_range(self):
        with pytest.raises(ValidationError):
            DateConfig(min_year=2000, max_year=1990)

    def test_entity_service_needs_url(self):
        with pytest.raises(ValidationError):
            EntityServiceConfig(enabled=True)
        assert EntityServiceConfig(enabled=False).base_url == ""

    def test_log_level(self):
        assert MonitoringConfig(log_level="warning").log_level == "WARNING"
        with pytest.raises(ValidationError):
            MonitoringConfig(log_level="verbose")

    def test_log_file_directory_created(self, tmp_path):
        log_file = tmp_path / "logs" / "extract.log"
        assert MonitoringConfig(log_file=log_file).log_file == str(log_file)
        assert log_file.parent.is_dir()

    def test_negative_limits_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("extraction:\n  max_content_size: -1\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            Config.from_yaml(path)
