"""
Tests for the command-line interface.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from articlequarry import __version__
from articlequarry.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def html_file(tmp_path, news_page_html):
    path = tmp_path / "page.html"
    path.write_text(news_page_html, encoding="utf-8")
    return path


URL = "https://news.example.com/2016/05/01/council-budget.html"


class TestExtractCommand:
    def test_json_output(self, runner, html_file):
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", str(html_file), "--url", URL])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["title"] == "Council approves new budget"
        assert payload["author_name"] == "Jane Doe"
        assert payload["date"] == "2016-05-01T10:00:00+00:00"
        assert payload["links"][0]["url"] == "https://news.example.com/city/finance"

    def test_text_output(self, runner, html_file):
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", str(html_file), "--format", "text"])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("The Springfield city council voted six to one")

    def test_table_output(self, runner, html_file):
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", str(html_file), "--format", "table"])
        assert result.exit_code == 0, result.output
        assert "Extraction Result" in result.stdout
        assert "site_name" in result.stdout

    def test_output_file(self, runner, html_file, tmp_path):
        target = tmp_path / "result.json"
        result = runner.invoke(
            cli, ["--log-level", "ERROR", "extract", str(html_file), "--format", "text", "-o", str(target)]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(target.read_text(encoding="utf-8"))["site_name"] == "Springfield Gazette"

    def test_empty_file_fails(self, runner, tmp_path):
        empty = tmp_path / "empty.html"
        empty.write_text("", encoding="utf-8")
        result = runner.invoke(cli, ["--log-level", "ERROR", "extract", str(empty)])
        assert result.exit_code == 1
        assert "Extraction failed" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["extract", str(tmp_path / "nope.html")])
        assert result.exit_code == 2

    def test_config_applies_to_extraction(self, runner, html_file, tmp_path):
        config = tmp_path / "articlequarry.yaml"
        config.write_text("extraction:\n  max_content_size: 20\n", encoding="utf-8")
        result = runner.invoke(
            cli, ["--config", str(config), "--log-level", "ERROR", "extract", str(html_file), "--format", "text"]
        )
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "The Springfield city"


class TestValidateConfig:
    def test_defaults_are_valid(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["--log-level", "ERROR", "validate-config"])
        assert result.exit_code == 0, result.output
        assert "Configuration Status" in result.output
        assert "Configuration is valid" in result.output

    def test_invalid_config(self, runner, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("dates:\n  min_year: 2000\n  max_year: 1990\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "validate-config"])
        assert result.exit_code == 1
        assert "Configuration could not be loaded" in result.output

    def test_unknown_timezone(self, runner, tmp_path):
        config = tmp_path / "tz.yaml"
        config.write_text("dates:\n  default_timezone: Nowhere/Special\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "--log-level", "ERROR", "validate-config"])
        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
