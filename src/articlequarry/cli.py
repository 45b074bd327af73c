"""Command-line interface for articlequarry."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import structlog
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from articlequarry import __version__
from articlequarry.config import Config, load_config
from articlequarry.errors import ArticleQuarryError
from articlequarry.extractor.engine import ArticleExtractor
from articlequarry.observability import configure_logging

console = Console()
logger = structlog.get_logger(__name__)


def _load(ctx: click.Context) -> Config:
    try:
        config = load_config(ctx.obj["config_path"])
    except (ValidationError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration could not be loaded: {e}[/red]")
        sys.exit(1)
    config.monitoring.log_level = ctx.obj["log_level"]
    configure_logging(config.monitoring)
    return config


def _result_rows(payload: Dict[str, Any]) -> List[tuple[str, str]]:
    rows = []
    for key, value in payload.items():
        if key in ("text", "links", "images"):
            continue
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        rows.append((key, "" if value is None else str(value)))
    rows.append(("links", str(len(payload["links"]))))
    rows.append(("images", str(len(payload["images"]))))
    return rows


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: str) -> None:
    """articlequarry - main-content and metadata extraction for web pages."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--url", default="", help="URL the page was fetched from")
@click.option(
    "--format",
    "output_format",
    default="json",
    type=click.Choice(["json", "table", "text"]),
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(), help="Write the JSON result to this file")
@click.pass_context
def extract(ctx: click.Context, html_file: str, url: str, output_format: str, output: Optional[str]) -> None:
    """Extract article text and metadata from a saved HTML page."""
    config = _load(ctx)
    html = Path(html_file).read_text(encoding="utf-8", errors="replace")

    async def run_extraction() -> Dict[str, Any]:
        extractor = ArticleExtractor.from_config(config)
        try:
            result = await extractor.extract_async(html, url)
        finally:
            extractor.close()
        return result.to_dict()

    try:
        payload = asyncio.run(run_extraction())
    except ArticleQuarryError as e:
        console.print(f"[red]Extraction failed: {e}[/red]")
        sys.exit(1)

    formatted_result = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(formatted_result, encoding="utf-8")
        logger.info("result_written", path=output)

    if output_format == "table":
        table = Table(title="Extraction Result")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="magenta")
        for key, value in _result_rows(payload):
            table.add_row(key, value)
        console.print(table)
        if payload["text"]:
            console.print(Panel(payload["text"], title="Text"))
    elif output_format == "text":
        click.echo(payload["text"])
    else:
        click.echo(formatted_result)


@cli.command()
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the configuration and build every extraction table from it."""
    config = _load(ctx)
    try:
        extractor = ArticleExtractor.from_config(config)
    except (ValueError, ArticleQuarryError) as e:
        console.print(f"[red]Configuration validation failed: {e}[/red]")
        sys.exit(1)

    table = Table(title="Configuration Status")
    table.add_column("Section", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("parser", f"{config.extraction.parser} (fallback {config.extraction.fallback_parser})")
    table.add_row("default timezone", config.dates.default_timezone)
    table.add_row("entity service", config.ner.base_url if config.ner.enabled else "disabled")
    table.add_row("removal rules", str(len(extractor.rules.removal)))
    table.add_row("best element rules", str(len(extractor.rules.best_element)))
    table.add_row("formatter overrides", str(len(extractor.rules.formatters)))
    console.print(table)
    extractor.close()
    console.print("[green]Configuration is valid[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
