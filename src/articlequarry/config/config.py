"""
Configuration management for articlequarry using Pydantic.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import defaults

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class VocabularyConfig(BaseModel):
    """Regex vocabularies used to classify nodes by class name, id and style."""

    unlikely: str = defaults.UNLIKELY
    positive: str = defaults.POSITIVE
    highly_positive: str = defaults.HIGHLY_POSITIVE
    negative: str = defaults.NEGATIVE
    highly_negative: str = defaults.HIGHLY_NEGATIVE
    to_remove: str = defaults.TO_REMOVE
    negative_style: str = defaults.NEGATIVE_STYLE

    @field_validator("*")
    @classmethod
    def validate_regex(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return v


class ExtractionSettings(BaseModel):
    """Configuration for the content extraction engine."""

    parser: str = Field(default="lxml", description="BeautifulSoup tree builder for the first parse.")
    fallback_parser: str = Field(
        default="html.parser", description="Tree builder used when the first parse leaves markup in the text."
    )
    max_link_length: int = Field(default=512, ge=1, description="Longest absolute link URL kept.")
    max_author_description_length: int = Field(default=1000, ge=1)
    max_image_url_length: int = Field(default=255, ge=1)
    max_content_size: int = Field(default=0, ge=0, description="Truncate article text to this size; 0 disables.")
    child_decay: float = Field(default=0.9, gt=0.0, le=1.0)
    descendant_decay: float = Field(default=0.45, gt=0.0, le=1.0)
    extract_images: bool = True
    allow_external_canonical: bool = False
    honor_extra_gravity: bool = Field(
        default=True, description="Add the value of an 'extragravityscore' attribute to a candidate's weight."
    )


class FormatterConfig(BaseModel):
    """Paragraph thresholds used when rendering the chosen node."""

    min_first_paragraph_length: int = Field(default=defaults.MIN_FIRST_PARAGRAPH_LENGTH, ge=0)
    min_paragraph_length: int = Field(default=defaults.MIN_PARAGRAPH_LENGTH, ge=0)
    keep_selector: str = defaults.KEEP_SELECTOR


class DateConfig(BaseModel):
    """Publication date parsing."""

    default_timezone: str = Field(default="UTC", description="IANA zone applied to dates without an offset.")
    min_year: int = 1970
    max_year: int = 2100

    @model_validator(mode="after")
    def validate_range(self) -> "DateConfig":
        if self.min_year >= self.max_year:
            raise ValueError("min_year must be lower than max_year")
        return self


class EntityServiceConfig(BaseModel):
    """Named-entity recognition service used to disambiguate author names."""

    enabled: bool = False
    base_url: str = ""
    entity_path: str = "entities"
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = Field(default=5.0, gt=0.0, description="HTTP timeout in seconds.")
    exclusions: Dict[str, str] = Field(
        default_factory=dict, description="Entity names to ignore, mapped to the entity type they are ignored for."
    )

    @model_validator(mode="after")
    def require_base_url(self) -> "EntityServiceConfig":
        if self.enabled and not self.base_url:
            raise ValueError("ner.base_url is required when ner.enabled is true")
        return self


class FormatterOverride(BaseModel):
    min_first_paragraph_length: int = defaults.MIN_FIRST_PARAGRAPH_LENGTH
    min_paragraph_length: int = defaults.MIN_PARAGRAPH_LENGTH
    keep_selector: str = defaults.KEEP_SELECTOR


class DomainsConfig(BaseModel):
    """Per-domain tables merged over the built-in rules."""

    remove: Dict[str, List[str]] = Field(default_factory=dict)
    best_element: Dict[str, List[str]] = Field(default_factory=dict)
    formatter: Dict[str, FormatterOverride] = Field(default_factory=dict)
    author: Dict[str, str] = Field(default_factory=dict)
    keep_noscript: List[str] = Field(default_factory=list)


class MonitoringConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON lines.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        if v.upper() not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"unknown log level: {v}")
        return v.upper()


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "articlequarry"
    version: str = "0.1.0"
    vocabulary: VocabularyConfig = Field(default_factory=VocabularyConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    formatter: FormatterConfig = Field(default_factory=FormatterConfig)
    dates: DateConfig = Field(default_factory=DateConfig)
    ner: EntityServiceConfig = Field(default_factory=EntityServiceConfig)
    domains: DomainsConfig = Field(default_factory=DomainsConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="ARTICLEQUARRY_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "articlequarry.yaml",
        current_dir / "articlequarry.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load ``path``, else a config file found in the working directory, else defaults."""
    config_path = path or find_config_file()
    if config_path is None:
        log.info("No config file found. Using default settings.")
        return Config()
    log.info("Loading configuration from: %s", config_path)
    return Config.from_yaml(config_path)
