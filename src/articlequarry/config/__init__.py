"""
Configuration models and loaders.
"""

from .config import (
    Config,
    DateConfig,
    DomainsConfig,
    EntityServiceConfig,
    ExtractionSettings,
    FormatterConfig,
    FormatterOverride,
    MonitoringConfig,
    VocabularyConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "Config",
    "DateConfig",
    "DomainsConfig",
    "EntityServiceConfig",
    "ExtractionSettings",
    "FormatterConfig",
    "FormatterOverride",
    "MonitoringConfig",
    "VocabularyConfig",
    "find_config_file",
    "load_config",
]
