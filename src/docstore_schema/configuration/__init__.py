"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration, load_schema_tree
from .runtime_settings import (
    Configuration,
    DeclarationSettings,
    ResolutionSettings,
    SchemaSource,
)

__all__ = [
    "Configuration",
    "DeclarationSettings",
    "ResolutionSettings",
    "SchemaSource",
    "ConfigurationError",
    "load_configuration",
    "load_schema_tree",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
