"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from docstore_schema.path_grammar.path_models import PATH_SEPARATOR
from docstore_schema.path_resolution.collection_group_matcher import DEFAULT_MAX_TRAVERSAL_DEPTH
from docstore_schema.schema_tree.tree_declaration import (
    DEFAULT_GENERIC_DOCUMENT_KEY,
    DEFAULT_SCHEMA_KEY,
    SchemaDeclarationError,
    build_schema_tree,
    parse_schema_declaration,
)
from docstore_schema.schema_tree.tree_models import SchemaTree

from .runtime_settings import (
    Configuration,
    DeclarationSettings,
    ResolutionSettings,
    SchemaSource,
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file, including its schema declaration."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    configuration = Configuration(
        path=path,
        schema=_parse_schema_section(parsed.get("schema"), path.parent),
        declaration=_parse_declaration_section(parsed.get("declaration")),
        resolution=_parse_resolution_section(parsed.get("resolution")),
    )
    load_schema_tree(configuration)
    return configuration


def load_schema_tree(configuration: Configuration) -> SchemaTree:
    """Build the schema tree declared by a loaded configuration."""
    try:
        declaration = parse_schema_declaration(configuration.schema.text)
        return build_schema_tree(
            declaration,
            schema_key=configuration.declaration.schema_key,
            generic_document_key=configuration.declaration.generic_document_key,
        )
    except SchemaDeclarationError as exc:
        raise ConfigurationError(str(exc)) from exc


def _parse_schema_section(value: Any, base_path: Path) -> SchemaSource:
    if isinstance(value, str):
        text, source_path = value, None
    else:
        section = _require_mapping(value, "schema")
        text, source_path = _load_schema_definition(section, base_path)
    if not text.strip():
        raise ConfigurationError("Schema declaration text cannot be empty.")
    return SchemaSource(text=text, source_path=source_path)


def _load_schema_definition(
    section: Mapping[str, Any], base_path: Path
) -> tuple[str, Path | None]:
    inline = section.get("inline")
    path_value = section.get("path")
    if inline and path_value:
        raise ConfigurationError("Schema definition must not set both inline and path.")
    if inline:
        if not isinstance(inline, str):
            raise ConfigurationError("schema.inline must be a string.")
        return inline, None
    if path_value:
        if not isinstance(path_value, str):
            raise ConfigurationError("schema.path must be a string.")
        schema_path = _resolve_path(base_path, path_value)
        if not schema_path.exists():
            raise ConfigurationError(f"Schema file not found: {schema_path}")
        return schema_path.read_text(encoding="utf-8"), schema_path
    raise ConfigurationError("Schema definition requires either inline or path.")


def _parse_declaration_section(value: Any) -> DeclarationSettings:
    section = _optional_mapping(value, "declaration")
    schema_key = _require_reserved_key(
        section.get("schema_key", DEFAULT_SCHEMA_KEY), "declaration.schema_key"
    )
    generic_document_key = _require_reserved_key(
        section.get("generic_document_key", DEFAULT_GENERIC_DOCUMENT_KEY),
        "declaration.generic_document_key",
    )
    if schema_key == generic_document_key:
        raise ConfigurationError(
            "declaration.schema_key and declaration.generic_document_key must differ."
        )
    return DeclarationSettings(schema_key=schema_key, generic_document_key=generic_document_key)


def _parse_resolution_section(value: Any) -> ResolutionSettings:
    section = _optional_mapping(value, "resolution")
    max_traversal_depth = _require_positive_int(
        section.get("max_traversal_depth", DEFAULT_MAX_TRAVERSAL_DEPTH),
        "resolution.max_traversal_depth",
    )
    return ResolutionSettings(max_traversal_depth=max_traversal_depth)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_reserved_key(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    if PATH_SEPARATOR in stripped:
        raise ConfigurationError(f"{field_name} must not contain '{PATH_SEPARATOR}'.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
