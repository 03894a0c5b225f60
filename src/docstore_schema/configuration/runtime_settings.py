"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from docstore_schema.path_resolution.collection_group_matcher import DEFAULT_MAX_TRAVERSAL_DEPTH
from docstore_schema.schema_tree.tree_declaration import (
    DEFAULT_GENERIC_DOCUMENT_KEY,
    DEFAULT_SCHEMA_KEY,
)


@dataclass(frozen=True)
class SchemaSource:
    """Normalized schema declaration source."""

    text: str
    source_path: Path | None


@dataclass(frozen=True)
class DeclarationSettings:
    """Reserved keys used by the schema declaration."""

    schema_key: str = DEFAULT_SCHEMA_KEY
    generic_document_key: str = DEFAULT_GENERIC_DOCUMENT_KEY


@dataclass(frozen=True)
class ResolutionSettings:
    """Bounds applied while searching the schema tree."""

    max_traversal_depth: int = DEFAULT_MAX_TRAVERSAL_DEPTH


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    schema: SchemaSource
    declaration: DeclarationSettings
    resolution: ResolutionSettings
