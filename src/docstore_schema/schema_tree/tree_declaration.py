"""Schema tree construction from nested declarations."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from .field_types import FieldType, TypeExpressionError, type_from_declaration
from .tree_models import CollectionNode, DocumentNode, DocumentSchema, SchemaTree

DEFAULT_SCHEMA_KEY = "$schema"
DEFAULT_GENERIC_DOCUMENT_KEY = "*"


class SchemaDeclarationError(Exception):
    """Raised when a schema declaration does not describe a valid tree."""


def parse_schema_declaration(text: str) -> Mapping[str, Any]:
    """Parse YAML (or JSON) declaration text into a nested mapping."""
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaDeclarationError(f"Invalid schema declaration: {exc}") from exc
    if parsed is None:
        raise SchemaDeclarationError("Schema declaration is empty.")
    if not isinstance(parsed, Mapping):
        raise SchemaDeclarationError("Schema declaration root must be a mapping of collections.")
    return parsed


def load_schema_declaration(declaration_path: Path | str) -> Mapping[str, Any]:
    path = Path(declaration_path)
    if not path.exists():
        raise SchemaDeclarationError(f"Schema declaration file not found: {path}")
    return parse_schema_declaration(path.read_text(encoding="utf-8"))


def build_schema_tree(
    declaration: Mapping[str, Any],
    *,
    schema_key: str = DEFAULT_SCHEMA_KEY,
    generic_document_key: str = DEFAULT_GENERIC_DOCUMENT_KEY,
) -> SchemaTree:
    """Build the immutable schema tree described by `declaration`.

    Args:
      declaration: Mapping of top-level collection name to collection mapping.
      schema_key: Reserved document key holding the document's field schema.
      generic_document_key: Collection key standing for "any document name".

    Returns:
      The schema tree. Declarations that reference an ancestor mapping (YAML
      aliases or shared dicts) produce a cyclic node graph.

    Raises:
      SchemaDeclarationError: If any part of the declaration is malformed.
    """
    if not isinstance(declaration, Mapping):
        raise SchemaDeclarationError("Schema declaration root must be a mapping of collections.")
    builder = _TreeBuilder(schema_key=schema_key, generic_document_key=generic_document_key)
    collections: dict[str, CollectionNode] = {}
    for name, collection in declaration.items():
        _require_segment_name(name, "collection", ())
        collections[name] = builder.build_collection(collection, (name,))
    return SchemaTree.from_collections(collections)


class _TreeBuilder:
    """Builds nodes once per declaration mapping so shared mappings become shared nodes."""

    def __init__(self, *, schema_key: str, generic_document_key: str) -> None:
        self._schema_key = schema_key
        self._generic_document_key = generic_document_key
        self._collections: dict[int, tuple[Mapping[str, Any], CollectionNode]] = {}
        self._documents: dict[int, tuple[Mapping[str, Any], DocumentNode]] = {}

    def build_collection(self, declaration: Any, location: tuple[str, ...]) -> CollectionNode:
        if not isinstance(declaration, Mapping):
            raise SchemaDeclarationError(
                f"Collection '{_display(location)}' must be a mapping of documents."
            )
        cached = self._collections.get(id(declaration))
        if cached is not None:
            return cached[1]

        entries: dict[str, DocumentNode] = {}
        node = CollectionNode(
            entries=MappingProxyType(entries),
            generic_key=self._generic_document_key,
        )
        self._collections[id(declaration)] = (declaration, node)
        for name, document in declaration.items():
            _require_segment_name(name, "document", location)
            entries[name] = self.build_document(document, location + (name,))
        return node

    def build_document(self, declaration: Any, location: tuple[str, ...]) -> DocumentNode:
        if declaration is None:
            declaration = {}
        if not isinstance(declaration, Mapping):
            raise SchemaDeclarationError(
                f"Document '{_display(location)}' must be a mapping with a "
                f"'{self._schema_key}' entry and sub-collections."
            )
        cached = self._documents.get(id(declaration))
        if cached is not None:
            return cached[1]

        collections: dict[str, CollectionNode] = {}
        node = DocumentNode(
            schema=self._build_schema(declaration.get(self._schema_key), location),
            collections=MappingProxyType(collections),
        )
        self._documents[id(declaration)] = (declaration, node)
        for name, collection in declaration.items():
            if name == self._schema_key:
                continue
            _require_segment_name(name, "collection", location)
            collections[name] = self.build_collection(collection, location + (name,))
        return node

    def _build_schema(self, declaration: Any, location: tuple[str, ...]) -> DocumentSchema:
        if declaration is None:
            return DocumentSchema()
        if not isinstance(declaration, Mapping):
            raise SchemaDeclarationError(
                f"'{self._schema_key}' of document '{_display(location)}' must be a mapping."
            )
        fields: dict[str, FieldType] = {}
        for field_name, field_declaration in declaration.items():
            if not isinstance(field_name, str) or not field_name:
                raise SchemaDeclarationError(
                    f"Field names of document '{_display(location)}' must be non-empty strings."
                )
            try:
                fields[field_name] = type_from_declaration(field_declaration)
            except TypeExpressionError as exc:
                raise SchemaDeclarationError(
                    f"Field '{field_name}' of document '{_display(location)}': {exc}"
                ) from exc
        return DocumentSchema.from_mapping(fields)


def _require_segment_name(name: Any, label: str, location: tuple[str, ...]) -> None:
    where = f" under '{_display(location)}'" if location else ""
    if not isinstance(name, str) or not name:
        raise SchemaDeclarationError(f"Invalid {label} name {name!r}{where}.")
    if "/" in name:
        raise SchemaDeclarationError(f"The {label} name '{name}'{where} must not contain '/'.")


def _display(location: tuple[str, ...]) -> str:
    return "/".join(location)
