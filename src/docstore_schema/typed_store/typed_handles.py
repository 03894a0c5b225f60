"""Client handles paired with the schema union declared for them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from docstore_schema.path_grammar.path_models import ParsedPath, PathKind
from docstore_schema.path_grammar.path_parser import PathError, parse_path
from docstore_schema.path_resolution.path_resolver import (
    resolve,
    resolve_collection,
    resolve_nodes,
)
from docstore_schema.path_resolution.schema_union import SchemaUnion
from docstore_schema.query_narrowing.filter_operators import Operator, Predicate
from docstore_schema.query_narrowing.schema_filter import narrow, predicate_from_value, project
from docstore_schema.schema_tree.tree_models import (
    GENERIC_SEGMENT_LABEL,
    CollectionNode,
    SchemaTree,
)

from .store_protocol import DocumentStoreClient, NodeKind

_LOGGER = logging.getLogger(__name__)


class UnresolvedPathError(PathError):
    """Raised when a handle is requested for a path the declaration does not cover."""


@dataclass(frozen=True)
class SchemaCastValue:
    """A value reinterpreted, without validation, as one of the schemas at `path`."""

    value: Any
    path: str
    schemas: SchemaUnion


@dataclass(frozen=True)
class TypedQuery:
    """Immutable query builder that narrows its schema union with every clause."""

    handle: Any
    schemas: SchemaUnion
    predicates: tuple[Predicate, ...] = ()
    selected_fields: tuple[str, ...] | None = None

    def where(self, field_path: Any, operator: Operator | str, value: Any = None) -> TypedQuery:
        predicate = predicate_from_value(field_path, operator, value)
        return replace(
            self,
            schemas=narrow(self.schemas, predicate),
            predicates=self.predicates + (predicate,),
        )

    def select(self, *field_names: str) -> TypedQuery:
        return replace(
            self,
            schemas=project(self.schemas, field_names),
            selected_fields=tuple(field_names),
        )


@dataclass(frozen=True)
class TypedCollection:
    """Collection handle from the client plus the schemas its documents can have."""

    client: DocumentStoreClient = field(repr=False)
    tree: SchemaTree = field(repr=False)
    handle: Any
    path: ParsedPath
    schemas: SchemaUnion

    def doc(self, name: str | None = None) -> TypedDocument:
        """Descend into one document.

        Without a name the client creates a document with a generated id, which
        the declaration must allow through a generic document key.
        """
        if name is None:
            return self._generated_document()
        segments = self.path.texts + (name,)
        parsed = parse_path(segments, allow_wildcards=False)
        require_declared(self.tree, parsed)
        schemas = resolve(self.tree, parsed)
        handle = self.client.get_child(self.handle, NodeKind.DOCUMENT, name)
        return TypedDocument(
            client=self.client, tree=self.tree, handle=handle, path=parsed, schemas=schemas
        )

    def query(self) -> TypedQuery:
        return TypedQuery(handle=self.handle, schemas=self.schemas)

    def where(self, field_path: Any, operator: Operator | str, value: Any = None) -> TypedQuery:
        return self.query().where(field_path, operator, value)

    def select(self, *field_names: str) -> TypedQuery:
        return self.query().select(*field_names)

    def _generated_document(self) -> TypedDocument:
        variants = []
        for resolved in resolve_nodes(self.tree, self.path):
            collection = resolved.node
            if isinstance(collection, CollectionNode) and collection.generic_document is not None:
                origin = "/".join(resolved.declared_path + (GENERIC_SEGMENT_LABEL,))
                variants.append((collection.generic_document.schema, origin))
        if not variants:
            raise UnresolvedPathError(
                f"Collection '{self.path.text}' declares no generic document "
                "for generated document ids."
            )
        handle = self.client.get_child(self.handle, NodeKind.DOCUMENT, None)
        return TypedDocument(
            client=self.client,
            tree=self.tree,
            handle=handle,
            path=parse_path(self.path.texts + (GENERIC_SEGMENT_LABEL,), allow_wildcards=False),
            schemas=SchemaUnion.from_variants(variants),
        )


@dataclass(frozen=True)
class TypedDocument:
    """Document handle from the client plus the schemas it can have."""

    client: DocumentStoreClient = field(repr=False)
    tree: SchemaTree = field(repr=False)
    handle: Any
    path: ParsedPath
    schemas: SchemaUnion

    def collection(self, name: str) -> TypedCollection:
        parsed = parse_path(self.path.texts + (name,), allow_wildcards=False)
        require_declared(self.tree, parsed)
        schemas = resolve_collection(self.tree, parsed)
        handle = self.client.get_child(self.handle, NodeKind.COLLECTION, name)
        return TypedCollection(
            client=self.client, tree=self.tree, handle=handle, path=parsed, schemas=schemas
        )


def open_handle(
    client: DocumentStoreClient, tree: SchemaTree, parsed: ParsedPath
) -> TypedCollection | TypedDocument:
    """Resolve a wildcard-free path, then descend the client once per segment."""
    require_declared(tree, parsed)
    if parsed.kind == PathKind.DOCUMENT:
        schemas = resolve(tree, parsed)
    else:
        schemas = resolve_collection(tree, parsed)

    handle: Any = None
    for index, segment in enumerate(parsed.segments):
        kind = NodeKind.COLLECTION if index % 2 == 0 else NodeKind.DOCUMENT
        handle = client.get_child(handle, kind, segment.text)
    _LOGGER.debug("Opened %s handle for '%s'", parsed.kind.value, parsed.text)

    if parsed.kind == PathKind.DOCUMENT:
        return TypedDocument(client=client, tree=tree, handle=handle, path=parsed, schemas=schemas)
    return TypedCollection(client=client, tree=tree, handle=handle, path=parsed, schemas=schemas)


def require_declared(tree: SchemaTree, parsed: ParsedPath) -> None:
    """Raise unless some declared node sits at `parsed`.

    A collection declared without documents still counts, even though its
    schema union is empty.
    """
    if not resolve_nodes(tree, parsed):
        raise UnresolvedPathError(f"Path '{parsed.text}' is not declared in the schema.")
