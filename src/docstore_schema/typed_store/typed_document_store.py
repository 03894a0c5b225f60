"""Schema-aware entry point wrapping a document-store client."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from docstore_schema.path_grammar.path_models import ParsedPath, PathKind
from docstore_schema.path_grammar.path_parser import (
    PathInput,
    parse_path,
    require_path_kind,
    validate_collection_id,
)
from docstore_schema.path_resolution.collection_group_matcher import (
    DEFAULT_MAX_TRAVERSAL_DEPTH,
    match_collection_group,
)
from docstore_schema.path_resolution.path_resolver import (
    resolve,
    resolve_collection,
    resolve_nodes,
    schema_at_path,
)
from docstore_schema.path_resolution.schema_union import SchemaUnion
from docstore_schema.query_narrowing.filter_operators import Predicate
from docstore_schema.query_narrowing.schema_filter import narrow
from docstore_schema.schema_tree.tree_declaration import build_schema_tree
from docstore_schema.schema_tree.tree_models import CollectionNode, DocumentNode, SchemaTree

from .store_protocol import DocumentStoreClient, NodeKind
from .typed_handles import (
    SchemaCastValue,
    TypedCollection,
    TypedDocument,
    TypedQuery,
    UnresolvedPathError,
    open_handle,
)

_LOGGER = logging.getLogger(__name__)


class TypedDocumentStore:
    """Pairs a document-store client with the schema tree declared for its data.

    Resolution methods are pure lookups in the tree. Handle builders resolve
    first and only then call the client, so undeclared paths never reach it.
    """

    def __init__(
        self,
        client: DocumentStoreClient,
        tree: SchemaTree,
        *,
        max_traversal_depth: int = DEFAULT_MAX_TRAVERSAL_DEPTH,
    ) -> None:
        self._client = client
        self._tree = tree
        self._max_traversal_depth = max_traversal_depth

    @property
    def client(self) -> DocumentStoreClient:
        return self._client

    @property
    def tree(self) -> SchemaTree:
        return self._tree

    def resolve_document_path(self, path: PathInput) -> SchemaUnion:
        return resolve(self._tree, path)

    def resolve_collection_path(self, path: PathInput) -> SchemaUnion:
        return resolve_collection(self._tree, path)

    def match_collection_group(self, name: str) -> SchemaUnion:
        return match_collection_group(self._tree, name, max_depth=self._max_traversal_depth)

    def narrow(self, union: SchemaUnion, predicate: Predicate) -> SchemaUnion:
        return narrow(union, predicate)

    def cast_to_schema(self, value: Any, path: PathInput) -> SchemaCastValue:
        """Pair `value` with the schemas declared at `path` without checking it."""
        parsed = parse_path(path)
        schemas = schema_at_path(self._tree, parsed)
        return SchemaCastValue(value=value, path=parsed.text, schemas=schemas)

    def collection(self, *segments: str) -> TypedCollection:
        parsed = require_path_kind(_parse_segments(segments), PathKind.COLLECTION)
        handle = open_handle(self._client, self._tree, parsed)
        assert isinstance(handle, TypedCollection)
        return handle

    def doc(self, *segments: str) -> TypedDocument:
        parsed = require_path_kind(_parse_segments(segments), PathKind.DOCUMENT)
        handle = open_handle(self._client, self._tree, parsed)
        assert isinstance(handle, TypedDocument)
        return handle

    def collection_group(self, name: str) -> TypedQuery:
        validate_collection_id(name)
        schemas = self.match_collection_group(name)
        handle = self._client.get_child(None, NodeKind.COLLECTION_GROUP, name)
        return TypedQuery(handle=handle, schemas=schemas)

    def undeclared_children(self, path: str = "") -> tuple[str, ...]:
        """List live children of `path` that the declaration does not cover.

        An empty path inspects the root collections. For a collection path the
        children are document names, which are all covered once the collection
        declares a generic document.
        """
        if not path:
            declared: set[str] = set(self._tree.collections)
            live = self._client.list_children(None)
            return _sorted_undeclared(live, declared, covers_all=False)

        parsed = parse_path(path, allow_wildcards=False)
        nodes = resolve_nodes(self._tree, parsed)
        if not nodes:
            raise UnresolvedPathError(f"Path '{parsed.text}' is not declared in the schema.")

        declared = set()
        covers_all = False
        for resolved in nodes:
            node = resolved.node
            if isinstance(node, DocumentNode):
                declared.update(node.collections)
            elif isinstance(node, CollectionNode):
                declared.update(node.documents)
                covers_all = covers_all or node.generic_document is not None

        handle: Any = None
        for index, segment in enumerate(parsed.segments):
            kind = NodeKind.COLLECTION if index % 2 == 0 else NodeKind.DOCUMENT
            handle = self._client.get_child(handle, kind, segment.text)
        return _sorted_undeclared(self._client.list_children(handle), declared, covers_all)


def with_schema(
    client: DocumentStoreClient,
    schema: SchemaTree | Mapping[str, Any],
    **options: Any,
) -> TypedDocumentStore:
    """Build a TypedDocumentStore from a tree or a raw declaration mapping."""
    tree = schema if isinstance(schema, SchemaTree) else build_schema_tree(schema)
    return TypedDocumentStore(client, tree, **options)


def _parse_segments(segments: tuple[str, ...]) -> ParsedPath:
    if len(segments) == 1:
        return parse_path(segments[0], allow_wildcards=False)
    return parse_path(segments, allow_wildcards=False)


def _sorted_undeclared(
    live: Iterable[str], declared: set[str], covers_all: bool
) -> tuple[str, ...]:
    if covers_all:
        return ()
    undeclared = sorted({name for name in live if name not in declared})
    if undeclared:
        _LOGGER.warning("Found %d undeclared children: %s", len(undeclared), ", ".join(undeclared))
    return tuple(undeclared)
