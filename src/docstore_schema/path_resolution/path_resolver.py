"""Path resolution over the schema tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from docstore_schema.path_grammar.path_models import PATH_SEPARATOR, PathKind
from docstore_schema.path_grammar.path_parser import PathInput, parse_path, require_path_kind
from docstore_schema.schema_tree.tree_models import (
    GENERIC_SEGMENT_LABEL,
    CollectionNode,
    DocumentNode,
    SchemaTree,
    child_collection,
    child_document,
    iter_documents,
)

from .schema_union import SchemaUnion

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedNode:
    """A node reached by resolution and the declared keys leading to it."""

    node: CollectionNode | DocumentNode
    declared_path: tuple[str, ...]

    @property
    def origin(self) -> str:
        return PATH_SEPARATOR.join(self.declared_path)


def resolve_nodes(
    tree: SchemaTree, path: PathInput, *, allow_wildcards: bool = True
) -> tuple[ResolvedNode, ...]:
    """Return every node the path can denote.

    Performs exactly one descent per segment, so cyclic trees are safe. Literal
    segments that match nothing end resolution with no candidates.
    """
    parsed = parse_path(path, allow_wildcards=allow_wildcards)
    frontier: list[ResolvedNode] = [ResolvedNode(node=tree.root, declared_path=())]
    for index, segment in enumerate(parsed.segments):
        at_collection_position = index % 2 == 0
        next_frontier: list[ResolvedNode] = []
        for candidate in frontier:
            if at_collection_position:
                next_frontier.extend(
                    _descend_into_collections(candidate, segment.text, segment.is_wildcard)
                )
            else:
                next_frontier.extend(
                    _descend_into_documents(candidate, segment.text, segment.is_wildcard)
                )
        _LOGGER.debug(
            "Segment %d (%s) of '%s': %d -> %d candidates",
            index,
            segment.text,
            parsed.text,
            len(frontier),
            len(next_frontier),
        )
        frontier = next_frontier
        if not frontier:
            break
    return tuple(frontier)


def resolve(tree: SchemaTree, path: PathInput, *, allow_wildcards: bool = True) -> SchemaUnion:
    """Resolve a document path to the union of schemas of the documents it names."""
    parsed = require_path_kind(
        parse_path(path, allow_wildcards=allow_wildcards), PathKind.DOCUMENT
    )
    return _document_union(resolve_nodes(tree, parsed))


def resolve_collection(
    tree: SchemaTree, path: PathInput, *, allow_wildcards: bool = True
) -> SchemaUnion:
    """Resolve a collection path to the union of schemas of its member documents."""
    parsed = require_path_kind(
        parse_path(path, allow_wildcards=allow_wildcards), PathKind.COLLECTION
    )
    return _collection_union(resolve_nodes(tree, parsed))


def schema_at_path(tree: SchemaTree, path: PathInput) -> SchemaUnion:
    """Resolve a path of either kind, dispatching on its parity."""
    parsed = parse_path(path)
    if parsed.kind == PathKind.DOCUMENT:
        return resolve(tree, parsed)
    return resolve_collection(tree, parsed)


def _descend_into_collections(
    candidate: ResolvedNode, name: str, is_wildcard: bool
) -> list[ResolvedNode]:
    document = candidate.node
    assert isinstance(document, DocumentNode)
    if is_wildcard:
        return [
            ResolvedNode(node=collection, declared_path=candidate.declared_path + (key,))
            for key, collection in document.collections.items()
        ]
    collection = child_collection(document, name)
    if collection is None:
        return []
    return [ResolvedNode(node=collection, declared_path=candidate.declared_path + (name,))]


def _descend_into_documents(
    candidate: ResolvedNode, name: str, is_wildcard: bool
) -> list[ResolvedNode]:
    collection = candidate.node
    assert isinstance(collection, CollectionNode)
    if is_wildcard:
        return [
            ResolvedNode(node=document, declared_path=candidate.declared_path + (label,))
            for label, document in iter_documents(collection)
        ]
    document = child_document(collection, name)
    if document is None:
        return []
    is_literal = name != collection.generic_key and name in collection.entries
    label = name if is_literal else GENERIC_SEGMENT_LABEL
    return [ResolvedNode(node=document, declared_path=candidate.declared_path + (label,))]


def _document_union(nodes: tuple[ResolvedNode, ...]) -> SchemaUnion:
    variants = []
    for resolved in nodes:
        assert isinstance(resolved.node, DocumentNode)
        variants.append((resolved.node.schema, resolved.origin))
    return SchemaUnion.from_variants(variants)


def _collection_union(nodes: tuple[ResolvedNode, ...]) -> SchemaUnion:
    variants = []
    for resolved in nodes:
        assert isinstance(resolved.node, CollectionNode)
        for label, document in iter_documents(resolved.node):
            variants.append(
                (document.schema, PATH_SEPARATOR.join(resolved.declared_path + (label,)))
            )
    return SchemaUnion.from_variants(variants)
