"""Collection-group lookup across the whole schema tree."""

from __future__ import annotations

import logging

from docstore_schema.path_grammar.path_models import PATH_SEPARATOR
from docstore_schema.path_grammar.path_parser import validate_collection_id
from docstore_schema.schema_tree.tree_models import DocumentNode, SchemaTree, iter_documents

from .schema_union import SchemaUnion

DEFAULT_MAX_TRAVERSAL_DEPTH = 64

_LOGGER = logging.getLogger(__name__)


def match_collection_group(
    tree: SchemaTree,
    collection_id: str,
    *,
    max_depth: int = DEFAULT_MAX_TRAVERSAL_DEPTH,
) -> SchemaUnion:
    """Return the union of document schemas of every collection named `collection_id`.

    The search runs breadth-first from the root. Each collection node is expanded
    at most once, and at most `max_depth` levels of collection nesting are
    visited, so self-referential declarations terminate.
    """
    validate_collection_id(collection_id)
    if max_depth <= 0:
        raise ValueError("max_depth must be greater than zero.")

    variants: list[tuple] = []
    expanded: set[int] = set()
    frontier: list[tuple[DocumentNode, tuple[str, ...]]] = [(tree.root, ())]
    depth = 0
    while frontier:
        if depth >= max_depth:
            _LOGGER.warning(
                "Collection group '%s' search stopped at depth %d with %d documents unvisited.",
                collection_id,
                depth,
                len(frontier),
            )
            break
        next_frontier: list[tuple[DocumentNode, tuple[str, ...]]] = []
        for document, declared_path in frontier:
            for name, collection in document.collections.items():
                collection_path = declared_path + (name,)
                documents = list(iter_documents(collection))
                if name == collection_id:
                    variants.extend(
                        (child.schema, PATH_SEPARATOR.join(collection_path + (label,)))
                        for label, child in documents
                    )
                if id(collection) in expanded:
                    continue
                expanded.add(id(collection))
                next_frontier.extend(
                    (child, collection_path + (label,)) for label, child in documents
                )
        frontier = next_frontier
        depth += 1

    _LOGGER.debug(
        "Collection group '%s' matched %d declared documents across %d collections.",
        collection_id,
        len(variants),
        len(expanded),
    )
    return SchemaUnion.from_variants(variants)
