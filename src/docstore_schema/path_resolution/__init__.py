"""Path resolution exports."""

from .collection_group_matcher import DEFAULT_MAX_TRAVERSAL_DEPTH, match_collection_group
from .path_resolver import ResolvedNode, resolve, resolve_collection, resolve_nodes, schema_at_path
from .schema_union import SchemaUnion, SchemaVariant

__all__ = [
    "DEFAULT_MAX_TRAVERSAL_DEPTH",
    "match_collection_group",
    "ResolvedNode",
    "resolve",
    "resolve_collection",
    "resolve_nodes",
    "schema_at_path",
    "SchemaUnion",
    "SchemaVariant",
]
