"""Schema-aware path resolution and query narrowing for hierarchical document stores."""

import logging

from .path_resolution import SchemaUnion
from .typed_store import TypedDocumentStore, with_schema

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["SchemaUnion", "TypedDocumentStore", "with_schema"]
