"""Typed store exports."""

from .store_protocol import DocumentStoreClient, NodeKind
from .typed_document_store import TypedDocumentStore, with_schema
from .typed_handles import (
    SchemaCastValue,
    TypedCollection,
    TypedDocument,
    TypedQuery,
    UnresolvedPathError,
)

__all__ = [
    "DocumentStoreClient",
    "NodeKind",
    "TypedDocumentStore",
    "with_schema",
    "SchemaCastValue",
    "TypedCollection",
    "TypedDocument",
    "TypedQuery",
    "UnresolvedPathError",
]
