"""Schema tree entities and traversal helpers."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .field_types import FieldType, MapType, render_type

GENERIC_SEGMENT_LABEL = "{id}"


@dataclass(frozen=True)
class DocumentSchema:
    """Flat open record of field name to field type, compared structurally."""

    fields: tuple[tuple[str, FieldType], ...] = ()

    @classmethod
    def from_mapping(cls, fields: Mapping[str, FieldType]) -> DocumentSchema:
        return cls(fields=tuple(sorted(fields.items())))

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def field_map(self) -> dict[str, FieldType]:
        return dict(self.fields)

    def has_field(self, field_path: str) -> bool:
        return self.field_type_at(field_path) is not None

    def field_type_at(self, field_path: str) -> FieldType | None:
        """Return the declared type at a top-level or dotted field path."""
        declared = self.field_map()
        if field_path in declared:
            return declared[field_path]
        head, separator, rest = field_path.partition(".")
        if not separator or head not in declared:
            return None
        current: FieldType = declared[head]
        for part in rest.split("."):
            if not isinstance(current, MapType):
                return None
            nested = current.field_map()
            if part not in nested:
                return None
            current = nested[part]
        return current

    def restricted_to(self, field_names: set[str]) -> DocumentSchema:
        return DocumentSchema(fields=tuple(item for item in self.fields if item[0] in field_names))

    def sort_key(self) -> tuple[tuple[str, str], ...]:
        return tuple((name, render_type(field_type)) for name, field_type in self.fields)


# Nodes compare by identity: declarations may reference an ancestor, so the
# node graph can be cyclic and structural equality would not terminate.
@dataclass(frozen=True, eq=False)
class DocumentNode:
    """One declared document slot: its schema plus named sub-collections."""

    schema: DocumentSchema
    collections: Mapping[str, CollectionNode]


@dataclass(frozen=True, eq=False)
class CollectionNode:
    """Declared documents of one collection.

    `entries` maps declared document keys to documents; the entry stored under
    `generic_key` (when present) is the shape shared by every other document name.
    """

    entries: Mapping[str, DocumentNode]
    generic_key: str | None = None

    @property
    def documents(self) -> dict[str, DocumentNode]:
        """Literally named documents, excluding the generic shape."""
        return {key: node for key, node in self.entries.items() if key != self.generic_key}

    @property
    def generic_document(self) -> DocumentNode | None:
        if self.generic_key is None:
            return None
        return self.entries.get(self.generic_key)


@dataclass(frozen=True, eq=False)
class SchemaTree:
    """Immutable declared shape of the whole database."""

    root: DocumentNode

    @property
    def collections(self) -> Mapping[str, CollectionNode]:
        return self.root.collections

    @classmethod
    def from_collections(cls, collections: Mapping[str, CollectionNode]) -> SchemaTree:
        root = DocumentNode(schema=DocumentSchema(), collections=frozen_mapping(collections))
        return cls(root=root)


def frozen_mapping(values: Mapping) -> Mapping:
    if isinstance(values, MappingProxyType):
        return values
    return MappingProxyType(dict(values))


def child_collection(document: DocumentNode, name: str) -> CollectionNode | None:
    return document.collections.get(name)


def child_document(collection: CollectionNode, name: str) -> DocumentNode | None:
    """Return the literal document `name`, falling back to the generic document shape."""
    if name != collection.generic_key and name in collection.entries:
        return collection.entries[name]
    return collection.generic_document


def generic_child_document(collection: CollectionNode) -> DocumentNode | None:
    return collection.generic_document


def all_collection_names(document: DocumentNode) -> frozenset[str]:
    return frozenset(document.collections)


def iter_documents(collection: CollectionNode) -> Iterator[tuple[str, DocumentNode]]:
    """Yield `(label, document)` for literal documents, then the generic document."""
    yield from collection.documents.items()
    if collection.generic_document is not None:
        yield GENERIC_SEGMENT_LABEL, collection.generic_document
