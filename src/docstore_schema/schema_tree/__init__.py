"""Schema tree exports."""

from .field_types import (
    ANY,
    NEVER,
    AnyType,
    ArrayType,
    FieldType,
    LiteralType,
    MapType,
    PrimitiveType,
    TypeExpressionError,
    UnionType,
    parse_type_expression,
    render_type,
    type_of_value,
    union_of,
)
from .tree_declaration import (
    DEFAULT_GENERIC_DOCUMENT_KEY,
    DEFAULT_SCHEMA_KEY,
    SchemaDeclarationError,
    build_schema_tree,
    load_schema_declaration,
    parse_schema_declaration,
)
from .tree_models import (
    GENERIC_SEGMENT_LABEL,
    CollectionNode,
    DocumentNode,
    DocumentSchema,
    SchemaTree,
    all_collection_names,
    child_collection,
    child_document,
    generic_child_document,
    iter_documents,
)

__all__ = [
    "ANY",
    "NEVER",
    "AnyType",
    "ArrayType",
    "FieldType",
    "LiteralType",
    "MapType",
    "PrimitiveType",
    "UnionType",
    "TypeExpressionError",
    "parse_type_expression",
    "render_type",
    "type_of_value",
    "union_of",
    "DEFAULT_GENERIC_DOCUMENT_KEY",
    "DEFAULT_SCHEMA_KEY",
    "SchemaDeclarationError",
    "build_schema_tree",
    "load_schema_declaration",
    "parse_schema_declaration",
    "GENERIC_SEGMENT_LABEL",
    "CollectionNode",
    "DocumentNode",
    "DocumentSchema",
    "SchemaTree",
    "all_collection_names",
    "child_collection",
    "child_document",
    "generic_child_document",
    "iter_documents",
]
