"""Schema tree declaration tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from docstore_schema.schema_tree.field_types import PrimitiveType
from docstore_schema.schema_tree.tree_declaration import (
    SchemaDeclarationError,
    build_schema_tree,
    load_schema_declaration,
    parse_schema_declaration,
)
from docstore_schema.schema_tree.tree_models import (
    DocumentSchema,
    all_collection_names,
    child_collection,
    child_document,
    generic_child_document,
    iter_documents,
)

_RECURSIVE_DECLARATION = """
users: &users
  "*":
    $schema:
      name: string
    friends: *users
"""


def test_builds_literal_and_generic_documents() -> None:
    tree = build_schema_tree(
        {
            "users": {
                "*": {"$schema": {"name": "string"}},
                "admin": {"$schema": {"name": "string", "level": "number"}},
            }
        }
    )

    users = tree.collections["users"]
    assert set(users.documents) == {"admin"}
    assert users.generic_document is not None
    assert users.generic_document.schema == DocumentSchema.from_mapping(
        {"name": PrimitiveType("string")}
    )
    assert child_document(users, "admin") is users.documents["admin"]
    assert child_document(users, "someone") is users.generic_document
    assert generic_child_document(users) is users.generic_document
    assert [label for label, _ in iter_documents(users)] == ["admin", "{id}"]


def test_document_without_schema_key_has_empty_schema() -> None:
    tree = build_schema_tree({"rooms": {"lobby": {"messages": {"*": None}}}})

    lobby = child_document(tree.collections["rooms"], "lobby")
    assert lobby is not None
    assert lobby.schema == DocumentSchema()
    assert all_collection_names(lobby) == frozenset({"messages"})
    assert child_collection(lobby, "missing") is None


def test_literal_lookup_without_generic_key_returns_none() -> None:
    tree = build_schema_tree({"posts": {"p1": {"$schema": {"title": "string"}}}})

    assert child_document(tree.collections["posts"], "p2") is None


def test_custom_reserved_keys() -> None:
    tree = build_schema_tree(
        {"users": {"_any": {"_fields": {"name": "string"}}}},
        schema_key="_fields",
        generic_document_key="_any",
    )

    generic = tree.collections["users"].generic_document
    assert generic is not None
    assert generic.schema.field_names == ("name",)


def test_recursive_yaml_declaration_builds_cyclic_tree() -> None:
    tree = build_schema_tree(parse_schema_declaration(_RECURSIVE_DECLARATION))

    users = tree.collections["users"]
    assert users.generic_document is not None
    assert users.generic_document.collections["friends"] is users


@pytest.mark.parametrize(
    ("declaration", "message"),
    [
        ({"users": "not a mapping"}, "must be a mapping of documents"),
        ({"users": {"u1": ["nope"]}}, "must be a mapping"),
        ({"a/b": {}}, "must not contain '/'"),
        ({"users": {"u/1": {}}}, "must not contain '/'"),
        ({"users": {"*": {"$schema": "string"}}}, "must be a mapping"),
        ({"users": {"*": {"$schema": {"age": "numbr"}}}}, "Field 'age'"),
    ],
)
def test_rejects_malformed_declarations(declaration: dict, message: str) -> None:
    with pytest.raises(SchemaDeclarationError, match=message):
        build_schema_tree(declaration)


def test_parse_rejects_empty_and_non_mapping_text() -> None:
    with pytest.raises(SchemaDeclarationError, match="empty"):
        parse_schema_declaration("")
    with pytest.raises(SchemaDeclarationError, match="root must be a mapping"):
        parse_schema_declaration("- users")
    with pytest.raises(SchemaDeclarationError, match="Invalid schema declaration"):
        parse_schema_declaration("users: [unclosed")


def test_load_declaration_from_file(tmp_path: Path) -> None:
    declaration_path = tmp_path / "schema.yaml"
    declaration_path.write_text("posts:\n  p1:\n    $schema:\n      title: string\n", "utf-8")

    declaration = load_schema_declaration(declaration_path)

    assert declaration == {"posts": {"p1": {"$schema": {"title": "string"}}}}
    with pytest.raises(SchemaDeclarationError, match="not found"):
        load_schema_declaration(tmp_path / "missing.yaml")
