"""Inventory workbook export tests."""

from __future__ import annotations

from pathlib import Path

from docstore_schema.inventory_export.constants import (
    COLLECTIONS_SHEET_NAME,
    SUMMARY_SHEET_NAME,
)
from docstore_schema.inventory_export.inventory_workbook_builder import (
    InventoryRow,
    iter_inventory_rows,
    summarize_inventory,
    write_inventory_workbook,
)
from docstore_schema.schema_tree.tree_declaration import (
    build_schema_tree,
    parse_schema_declaration,
)
from docstore_schema.schema_tree.tree_models import SchemaTree
from openpyxl import load_workbook


def _tree() -> SchemaTree:
    return build_schema_tree(
        {
            "users": {
                "*": {
                    "$schema": {"name": "string", "age": "number"},
                    "posts": {"*": {"$schema": {"title": "string"}}},
                },
                "admin": {"$schema": {"name": "string", "level": "number"}},
            },
            "posts": {
                "p1": {"$schema": {"title": "string"}},
                "p2": {"$schema": {"title": "string", "draft": "boolean | null"}},
            },
            "rooms": {"lobby": None},
        }
    )


def test_rows_list_every_declared_field_breadth_first() -> None:
    rows = list(iter_inventory_rows(_tree()))

    assert rows == [
        InventoryRow("users", "admin", "level", "number"),
        InventoryRow("users", "admin", "name", "string"),
        InventoryRow("users", "{id}", "age", "number"),
        InventoryRow("users", "{id}", "name", "string"),
        InventoryRow("posts", "p1", "title", "string"),
        InventoryRow("posts", "p2", "draft", "boolean | null"),
        InventoryRow("posts", "p2", "title", "string"),
        InventoryRow("rooms", "lobby", None, None),
        InventoryRow("users/{id}/posts", "{id}", "title", "string"),
    ]


def test_summary_counts_collections_documents_and_group_names() -> None:
    summary = summarize_inventory(_tree())

    assert summary.collection_count == 4
    assert summary.document_count == 6
    assert summary.collection_group_names == ("posts", "rooms", "users")


def test_summary_counts_collections_declared_without_documents() -> None:
    tree = build_schema_tree({"logs": {}, "users": {"*": {"$schema": {"name": "string"}}}})

    summary = summarize_inventory(tree)

    assert summary.collection_count == 2
    assert summary.document_count == 1
    assert summary.collection_group_names == ("logs", "users")


def test_cyclic_tree_lists_each_collection_once() -> None:
    tree = build_schema_tree(
        parse_schema_declaration(
            """
users: &users
  "*":
    $schema:
      name: string
    friends: *users
"""
        )
    )

    assert list(iter_inventory_rows(tree)) == [InventoryRow("users", "{id}", "name", "string")]


def test_workbook_contains_collections_and_summary_sheets(tmp_path: Path) -> None:
    output_path = tmp_path / "reports" / "inventory.xlsx"

    written = write_inventory_workbook(_tree(), output_path)

    assert written == output_path.resolve()
    workbook = load_workbook(output_path)
    assert workbook.sheetnames == [COLLECTIONS_SHEET_NAME, SUMMARY_SHEET_NAME]

    sheet = workbook[COLLECTIONS_SHEET_NAME]
    assert sheet["A1"].value == "Location"
    assert sheet["C1"].value == "Schema"
    assert [cell.value for cell in sheet[2]] == [
        "Collection path",
        "Document key",
        "Field",
        "Type",
    ]
    assert [cell.value for cell in sheet[3]] == ["users", "admin", "level", "number"]
    assert [cell.value for cell in sheet[10]] == ["rooms", "lobby", None, None]
    assert sheet.max_row == 11

    summary = workbook[SUMMARY_SHEET_NAME]
    assert summary["A1"].value == "collection_count"
    assert summary["B1"].value == 4
    assert summary["B3"].value == "posts, rooms, users"
