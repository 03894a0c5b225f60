"""Excel inventory of a declared schema tree."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from docstore_schema.path_grammar.path_models import PATH_SEPARATOR
from docstore_schema.schema_tree.field_types import render_type
from docstore_schema.schema_tree.tree_models import (
    CollectionNode,
    DocumentNode,
    SchemaTree,
    iter_documents,
)

from .constants import (
    COLLECTIONS_SHEET_NAME,
    FIELD_COLUMNS,
    LOCATION_COLUMNS,
    SUMMARY_SHEET_NAME,
)


@dataclass(frozen=True)
class InventoryRow:
    """One declared field of one declared document slot."""

    collection_path: str
    document_key: str
    field_name: str | None
    field_type: str | None


@dataclass(frozen=True)
class InventorySummary:
    """Totals shown on the summary sheet."""

    collection_count: int
    document_count: int
    collection_group_names: tuple[str, ...]


def iter_inventory_rows(tree: SchemaTree) -> Iterator[InventoryRow]:
    """Yield rows breadth-first, visiting every collection node once.

    Documents without fields produce one row with empty field columns. A
    collection reachable from several paths is listed under the first one found.
    """
    for collection_path, collection in _iter_collections(tree):
        pattern = PATH_SEPARATOR.join(collection_path)
        for label, child in iter_documents(collection):
            if not child.schema.fields:
                yield InventoryRow(pattern, label, None, None)
            for field_name, field_type in child.schema.fields:
                yield InventoryRow(pattern, label, field_name, render_type(field_type))


def summarize_inventory(tree: SchemaTree) -> InventorySummary:
    collection_count = 0
    document_count = 0
    names: set[str] = set()
    for collection_path, collection in _iter_collections(tree):
        collection_count += 1
        document_count += sum(1 for _ in iter_documents(collection))
        names.add(collection_path[-1])
    return InventorySummary(
        collection_count=collection_count,
        document_count=document_count,
        collection_group_names=tuple(sorted(names)),
    )


def _iter_collections(
    tree: SchemaTree,
) -> Iterator[tuple[tuple[str, ...], CollectionNode]]:
    seen: set[int] = set()
    pending: deque[tuple[DocumentNode, tuple[str, ...]]] = deque([(tree.root, ())])
    while pending:
        document, document_path = pending.popleft()
        for name, collection in document.collections.items():
            if id(collection) in seen:
                continue
            seen.add(id(collection))
            collection_path = document_path + (name,)
            yield collection_path, collection
            for label, child in iter_documents(collection):
                pending.append((child, collection_path + (label,)))


def write_inventory_workbook(tree: SchemaTree, output_path: Path | str) -> Path:
    """Create the inventory workbook with a collections sheet and a summary sheet."""
    workbook = Workbook()
    sheet = workbook.active
    if sheet is None:
        raise RuntimeError("Workbook active sheet is not available.")
    assert isinstance(sheet, Worksheet)
    sheet.title = COLLECTIONS_SHEET_NAME

    columns = LOCATION_COLUMNS + FIELD_COLUMNS
    _write_group_headers(sheet, len(LOCATION_COLUMNS), len(FIELD_COLUMNS))
    for column_index, name in enumerate(columns, start=1):
        sheet.cell(row=2, column=column_index, value=name)

    widths = [len(name) for name in columns]
    for row_index, row in enumerate(iter_inventory_rows(tree), start=3):
        values = (row.collection_path, row.document_key, row.field_name, row.field_type)
        for column_index, value in enumerate(values, start=1):
            sheet.cell(row=row_index, column=column_index, value=value)
            widths[column_index - 1] = max(widths[column_index - 1], len(value or ""))
    for column_index, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(column_index)].width = max(12, min(width + 6, 60))

    _write_summary_sheet(workbook, summarize_inventory(tree))

    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(destination)
    return destination.resolve()


def _write_group_headers(sheet: Worksheet, location_count: int, field_count: int) -> None:
    groups = [
        ("Location", 1, location_count),
        ("Schema", location_count + 1, field_count),
    ]
    for label, start_column, count in groups:
        end_column = start_column + count - 1
        start_letter = get_column_letter(start_column)
        end_letter = get_column_letter(end_column)
        sheet.merge_cells(f"{start_letter}1:{end_letter}1")
        sheet[f"{start_letter}1"].value = label
        sheet[f"{start_letter}1"].style = "Headline 1"


def _write_summary_sheet(workbook: Workbook, summary: InventorySummary) -> None:
    sheet = workbook.create_sheet(SUMMARY_SHEET_NAME)
    entries = [
        ("collection_count", summary.collection_count),
        ("document_count", summary.document_count),
        ("collection_group_names", ", ".join(summary.collection_group_names)),
    ]
    for row_index, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row_index, column=1, value=key)
        sheet.cell(row=row_index, column=2, value=value)
