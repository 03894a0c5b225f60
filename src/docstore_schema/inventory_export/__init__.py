"""Inventory export exports."""

from .constants import COLLECTIONS_SHEET_NAME, FIELD_COLUMNS, LOCATION_COLUMNS, SUMMARY_SHEET_NAME
from .inventory_workbook_builder import (
    InventoryRow,
    InventorySummary,
    iter_inventory_rows,
    summarize_inventory,
    write_inventory_workbook,
)

__all__ = [
    "COLLECTIONS_SHEET_NAME",
    "SUMMARY_SHEET_NAME",
    "LOCATION_COLUMNS",
    "FIELD_COLUMNS",
    "InventoryRow",
    "InventorySummary",
    "iter_inventory_rows",
    "summarize_inventory",
    "write_inventory_workbook",
]
