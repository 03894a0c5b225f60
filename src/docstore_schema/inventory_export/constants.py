"""Shared inventory workbook constants."""

from __future__ import annotations

COLLECTIONS_SHEET_NAME = "Collections"
SUMMARY_SHEET_NAME = "Summary"

LOCATION_COLUMNS: tuple[str, ...] = ("Collection path", "Document key")
FIELD_COLUMNS: tuple[str, ...] = ("Field", "Type")
