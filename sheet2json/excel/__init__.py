"""Spreadsheet reading and cell/header normalization."""

from .cleaning import clean_value, normalize_key
from .reader import SheetData, extract_sheet, read_first_sheet

__all__ = [
    "clean_value",
    "normalize_key",
    "SheetData",
    "extract_sheet",
    "read_first_sheet",
]
