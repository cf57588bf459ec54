"""Spreadsheet (first sheet) to JSON converter with column selection."""

__version__ = "0.3.0"
