from __future__ import annotations

import io
import math
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

import numpy as np
import pandas as pd

from ..errors import ParseError

"""Spreadsheet reader (first sheet only).

- Row 0 is the header row. A column contributes a header only if its row-0 cell
  holds a value; blank-header columns are dropped from the schema.
- Rows 1..n are data rows, kept as value lists aligned with the headers.
- pandas is told not to guess NA strings: a cell containing "NA" stays text.
"""

__all__ = [
    "SheetData",
    "read_first_sheet",
    "extract_sheet",
]


@dataclass
class SheetData:
    sheet_name: str
    headers: list[str]
    rows: list[list[Any]]  # one list per data row, aligned with headers

    def records(self) -> Iterator[dict[str, Any]]:
        """Yield raw header -> value mappings (later duplicate header wins)."""
        for row in self.rows:
            yield dict(zip(self.headers, row))


def read_first_sheet(data: bytes) -> tuple[str, pd.DataFrame]:
    """Parse spreadsheet bytes and return the first sheet as a raw DataFrame.

    Parameters
    ----------
    data: spreadsheet file content

    Raises
    ------
    ParseError: bytes are not a readable workbook or the workbook has no sheets
    """
    try:
        xls = pd.ExcelFile(io.BytesIO(data))
    except Exception as e:
        raise ParseError(f"cannot read spreadsheet: {e}") from e

    if not xls.sheet_names:
        raise ParseError("workbook contains no sheets")
    name = str(xls.sheet_names[0])
    try:
        df = xls.parse(xls.sheet_names[0], header=None, dtype=object, keep_default_na=False)
    except Exception as e:
        raise ParseError(f"cannot read sheet '{name}': {e}") from e
    return name, df


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value == ""


def _coerce_cell(value: Any) -> Any:
    """Coerce a raw cell into a JSON scalar (str, int, float, bool or None)."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    # timedelta and anything else the engine hands back
    return str(value)


def _header_text(value: Any) -> str:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def extract_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    null_sentinels: set[str] | None = None,
    skip_blank_rows: bool = False,
) -> SheetData:
    """Split a raw (header-less) DataFrame into headers and data rows.

    Steps:
    1. Validate the sheet has a cell range (at least one row)
    2. Collect (column index, header text) for every non-blank row-0 cell
    3. Build one value list per remaining row, for the retained columns only
    4. Replace null sentinel strings (case-insensitive, trimmed) with None
    """
    if df.shape[0] == 0 or df.shape[1] == 0:
        raise ParseError(f"sheet '{sheet_name}' has no cell range")

    header_cells = df.iloc[0].tolist()
    positions: list[int] = []
    headers: list[str] = []
    for idx, cell in enumerate(header_cells):
        if _is_blank(cell):
            continue
        positions.append(idx)
        headers.append(_header_text(cell))
    if not headers:
        raise ParseError(f"sheet '{sheet_name}' has no header row")

    sentinels = {s.strip().upper() for s in null_sentinels} if null_sentinels else None

    rows: list[list[Any]] = []
    for raw in df.iloc[1:].itertuples(index=False, name=None):
        values: list[Any] = []
        for idx in positions:
            val = _coerce_cell(raw[idx]) if idx < len(raw) else None
            if sentinels and isinstance(val, str) and val.strip().upper() in sentinels:
                val = None
            values.append(val)
        if skip_blank_rows and all(_is_blank(v) for v in values):
            continue
        rows.append(values)

    return SheetData(sheet_name=sheet_name, headers=headers, rows=rows)
