from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ..models.dataset import Dataset, DisplayOptions, Projection

"""Projection rendering shared by preview, file export and clipboard copy.

The same Projection.text feeds all three outputs; the export file only adds a
leading BOM.
"""

__all__ = [
    "BOM",
    "render",
    "serialize",
    "export_bytes",
    "clipboard_text",
]

BOM = "\ufeff"


def serialize(records: list[dict[str, Any]], pretty_print: bool) -> str:
    if pretty_print:
        return json.dumps(records, indent=2, ensure_ascii=False)
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False)


def render(dataset: Dataset | None, selected: Iterable[str], options: DisplayOptions) -> Projection:
    """Project records onto the selected columns and serialize them.

    Args:
        dataset: Loaded dataset (None renders an empty list)
        selected: Selected keys
        options: pretty_print / show_nulls

    Returns:
        Projection(records, text)
    """
    if dataset is None:
        return Projection(records=[], text=serialize([], options.pretty_print))

    wanted = set(selected)
    # key order follows the header order for every row
    keys = [k for k in dataset.unique_columns if k in wanted]
    projected: list[dict[str, Any]] = []
    for record in dataset.records:
        row: dict[str, Any] = {}
        for key in keys:
            value = record.get(key)
            if options.show_nulls or value is not None:
                row[key] = value
        projected.append(row)
    return Projection(records=projected, text=serialize(projected, options.pretty_print))


def export_bytes(projection: Projection) -> bytes:
    """Download artifact: BOM + JSON text, UTF-8."""
    return (BOM + projection.text).encode("utf-8")


def clipboard_text(projection: Projection) -> str:
    """Clipboard payload: the JSON text verbatim, without BOM."""
    return projection.text
