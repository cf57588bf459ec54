from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Dataset / DisplayOptions / Projection models.

A Dataset is owned by one session and replaced wholesale on each file load.
All records of a Dataset share the key set defined by `columns` (header order).
"""

__all__ = [
    "Dataset",
    "DisplayOptions",
    "Projection",
]


@dataclass(frozen=True)
class Dataset:
    """Normalized content of one loaded file."""
    records: list[dict[str, Any]]  # NormalizedKey -> cleaned value
    columns: list[str]  # normalized keys in header order (duplicates kept)
    name: str  # originating filename without extension

    @property
    def output_filename(self) -> str:
        return f"{self.name}.json"

    @property
    def unique_columns(self) -> list[str]:
        """Available keys in header order, first occurrence only."""
        return list(dict.fromkeys(self.columns))

    def is_empty(self) -> bool:
        return not self.columns


@dataclass(frozen=True)
class DisplayOptions:
    """Rendering options shared by preview and export."""
    pretty_print: bool = True  # 2-space indent vs compact
    show_nulls: bool = True  # False: omit null-valued fields


@dataclass(frozen=True)
class Projection:
    """Filtered records plus their serialized text (single source for preview/export)."""
    records: list[dict[str, Any]] = field(default_factory=list)
    text: str = "[]"
