from __future__ import annotations

import logging
import re
from pathlib import PurePath
from typing import Any

from ..errors import DuplicateKeyError
from ..excel.cleaning import clean_value, normalize_key
from ..excel.reader import SheetData, extract_sheet, read_first_sheet
from ..models.dataset import Dataset

"""Record pipeline: SheetData -> Dataset.

For every data row and every header (in header order): look up the raw value,
normalize the header, clean the value, assign under the normalized key. A later
header that normalizes to an already used key overwrites the earlier value
(`duplicate_keys="last_wins"`) or aborts the load (`duplicate_keys="error"`).
"""

logger = logging.getLogger(__name__)

DUPLICATE_KEY_MODES = ("last_wins", "error")

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def strip_extension(filename: str) -> str:
    """Return the base filename without its last extension."""
    return _EXTENSION_RE.sub("", PurePath(filename).name)


def output_filename(filename: str) -> str:
    """`report.xlsx` -> `report.json`."""
    return f"{strip_extension(filename)}.json"


def _find_collisions(headers: list[str], keys: list[str]) -> dict[str, list[str]]:
    by_key: dict[str, list[str]] = {}
    for header, key in zip(headers, keys):
        by_key.setdefault(key, []).append(header)
    return {k: hs for k, hs in by_key.items() if len(hs) > 1}


def build_dataset(
    sheet: SheetData,
    filename: str,
    camel_case: bool = True,
    duplicate_keys: str = "last_wins",
) -> Dataset:
    """Normalize every row of a sheet into a Dataset.

    Args:
        sheet: Extracted headers and rows of the first sheet
        filename: Original filename (extension is stripped for the dataset name)
        camel_case: Derive camelCase keys; False keeps headers verbatim
        duplicate_keys: "last_wins" or "error"

    Returns:
        Dataset whose columns are the normalized headers in original order

    Raises:
        DuplicateKeyError: duplicate_keys="error" and two headers share a key
        ValueError: unknown duplicate_keys mode
    """
    if duplicate_keys not in DUPLICATE_KEY_MODES:
        raise ValueError(f"unknown duplicate_keys mode: {duplicate_keys!r}")

    keys = [normalize_key(h, camel_case) for h in sheet.headers]
    collisions = _find_collisions(sheet.headers, keys)
    if collisions:
        detail = ", ".join(f"{k!r} <- {hs}" for k, hs in collisions.items())
        if duplicate_keys == "error":
            raise DuplicateKeyError(f"headers normalize to the same key: {detail}")
        logger.warning(f"duplicate keys (last column wins): {detail}")

    records: list[dict[str, Any]] = []
    for row in sheet.rows:
        record: dict[str, Any] = {}
        for idx, key in enumerate(keys):
            value = row[idx] if idx < len(row) else None
            record[key] = clean_value(value)
        records.append(record)

    return Dataset(records=records, columns=keys, name=strip_extension(filename))


def load_dataset(
    data: bytes,
    filename: str,
    camel_case: bool = True,
    duplicate_keys: str = "last_wins",
    null_sentinels: set[str] | None = None,
    skip_blank_rows: bool = False,
) -> Dataset:
    """Read spreadsheet bytes and build the Dataset of its first sheet."""
    sheet_name, df = read_first_sheet(data)
    sheet = extract_sheet(df, sheet_name, null_sentinels=null_sentinels, skip_blank_rows=skip_blank_rows)
    logger.debug(f"{filename}: sheet={sheet_name} headers={len(sheet.headers)} rows={len(sheet.rows)}")
    return build_dataset(sheet, filename, camel_case=camel_case, duplicate_keys=duplicate_keys)
