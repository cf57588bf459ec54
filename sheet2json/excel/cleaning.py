from __future__ import annotations

import math
import re
import unicodedata
from typing import Any

"""Cell value cleaning and header key normalization.

clean_value():
- NaN / None -> None
- bool / int / float pass through
- str: NFKC -> repair mis-decoded ® / ™ -> drop non-ASCII except the allow-list
  -> trim -> "" becomes None

normalize_key():
- camel_case=False: header verbatim
- camel_case=True: "Customer Email Address" -> "customerEmailAddress"
"""

__all__ = [
    "ALLOWED_SYMBOLS",
    "clean_value",
    "normalize_key",
]

# Non-ASCII characters that survive cleaning
ALLOWED_SYMBOLS = "®™©±µ"

# UTF-8 bytes of ® / ™ decoded as Latin-1
MOJIBAKE_REPAIRS = (
    ("Â®", "®"),
    ("â\u0084¢", "™"),
)

_ALLOWED_SPLIT_RE = re.compile(f"([{ALLOWED_SYMBOLS}])")
_DISALLOWED_RE = re.compile(f"[^\\x00-\\x7f{ALLOWED_SYMBOLS}]")
# apostrophes join their word ("Owner's" -> "owners"); other punctuation splits words
_KEY_APOSTROPHE_RE = re.compile("['\u2019]")
_KEY_SEPARATOR_RE = re.compile(r"[^\w\s]", re.ASCII)
_CAMEL_BOUNDARY_RE = re.compile(r"\s+(.)")


def _nfkc(text: str) -> str:
    # NFKC maps ™ -> "TM" and µ -> Greek mu; normalize only the text between
    # allow-listed symbols so they come through untouched.
    parts = _ALLOWED_SPLIT_RE.split(text)
    return "".join(
        part if i % 2 else unicodedata.normalize("NFKC", part)
        for i, part in enumerate(parts)
    )


def clean_value(value: Any) -> Any:
    """Normalize a single raw cell value into a JSON-safe value or None.

    Args:
        value: Raw cell value (str, int, float, bool or None)

    Returns:
        Cleaned value. Strings that end up empty are returned as None.
    """
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if not isinstance(value, str):
        return value

    text = _nfkc(value)
    for broken, fixed in MOJIBAKE_REPAIRS:
        text = text.replace(broken, fixed)
    text = _DISALLOWED_RE.sub("", text).strip()
    return text or None


def normalize_key(header: str, camel_case: bool = True) -> str:
    """Derive a field name from a raw header string.

    Args:
        header: Header text from row 0 of the sheet
        camel_case: When False the header is returned unchanged

    Returns:
        Normalized key. May be the empty string for headers made only of
        punctuation.
    """
    if not camel_case:
        return header
    key = _KEY_APOSTROPHE_RE.sub("", str(header).lower())
    key = _KEY_SEPARATOR_RE.sub(" ", key).strip()
    return _CAMEL_BOUNDARY_RE.sub(lambda m: m.group(1).upper(), key)
