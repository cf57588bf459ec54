from __future__ import annotations

from collections.abc import Iterable

from ..errors import SelectionViolation, UnknownColumnError

"""Column selection state.

Invariant: while the available key list is non-empty, at least one key stays
selected. Every mutation goes through select_all / deselect_all_but_first /
toggle, which enforce it.
"""

__all__ = [
    "ColumnSelector",
]


class ColumnSelector:
    """Set of currently visible columns over a fixed available-key sequence."""

    def __init__(self, columns: Iterable[str]) -> None:
        self._columns: list[str] = list(dict.fromkeys(columns))
        self._selected: set[str] = set(self._columns)

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    @property
    def selected(self) -> list[str]:
        """Selected keys in available-key order."""
        return [c for c in self._columns if c in self._selected]

    def is_selected(self, key: str) -> bool:
        return key in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def select_all(self) -> None:
        self._selected = set(self._columns)

    def deselect_all_but_first(self) -> None:
        """Keep only the first available key. No-op when there are no columns."""
        if not self._columns:
            return
        self._selected = {self._columns[0]}

    def toggle(self, key: str, want_selected: bool) -> None:
        """Add or remove one key.

        Raises:
            UnknownColumnError: key is not an available column
            SelectionViolation: the removal would leave nothing selected
        """
        if key not in self._columns:
            raise UnknownColumnError(f"unknown column: {key!r}")
        if want_selected:
            self._selected.add(key)
            return
        if key not in self._selected:
            return
        if len(self._selected) == 1:
            raise SelectionViolation(f"cannot deselect last column: {key!r}")
        self._selected.discard(key)

    def select_only(self, keys: Iterable[str]) -> None:
        """Select exactly `keys` (must be non-empty), built on the primitives above."""
        wanted = list(dict.fromkeys(keys))
        if not wanted:
            raise SelectionViolation("at least one column must stay selected")
        unknown = [k for k in wanted if k not in self._columns]
        if unknown:
            raise UnknownColumnError(f"unknown columns: {unknown}")
        self.deselect_all_but_first()
        for key in wanted:
            self.toggle(key, True)
        first = self._columns[0]
        if first not in wanted:
            self.toggle(first, False)

    def exclude(self, keys: Iterable[str]) -> None:
        """Deselect every key in `keys`; state is unchanged if that would empty the selection."""
        dropped = list(dict.fromkeys(keys))
        unknown = [k for k in dropped if k not in self._columns]
        if unknown:
            raise UnknownColumnError(f"unknown columns: {unknown}")
        remaining = self._selected.difference(dropped)
        if self._columns and not remaining:
            raise SelectionViolation("cannot deselect every column")
        for key in dropped:
            self.toggle(key, False)
