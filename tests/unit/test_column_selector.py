from __future__ import annotations

import pytest

from sheet2json.errors import SelectionViolation, UnknownColumnError
from sheet2json.services.selection import ColumnSelector


def test_seeded_with_every_key_in_order():
    sel = ColumnSelector(["a", "b", "c"])
    assert sel.selected == ["a", "b", "c"]
    assert len(sel) == 3


def test_duplicate_available_keys_collapse():
    sel = ColumnSelector(["a", "b", "a"])
    assert sel.columns == ["a", "b"]


def test_deselect_all_but_first():
    sel = ColumnSelector(["a", "b", "c"])
    sel.deselect_all_but_first()
    assert sel.selected == ["a"]


def test_select_all_restores_full_set():
    sel = ColumnSelector(["a", "b", "c"])
    sel.deselect_all_but_first()
    sel.select_all()
    assert sel.selected == ["a", "b", "c"]


def test_toggle_add_and_remove():
    sel = ColumnSelector(["a", "b", "c"])
    sel.toggle("b", False)
    assert sel.selected == ["a", "c"]
    sel.toggle("b", True)
    assert sel.selected == ["a", "b", "c"]
    assert sel.is_selected("b")


def test_repeated_removals_never_go_below_one():
    sel = ColumnSelector(["a", "b", "c"])
    sel.toggle("a", False)
    sel.toggle("b", False)
    assert sel.selected == ["c"]
    with pytest.raises(SelectionViolation):
        sel.toggle("c", False)
    # rejected removal leaves the previous valid state
    assert sel.selected == ["c"]


def test_removing_unselected_key_is_noop():
    sel = ColumnSelector(["a", "b"])
    sel.deselect_all_but_first()
    sel.toggle("b", False)
    assert sel.selected == ["a"]


def test_unknown_key_rejected():
    sel = ColumnSelector(["a"])
    with pytest.raises(UnknownColumnError):
        sel.toggle("zzz", True)
    assert sel.selected == ["a"]


def test_empty_dataset_operations_are_noops():
    sel = ColumnSelector([])
    sel.deselect_all_but_first()
    sel.select_all()
    assert sel.selected == []


def test_select_only():
    sel = ColumnSelector(["a", "b", "c"])
    sel.select_only(["c", "b"])
    assert sel.selected == ["b", "c"]
    sel.select_only(["a"])
    assert sel.selected == ["a"]


def test_select_only_rejects_unknown_and_empty():
    sel = ColumnSelector(["a", "b"])
    with pytest.raises(UnknownColumnError):
        sel.select_only(["a", "nope"])
    with pytest.raises(SelectionViolation):
        sel.select_only([])
    assert sel.selected == ["a", "b"]


def test_exclude():
    sel = ColumnSelector(["a", "b", "c"])
    sel.exclude(["a", "c"])
    assert sel.selected == ["b"]


def test_exclude_everything_is_rejected_without_change():
    sel = ColumnSelector(["a", "b"])
    with pytest.raises(SelectionViolation):
        sel.exclude(["a", "b"])
    assert sel.selected == ["a", "b"]
