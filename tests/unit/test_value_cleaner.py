from __future__ import annotations

import math

import pytest

from sheet2json.excel.cleaning import clean_value


@pytest.mark.parametrize("raw", [None, float("nan"), "", "   ", "\t\n", " ", "€€€"])
def test_null_collapse(raw):
    assert clean_value(raw) is None


@pytest.mark.parametrize("raw", [0, 42, -3.25, True, False])
def test_non_strings_pass_through(raw):
    out = clean_value(raw)
    assert out == raw
    assert type(out) is type(raw)


def test_zero_is_not_null():
    assert clean_value(0) == 0
    assert clean_value(0.0) == 0.0
    assert clean_value(False) is False


def test_trims_whitespace():
    assert clean_value("  hello world \n") == "hello world"


def test_allow_list_symbols_are_preserved():
    assert clean_value("Product® Name™ © ±5µ") == "Product® Name™ © ±5µ"


def test_other_non_ascii_is_stripped():
    assert clean_value("Café naïve – 東京 ok") == "Caf nave   ok"


def test_nfkc_normalizes_compatibility_forms():
    assert clean_value("ＡＢＣ１２３") == "ABC123"
    assert clean_value("ﬁle") == "file"
    assert clean_value("x²") == "x2"


def test_repairs_mis_decoded_registered_and_trademark():
    assert clean_value("ACMEÂ® Widgetâ\u0084¢") == "ACME® Widget™"


@pytest.mark.parametrize(
    "raw",
    [
        "plain",
        "  padded  ",
        "Product® Name™ © ±5µ",
        "ACMEÂ® Widgetâ\u0084¢",
        "Café ＡＢＣ",
        "µ±©",
        "a b",
    ],
)
def test_cleaning_is_idempotent(raw):
    once = clean_value(raw)
    assert clean_value(once) == once


def test_nan_check_does_not_touch_infinity():
    assert math.isinf(clean_value(float("inf")))
