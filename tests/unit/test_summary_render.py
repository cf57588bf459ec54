from __future__ import annotations

from datetime import UTC, datetime
from io import StringIO

import pytest

from sheet2json.logging.init import log_summary, reset_logging, setup_logging
from sheet2json.models.conversion_result import ConversionResult, FileStat
from sheet2json.services.summary import render_summary, render_summary_line

T = datetime(2025, 1, 1, tzinfo=UTC)


def _result(success: int, failed: int, records: int, elapsed: float) -> ConversionResult:
    return ConversionResult(
        success_files=success,
        failed_files=failed,
        total_records=records,
        start_time=T,
        end_time=T,
        elapsed_seconds=elapsed,
    )


def test_render_summary_line_basic():
    assert render_summary_line(_result(2, 1, 30, 1.5)) == (
        "SUMMARY files=3 success=2 failed=1 records=30 elapsed_sec=1.5"
    )


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (0, "0"),
        (2.0, "2"),
        (0.1234, "0.123"),
        (0.0005, "0.0005"),
    ],
)
def test_elapsed_formatting(elapsed, expected):
    assert render_summary_line(_result(1, 0, 1, elapsed)).endswith(f"elapsed_sec={expected}")


def test_total_files_counts_both_outcomes():
    stats = [
        FileStat("a.xlsx", "success", 3, 2, 0.1, output="a.json"),
        FileStat("b.xlsx", "failed", 0, 0, 0.1, error="bad"),
    ]
    result = ConversionResult(1, 1, 3, T, T, 0.2, file_stats=stats)
    assert result.total_files == 2


def test_render_summary_is_line_without_label():
    result = _result(1, 0, 4, 0.25)
    assert render_summary(result) == "files=1 success=1 failed=0 records=4 elapsed_sec=0.25"
    assert render_summary_line(result) == f"SUMMARY {render_summary(result)}"


def test_log_summary_prints_rendered_summary_once():
    out = StringIO()
    reset_logging()
    try:
        setup_logging(out)
        log_summary(render_summary(_result(2, 1, 30, 1.5)))
    finally:
        reset_logging()
    assert out.getvalue() == "SUMMARY files=3 success=2 failed=1 records=30 elapsed_sec=1.5\n"
