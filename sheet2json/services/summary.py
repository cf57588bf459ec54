from __future__ import annotations

from ..models.conversion_result import ConversionResult

"""SUMMARY line rendering.

Format:
SUMMARY files={total} success={success} failed={failed} records={records} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary(result: ConversionResult) -> str:
    """Summary fields without the level label (log_summary adds "SUMMARY ")."""
    return (
        f"files={result.total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"records={result.total_records} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )


def render_summary_line(result: ConversionResult) -> str:
    """Render the full SUMMARY line of a run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ConversionResult(
        ...     success_files=2, failed_files=1, total_records=30,
        ...     start_time=t, end_time=t, elapsed_seconds=1.5,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=3 success=2 failed=1 records=30 elapsed_sec=1.5'
    """
    return f"SUMMARY {render_summary(result)}"
