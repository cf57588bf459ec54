from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

"""Run result models: per-file statistics and the aggregated result used for the
SUMMARY line and the exit code.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file conversion statistics."""
    file_name: str
    status: str  # success/failed
    records: int  # records written (0 on failure)
    columns: int  # selected columns
    elapsed_seconds: float
    output: str | None = None  # written path, "-" for stdout
    error: str | None = None


@dataclass(frozen=True)
class ConversionResult:
    """Aggregated results of one run."""
    success_files: int
    failed_files: int
    total_records: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
