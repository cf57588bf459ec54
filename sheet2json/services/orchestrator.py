from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import TextIO

from ..config.loader import ConverterConfig
from ..errors import ConversionError, WorkerError
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.conversion_result import ConversionResult, FileStat
from ..models.dataset import DisplayOptions
from .progress import ProgressTracker
from .session import ConverterSession
from .worker import WorkerBridge

"""Run orchestration: convert a list of spreadsheet files to JSON.

1. One ConverterSession per file (the session replaces its dataset on each load)
2. Parse through the worker bridge when given, in-process otherwise
3. Apply the configured column selection
4. Write `<name>.json` (with BOM) or the BOM-less text to stdout
5. A failing file is logged and buffered in the error log; the run continues
"""

logger = logging.getLogger(__name__)


def new_session(config: ConverterConfig) -> ConverterSession:
    return ConverterSession(
        options=DisplayOptions(pretty_print=config.pretty_print, show_nulls=config.show_nulls),
        camel_case=config.camel_case,
        duplicate_keys=config.duplicate_keys,
        null_sentinels=set(config.null_sentinels) or None,
        skip_blank_rows=config.skip_blank_rows,
    )


def _load(session: ConverterSession, data: bytes, filename: str, bridge: WorkerBridge | None) -> None:
    if bridge is None:
        session.load(data, filename)
        return
    request_id = session.request_load(bridge, data, filename)
    response = bridge.wait(request_id)
    if not session.apply_response(response):
        raise WorkerError(f"request {request_id} was superseded")


def convert_file(
    path: Path,
    config: ConverterConfig,
    bridge: WorkerBridge | None = None,
    stdout: TextIO | None = None,
) -> FileStat:
    """Convert a single file.

    Raises:
        ConversionError: parse / worker / selection failures
        OSError: the input cannot be read or the output cannot be written
    """
    started = time.perf_counter()
    data = path.read_bytes()
    session = new_session(config)
    _load(session, data, path.name, bridge)

    if config.columns:
        session.select_only(config.columns)
    if config.exclude_columns:
        session.exclude(config.exclude_columns)

    projection = session.preview()
    if stdout is not None:
        stdout.write(session.clipboard_text() + "\n")
        output = "-"
    else:
        output = str(session.write_export(Path(config.output_directory)))
    elapsed = time.perf_counter() - started
    logger.info(f"{path.name} -> {output} records={len(projection.records)} columns={len(session.selected)}")
    return FileStat(
        file_name=path.name,
        status="success",
        records=len(projection.records),
        columns=len(session.selected),
        elapsed_seconds=elapsed,
        output=output,
    )


def convert_all(
    paths: list[Path],
    config: ConverterConfig,
    bridge: WorkerBridge | None = None,
    stdout: TextIO | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ConversionResult:
    """Convert every file in `paths` and aggregate the results.

    Args:
        paths: Input spreadsheet files
        config: Effective configuration (file + CLI overrides)
        bridge: Worker bridge; None parses synchronously
        stdout: Write JSON text here instead of files
        error_log: Buffer collecting one ErrorRecord per failed file

    Returns:
        ConversionResult with per-file stats
    """
    start_time = datetime.now(UTC)
    started = time.perf_counter()
    file_stats: list[FileStat] = []

    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            file_started = time.perf_counter()
            error_type: str | None = None
            try:
                stat = convert_file(path, config, bridge=bridge, stdout=stdout)
            except ConversionError as e:
                error_type, message = e.error_type, str(e)
            except OSError as e:
                error_type, message = "IO_ERROR", str(e)
            if error_type is not None:
                logger.error(f"{path.name}: {message}")
                if error_log is not None:
                    error_log.append(ErrorRecord.create(path.name, error_type, message))
                stat = FileStat(
                    file_name=path.name,
                    status="failed",
                    records=0,
                    columns=0,
                    elapsed_seconds=time.perf_counter() - file_started,
                    error=message,
                )
            file_stats.append(stat)
            progress.finish_file(success=stat.status == "success")
            progress.set_postfix(
                success=progress.succeeded,
                failed=progress.failed,
                records=sum(s.records for s in file_stats),
            )

    success = [s for s in file_stats if s.status == "success"]
    return ConversionResult(
        success_files=len(success),
        failed_files=len(file_stats) - len(success),
        total_records=sum(s.records for s in success),
        start_time=start_time,
        end_time=datetime.now(UTC),
        elapsed_seconds=time.perf_counter() - started,
        file_stats=file_stats,
    )
