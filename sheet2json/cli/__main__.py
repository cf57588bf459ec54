from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from sheet2json.config.loader import ConfigError, ConverterConfig, load_config, load_env_file
from sheet2json.errors import ConversionError
from sheet2json.logging.error_log import ErrorLogBuffer
from sheet2json.logging.init import log_summary, set_debug, setup_logging
from sheet2json.services.orchestrator import convert_all, new_session
from sheet2json.services.summary import render_summary
from sheet2json.services.worker import WorkerBridge

"""CLI entrypoint.

- Load .env and the YAML config, apply CLI overrides
- Convert every FILE (worker process by default), writing <name>.json
- Print one SUMMARY line; exit 0 (all converted) / 2 (some failed) / 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _split_keys(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(k.strip() for k in value.split(",") if k.strip())


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheet2json", description="Spreadsheet (first sheet) -> JSON converter")
    p.add_argument("files", nargs="*", type=Path, help="Spreadsheet files to convert")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: ./sheet2json.yml)")
    p.add_argument("--compact", action="store_true", help="Compact JSON instead of 2-space indent")
    p.add_argument("--hide-nulls", action="store_true", help="Omit null-valued fields")
    p.add_argument("--raw-keys", action="store_true", help="Keep header text verbatim (no camelCase)")
    p.add_argument("--columns", help="Comma separated keys to keep (normalized key names)")
    p.add_argument("--exclude", help="Comma separated keys to drop")
    p.add_argument("--output-dir", help="Directory for the .json files")
    p.add_argument("--stdout", action="store_true", help="Print JSON to stdout (no BOM) instead of writing files")
    p.add_argument("--no-worker", action="store_true", help="Parse in-process instead of a worker process")
    p.add_argument("--inspect", action="store_true", help="Print headers, keys & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _apply_overrides(cfg: ConverterConfig, args: argparse.Namespace) -> ConverterConfig:
    overrides: dict[str, object] = {}
    if args.compact:
        overrides["pretty_print"] = False
    if args.hide_nulls:
        overrides["show_nulls"] = False
    if args.raw_keys:
        overrides["camel_case"] = False
    columns = _split_keys(args.columns)
    if columns:
        overrides["columns"] = columns
    exclude = _split_keys(args.exclude)
    if exclude:
        overrides["exclude_columns"] = exclude
    if args.output_dir:
        overrides["output_directory"] = args.output_dir
    if args.no_worker:
        overrides["use_worker"] = False
    return replace(cfg, **overrides)


def _inspect_data(paths: list[Path], cfg: ConverterConfig) -> int:
    for f in paths:
        print(f"FILE: {f.name}")
        session = new_session(cfg)
        try:
            dataset = session.load(f.read_bytes(), f.name)
        except (ConversionError, OSError) as e:
            print(f"  read_error: {e}")
            continue
        print(f"  keys={dataset.columns}")
        print(f"  records={len(dataset.records)}")
        print("  sample_rows=", dataset.records[:3])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # only None reads sys.argv; an explicit [] from tests must not pick up pytest args
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    # JSON goes to stdout in --stdout mode, so logs move to stderr
    logger = setup_logging(sys.stderr if args.stdout else None)
    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    load_env_file(Path(".env"))
    try:
        cfg = _apply_overrides(load_config(args.config), args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not args.files:
        logger.error("no input files")
        return EXIT_FATAL

    if args.inspect:
        return _inspect_data(args.files, cfg)

    error_log = ErrorLogBuffer(cfg.error_log_directory)
    stdout = sys.stdout if args.stdout else None
    if cfg.use_worker:
        logger.debug(f"worker mode (timeout={cfg.worker_timeout_seconds})")
        with WorkerBridge(timeout=cfg.worker_timeout_seconds) as bridge:
            result = convert_all(args.files, cfg, bridge=bridge, stdout=stdout, error_log=error_log)
    else:
        result = convert_all(args.files, cfg, stdout=stdout, error_log=error_log)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    log_summary(render_summary(result))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
