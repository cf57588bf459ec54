from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load `.env` (python-dotenv) so SHEET2JSON_* variables can live there
- Resolve the config path: explicit argument > SHEET2JSON_CONFIG > ./sheet2json.yml
- Load YAML and validate it against the packaged JSON schema
- Apply defaults for every missing key
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("sheet2json.yml")
CONFIG_ENV_VAR = "SHEET2JSON_CONFIG"
DISABLE_WORKER_ENV_VAR = "SHEET2JSON_DISABLE_WORKER"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ConverterConfig:
    pretty_print: bool = True
    show_nulls: bool = True
    camel_case: bool = True
    duplicate_keys: str = "last_wins"  # last_wins | error
    skip_blank_rows: bool = False
    null_sentinels: tuple[str, ...] = ()
    columns: tuple[str, ...] | None = None  # keep only these (None = all)
    exclude_columns: tuple[str, ...] = ()
    output_directory: str = "."
    use_worker: bool = True
    worker_timeout_seconds: float | None = 60.0
    error_log_directory: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_env_file(path: Path = Path(".env"), override: bool = False) -> bool:
    """Load a .env file if it exists. Returns True when something was loaded."""
    if not path.exists():
        return False
    return load_dotenv(dotenv_path=path, override=override)


def resolve_config_path(path: Path | None = None) -> tuple[Path, bool]:
    """Return (path, explicit). A missing explicit path is an error, a missing default is not."""
    if path is not None:
        return path, True
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    return DEFAULT_CONFIG_PATH, False


def load_config(path: Path | None = None) -> ConverterConfig:
    config_path, explicit = resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {config_path}")
        data: dict[str, Any] = {}
    else:
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config root must be a mapping: {config_path}")

    _validate_config_schema(data)

    defaults = ConverterConfig()
    columns = data.get("columns")
    use_worker = data.get("use_worker", defaults.use_worker)
    if os.getenv(DISABLE_WORKER_ENV_VAR) == "1":
        use_worker = False
    return ConverterConfig(
        pretty_print=data.get("pretty_print", defaults.pretty_print),
        show_nulls=data.get("show_nulls", defaults.show_nulls),
        camel_case=data.get("camel_case", defaults.camel_case),
        duplicate_keys=data.get("duplicate_keys", defaults.duplicate_keys),
        skip_blank_rows=data.get("skip_blank_rows", defaults.skip_blank_rows),
        null_sentinels=tuple(data.get("null_sentinels", ())),
        columns=tuple(columns) if columns is not None else None,
        exclude_columns=tuple(data.get("exclude_columns", ())),
        output_directory=data.get("output_directory", defaults.output_directory),
        use_worker=use_worker,
        worker_timeout_seconds=data.get("worker_timeout_seconds", defaults.worker_timeout_seconds),
        error_log_directory=data.get("error_log_directory", defaults.error_log_directory),
    )
