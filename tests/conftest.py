# Shared pytest fixtures
from __future__ import annotations

import io
from collections.abc import Callable
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any

import pandas as pd
import pytest


def make_excel_bytes(sheets: dict[str, list[list[object]]]) -> bytes:
    """Write rows (header row first) into an in-memory xlsx workbook."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


def make_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    path.write_bytes(make_excel_bytes(sheets))
    return path


class ManualExecutor(Executor):
    """Executor whose jobs run only when the test says so."""

    def __init__(self) -> None:
        self.jobs: list[tuple[Future, Callable[..., Any], tuple[Any, ...]]] = []

    def submit(self, fn, /, *args, **kwargs):  # type: ignore[override]
        future: Future = Future()
        self.jobs.append((future, fn, args))
        return future

    def start(self, index: int) -> bool:
        return self.jobs[index][0].set_running_or_notify_cancel()

    def finish(self, index: int) -> None:
        future, fn, args = self.jobs[index]
        future.set_result(fn(*args))

    def run(self, index: int) -> None:
        if self.start(index):
            self.finish(index)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.delenv("SHEET2JSON_CONFIG", raising=False)
    monkeypatch.delenv("SHEET2JSON_DISABLE_WORKER", raising=False)


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "data").mkdir()
    (tmp_path / "out").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def contacts_rows() -> list[list[object]]:
    return [
        ["First Name", "Customer Email Address", "Score", "Notes"],
        ["Ann", "ann@example.com", 10, "Product® Name™"],
        ["Bob", None, 7.5, None],
        ["  ", "carl@example.com", None, "NA"],
    ]


@pytest.fixture()
def contacts_bytes(contacts_rows) -> bytes:
    return make_excel_bytes({"Contacts": contacts_rows})


@pytest.fixture()
def contacts_file(temp_workdir: Path, contacts_rows) -> Path:
    return make_excel(temp_workdir / "data" / "contacts.xlsx", {"Contacts": contacts_rows})


@pytest.fixture()
def sample_config_yaml() -> str:
    return """pretty_print: false
show_nulls: false
camel_case: true
duplicate_keys: last_wins
output_directory: ./out
use_worker: false
error_log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "sheet2json.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def excel_bytes() -> Callable[[dict[str, list[list[object]]]], bytes]:
    return make_excel_bytes


@pytest.fixture()
def excel_file() -> Callable[[Path, dict[str, list[list[object]]]], Path]:
    return make_excel


@pytest.fixture()
def manual_executor() -> ManualExecutor:
    return ManualExecutor()
