from __future__ import annotations

import json
from pathlib import Path

import pytest

from sheet2json.cli.__main__ import main as cli_main
from sheet2json.logging.init import reset_logging
from sheet2json.services.projection import BOM

"""End-to-end runs through the CLI with a real worker process."""

pytestmark = pytest.mark.slow


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


def test_file_export_equals_stdout_text(contacts_file: Path, temp_workdir: Path, capsys):
    assert cli_main(["--output-dir", "out", str(contacts_file)]) == 0
    capsys.readouterr()
    reset_logging()
    assert cli_main(["--stdout", str(contacts_file)]) == 0
    printed = capsys.readouterr().out

    exported = (temp_workdir / "out" / "contacts.json").read_bytes().decode("utf-8")
    assert exported.startswith(BOM)
    assert exported[len(BOM):] + "\n" == printed
    records = json.loads(printed)
    assert records[0]["notes"] == "Product® Name™"
    assert records[1]["customerEmailAddress"] is None


def test_messy_headers_and_blank_rows(temp_workdir: Path, excel_file, capsys):
    path = excel_file(
        temp_workdir / "data" / "Q3 Report.v2.xlsx",
        {
            "Data": [
                ["  Zip/Postal Code!! ", "Price (USD)", None],
                ["10115", 9.99, "ignored"],
                [None, None, None],
                ["  ", "Ｓｈｉｐｐｅｄ ", None],
            ]
        },
    )
    assert cli_main(["--stdout", "--compact", str(path)]) == 0
    records = json.loads(capsys.readouterr().out)
    # the blank interior row survives as an all-null record
    assert records == [
        {"zipPostalCode": "10115", "priceUsd": 9.99},
        {"zipPostalCode": None, "priceUsd": None},
        {"zipPostalCode": None, "priceUsd": "Shipped"},
    ]


def test_partial_failure_with_worker(contacts_file: Path, temp_workdir: Path, capsys):
    bad = temp_workdir / "data" / "bad.xlsx"
    bad.write_bytes(b"\x00\x01garbage")
    code = cli_main(["--output-dir", "out", str(contacts_file), str(bad)])
    out = capsys.readouterr().out
    assert code == 2
    assert "SUMMARY files=2 success=1 failed=1 records=3" in out
    assert (temp_workdir / "out" / "contacts.json").exists()
    log = next((temp_workdir / "logs").glob("errors-*.log"))
    assert json.loads(log.read_text(encoding="utf-8"))["error_type"] == "WORKER_ERROR"
