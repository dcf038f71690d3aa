from __future__ import annotations

from pathlib import Path

import pytest
from builders import make_row, rows_to_csv

from qareport.csv_rows import parse_csv_bytes, parse_csv_text, read_csv_rows
from qareport.report.errors import ReportInputError


def test_rows_keyed_by_header() -> None:
    rows = parse_csv_text(rows_to_csv([make_row("Failed", test="Checkout, guest", bugs="BUG-1")]))
    assert rows == [make_row("Failed", test="Checkout, guest", bugs="BUG-1")]


def test_utf8_bom_is_stripped() -> None:
    data = "\ufeffStatus,Created by\nPassed,Zoë\n".encode()
    assert parse_csv_bytes(data) == [{"Status": "Passed", "Created by": "Zoë"}]


def test_short_records_fill_missing_fields() -> None:
    rows = parse_csv_text("Test,Status,bugs\nOnly a name\n")
    assert rows == [{"Test": "Only a name", "Status": "", "bugs": ""}]


def test_extra_fields_without_header_are_dropped() -> None:
    rows = parse_csv_text("Test,Status\nA,Passed,surplus\n")
    assert rows == [{"Test": "A", "Status": "Passed"}]


def test_header_only_file_has_no_rows() -> None:
    assert parse_csv_text("Test,Status\n") == []


def test_invalid_utf8_is_input_error() -> None:
    with pytest.raises(ReportInputError, match="UTF-8"):
        parse_csv_bytes(b"Status\n\xff\xfe\xfa\n")


def test_read_csv_rows_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "export.csv"
    path.write_text(rows_to_csv([make_row(), make_row("Untested")]), encoding="utf-8")
    rows = read_csv_rows(path)
    assert [row["Status"] for row in rows] == ["Passed", "Untested"]


def test_read_csv_rows_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ReportInputError):
        read_csv_rows(tmp_path / "nope.csv")
