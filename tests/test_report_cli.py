"""Tests for the report CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from builders import make_row, rows_to_csv
from conftest import extract_pdf_text

from qareport.report_cli import main


def _argv(tmp_path: Path, *args: str) -> list[str]:
    return ["qareport-report", *args, "--config", str(tmp_path / "absent.yaml")]


def test_main_missing_input_file(tmp_path: Path) -> None:
    """CLI must return 1 when the input file does not exist."""
    with patch("sys.argv", _argv(tmp_path, str(tmp_path / "does_not_exist.csv"))):
        code = main()
    assert code == 1


def test_main_undecodable_csv(tmp_path: Path) -> None:
    bad_file = tmp_path / "bad.csv"
    bad_file.write_bytes(b"Status\n\xff\xfe\n")
    with patch("sys.argv", _argv(tmp_path, str(bad_file))):
        code = main()
    assert code == 1


def test_main_writes_report_and_summary(tmp_path: Path) -> None:
    csv_path = tmp_path / "export.csv"
    csv_path.write_text(
        rows_to_csv([make_row("Passed"), make_row("Failed", bugs="BUG-3", tester="Bob")]),
        encoding="utf-8",
    )
    out_pdf = tmp_path / "out" / "qa.pdf"
    summary_path = tmp_path / "summary.json"
    argv = _argv(
        tmp_path,
        str(csv_path),
        "--status",
        "FAILED",
        "--notes",
        "Blocked by BUG-3",
        "--output",
        str(out_pdf),
        "--summary-json",
        str(summary_path),
    )
    with patch("sys.argv", argv):
        code = main()
    assert code == 0

    text = extract_pdf_text(out_pdf.read_bytes())
    assert "FAILED" in text
    assert "Blocked by BUG-3" in text
    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert summary["totalCases"] == 2
    assert summary["bugCount"] == 1
    assert summary["statusCounts"] == {"Passed": 1, "Failed": 1, "Untested": 0, "Other": 0}


def test_main_default_output_next_to_input(tmp_path: Path) -> None:
    csv_path = tmp_path / "run42.csv"
    csv_path.write_text(rows_to_csv([make_row()]), encoding="utf-8")
    with patch("sys.argv", _argv(tmp_path, str(csv_path))):
        code = main()
    assert code == 0
    assert (tmp_path / "run42_report.pdf").read_bytes().startswith(b"%PDF")
