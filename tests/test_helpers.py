from __future__ import annotations

from datetime import date

import pytest

from qareport.report.helpers import (
    cell_text,
    format_report_date,
    general_status_color,
    general_status_label,
    pass_rate_color,
    row_status_color,
)


def test_passed_with_issues_renders_spaced_in_amber(theme) -> None:
    label = general_status_label("PASSED_WITH_ISSUES")
    assert label == "PASSED WITH ISSUES"
    assert general_status_color(label, theme) == "#ff9800"


@pytest.mark.parametrize(
    ("raw", "color"),
    [("PASSED", "#4caf50"), ("FAILED", "#f44336"), ("passed", "#000000"), ("", "#000000")],
)
def test_general_status_color_is_case_sensitive(theme, raw: str, color: str) -> None:
    assert general_status_color(general_status_label(raw), theme) == color


@pytest.mark.parametrize(
    ("status", "color"),
    [
        ("Passed", "#4caf50"),
        ("failed", "#f44336"),
        ("UNTESTED", "#ff9800"),
        ("Blocked", "#000000"),
        (None, "#000000"),
    ],
)
def test_row_status_color_is_case_insensitive(theme, status, color: str) -> None:
    assert row_status_color(status, theme) == color


@pytest.mark.parametrize(
    ("rate", "color"),
    [(100.0, "#28a745"), (80.0, "#28a745"), (79.9, "#ffc107"), (60.0, "#ffc107"), (59.9, "#dc3545"), (0.0, "#dc3545")],
)
def test_pass_rate_banding_is_numeric(theme, rate: float, color: str) -> None:
    assert pass_rate_color(rate, theme) == color


def test_format_report_date_long_form() -> None:
    assert format_report_date(date(2026, 10, 16)) == "October 16, 2026"
    assert format_report_date(date(2024, 1, 5)) == "January 5, 2024"


def test_cell_text_defaults() -> None:
    assert cell_text(None, "N/A") == "N/A"
    assert cell_text("", "None") == "None"
    assert cell_text("BUG-7", "None") == "BUG-7"
