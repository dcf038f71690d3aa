"""Label, color and number formatting helpers shared by the report pages."""

from __future__ import annotations

from datetime import date

from .theme import ReportTheme


def general_status_label(raw: str | None) -> str:
    """Display form of a general status: every underscore becomes a space."""
    return (raw or "").replace("_", " ")


def general_status_color(label: str, theme: ReportTheme) -> str:
    """Color for an already-transformed general status label (case-sensitive)."""
    return theme.general_status_colors.get(label, theme.default_text_color)


def row_status_color(status: str | None, theme: ReportTheme) -> str:
    """Color for a single row status (case-insensitive)."""
    return theme.test_status_colors.get((status or "").lower(), theme.default_text_color)


def pass_rate_color(rate: float, theme: ReportTheme) -> str:
    for minimum, color in theme.pass_rate_bands:
        if rate >= minimum:
            return color
    return theme.pass_rate_bands[-1][1]


def format_percent(value: float, places: int) -> str:
    return f"{value:.{places}f}"


def format_report_date(day: date) -> str:
    """Long US-style date, e.g. ``October 16, 2026``."""
    return f"{day:%B} {day.day}, {day.year}"


def cell_text(value: object, fallback: str) -> str:
    text = "" if value is None else str(value)
    return text if text else fallback
