"""Fonts and palette resolved once at start-up and injected into the renderer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..report_theme import (
    BREAKDOWN_COLORS,
    CHART_SERIES_COLOR,
    CHART_STATUS_COLORS,
    DEFAULT_TEXT_COLOR,
    GENERAL_STATUS_COLORS,
    PASS_RATE_BANDS,
    REPORT_COLORS,
    TEST_STATUS_COLORS,
)

LOGGER = logging.getLogger(__name__)

FALLBACK_FONT = "Helvetica"
FALLBACK_FONT_BOLD = "Helvetica-Bold"


@dataclass(frozen=True, slots=True)
class ReportTheme:
    font: str = FALLBACK_FONT
    font_bold: str = FALLBACK_FONT_BOLD
    colors: dict[str, str] = field(default_factory=lambda: dict(REPORT_COLORS))
    general_status_colors: dict[str, str] = field(
        default_factory=lambda: dict(GENERAL_STATUS_COLORS)
    )
    test_status_colors: dict[str, str] = field(default_factory=lambda: dict(TEST_STATUS_COLORS))
    breakdown_colors: dict[str, str] = field(default_factory=lambda: dict(BREAKDOWN_COLORS))
    chart_status_colors: dict[str, str] = field(
        default_factory=lambda: dict(CHART_STATUS_COLORS)
    )
    chart_series_color: str = CHART_SERIES_COLOR
    pass_rate_bands: tuple[tuple[float, str], ...] = PASS_RATE_BANDS
    default_text_color: str = DEFAULT_TEXT_COLOR

    def color(self, key: str) -> str:
        return self.colors.get(key, self.default_text_color)


def register_font(path: Path | None, name: str, fallback: str) -> str:
    """Register a TTF font under *name*; return the font name to draw with.

    A missing or unreadable font file degrades to the built-in *fallback*
    font instead of failing every report.
    """
    if path is None:
        return fallback
    if not path.is_file():
        LOGGER.warning("Font file %s not found; using %s", path, fallback)
        return fallback
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFError, TTFont

    try:
        pdfmetrics.registerFont(TTFont(name, str(path)))
    except (TTFError, OSError):
        LOGGER.warning("Could not load font %s; using %s", path, fallback, exc_info=True)
        return fallback
    return name


def load_theme(
    primary_font_path: Path | None = None,
    secondary_font_path: Path | None = None,
) -> ReportTheme:
    """Build the process-wide :class:`ReportTheme`.

    The primary font is used for headings and emphasised values, the
    secondary one for body text.
    """
    return ReportTheme(
        font=register_font(secondary_font_path, "QAReport-Secondary", FALLBACK_FONT),
        font_bold=register_font(primary_font_path, "QAReport-Primary", FALLBACK_FONT_BOLD),
    )
