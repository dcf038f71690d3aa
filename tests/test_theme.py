from __future__ import annotations

import logging
from pathlib import Path

import pytest

from qareport.report.theme import FALLBACK_FONT, FALLBACK_FONT_BOLD, ReportTheme, load_theme, register_font


def test_default_theme_uses_builtin_fonts() -> None:
    theme = load_theme()
    assert theme.font == FALLBACK_FONT
    assert theme.font_bold == FALLBACK_FONT_BOLD


def test_missing_font_falls_back_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="qareport.report.theme"):
        theme = load_theme(primary_font_path=tmp_path / "missing-bold.ttf")
    assert theme.font_bold == FALLBACK_FONT_BOLD
    assert "not found" in caplog.text


def test_unreadable_font_falls_back(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.ttf"
    bogus.write_bytes(b"definitely not a font")
    assert register_font(bogus, "QAReport-Bogus", FALLBACK_FONT) == FALLBACK_FONT


def test_theme_color_lookup_defaults_to_text_color() -> None:
    theme = ReportTheme()
    assert theme.color("brand") == "#2d2e80"
    assert theme.color("no-such-key") == theme.default_text_color
