"""Input, option and output records for one report render."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from reportlab.lib.pagesizes import A4, LETTER, landscape, portrait

from ..analysis.metrics import Row
from .layout import ROW_CAP, SUMMARY_RATIOS

REPORT_TITLE = "Test Summary Report"
REPORT_SUBTITLE = "Quality Assurance - Portfolio Control"

PAGE_SIZES: dict[str, tuple[float, float]] = {"A4": A4, "LETTER": LETTER}


def resolve_page_size(name: str, orientation: str) -> tuple[float, float]:
    size = PAGE_SIZES.get(name.upper())
    if size is None:
        raise ValueError(f"Unsupported page size {name!r}; expected one of {sorted(PAGE_SIZES)}")
    if orientation == "landscape":
        return landscape(size)
    if orientation == "portrait":
        return portrait(size)
    raise ValueError(f"Orientation must be 'landscape' or 'portrait', got {orientation!r}")


@dataclass(frozen=True, slots=True)
class ReportRequest:
    rows: Sequence[Row]
    general_status: str = ""
    notes: str | None = None

    @property
    def notes_text(self) -> str:
        """Trimmed notes; empty when the notes page should be skipped."""
        return (self.notes or "").strip()


@dataclass(frozen=True, slots=True)
class ReportOptions:
    page_size: tuple[float, float] = field(default_factory=lambda: landscape(A4))
    margin: float = 40
    summary_ratios: tuple[float, float, float] = SUMMARY_RATIOS
    row_cap: int = ROW_CAP
    include_tester_chart: bool = True
    logo_path: Path | None = None
    title: str = REPORT_TITLE
    subtitle: str = REPORT_SUBTITLE
    report_date: date | None = None


@dataclass(frozen=True, slots=True)
class ReportArtifact:
    path: Path
    size_bytes: int
    page_count: int
