"""Page geometry and table pagination for the QA report.

Pure-maths utilities that keep the drawing code in ``pdf_builder.py``
focused on content rather than layout arithmetic.  All coordinates are in
PDF points measured from the *top-left* corner of the page; the drawing
surface flips them for reportlab.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from .errors import DegenerateLayoutError

T = TypeVar("T")

SUMMARY_RATIOS: tuple[float, float, float] = (0.25, 0.50, 0.25)
"""Left / middle / right summary panel shares of the available width."""

SUMMARY_GUTTER = 15
SUMMARY_PANEL_HEIGHT = 400
CHART_INSET = 20

TABLE_COLUMNS: tuple[tuple[str, float], ...] = (
    ("test", 0.45),
    ("status", 0.15),
    ("ticket", 0.18),
    ("bugs", 0.22),
)
TABLE_ROW_HEIGHT = 35
TABLE_HEADER_HEIGHT = 35

ROW_CAP = 50
"""Hard limit on table rows rendered, regardless of input size."""

AVG_CHAR_WIDTH = 6
ELLIPSIS = "..."


@dataclass(frozen=True, slots=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def inset(self, pad: float) -> Box:
        return Box(self.x + pad, self.y + pad, self.width - 2 * pad, self.height - 2 * pad)


@dataclass(frozen=True, slots=True)
class SummaryLayout:
    left: Box
    middle: Box
    right: Box
    chart_box: Box

    @property
    def bottom(self) -> float:
        return max(self.left.bottom, self.middle.bottom, self.right.bottom)


@dataclass(frozen=True, slots=True)
class TableLayout:
    x: float
    column_widths: dict[str, int]
    row_height: int = TABLE_ROW_HEIGHT
    header_height: int = TABLE_HEADER_HEIGHT

    @property
    def total_width(self) -> int:
        return sum(self.column_widths.values())

    @property
    def column_x(self) -> dict[str, float]:
        """Left edge of every column, keyed like ``column_widths``."""
        offsets: dict[str, float] = {}
        cursor = self.x
        for name, width in self.column_widths.items():
            offsets[name] = cursor
            cursor += width
        return offsets

    @property
    def boundaries(self) -> list[float]:
        """x positions of every vertical cell border, outer edges included."""
        return [*self.column_x.values(), self.x + self.total_width]


def available_width(page_width: float, margin: float) -> float:
    return page_width - 2 * margin


def compute_summary_layout(
    page_width: float,
    margin: float,
    *,
    top: float,
    ratios: Sequence[float] = SUMMARY_RATIOS,
    gutter: float = SUMMARY_GUTTER,
    height: float = SUMMARY_PANEL_HEIGHT,
) -> SummaryLayout:
    """Split the summary band into three fixed-ratio panels starting at *top*.

    Panel widths are floored shares of the width left between the margins
    once the two *gutter* gaps are taken out, so the right panel ends
    inside the right margin.  Panel height does not depend on content.
    """
    if len(ratios) != 3:
        raise ValueError(f"Summary layout needs three column ratios, got {len(ratios)}")
    avail = available_width(page_width, margin) - 2 * gutter
    left_w, mid_w, right_w = (math.floor(avail * ratio) for ratio in ratios)
    left = Box(margin, top, left_w, height)
    middle = Box(left.right + gutter, top, mid_w, height)
    right = Box(middle.right + gutter, top, right_w, height)
    return SummaryLayout(
        left=left,
        middle=middle,
        right=right,
        chart_box=middle.inset(CHART_INSET),
    )


def compute_table_layout(page_width: float, margin: float) -> TableLayout:
    avail = available_width(page_width, margin)
    widths = {name: math.floor(avail * ratio) for name, ratio in TABLE_COLUMNS}
    return TableLayout(x=margin, column_widths=widths)


def max_rows_per_page(available_height: float, row_height: float = TABLE_ROW_HEIGHT) -> int:
    if row_height <= 0:
        raise DegenerateLayoutError(f"Row height must be positive, got {row_height!r}")
    return max(0, math.floor(available_height / row_height))


def paginate_rows(
    rows: Sequence[T],
    max_rows_per_page: int,
    cap_at: int = ROW_CAP,
) -> list[list[T]]:
    """Cap *rows* at *cap_at* and chunk them into pages, preserving order.

    Rows past the cap are dropped silently.  An empty input yields a single
    empty page so the table header is still drawn.
    """
    if max_rows_per_page <= 0:
        raise DegenerateLayoutError(
            f"No table row fits on the page (max_rows_per_page={max_rows_per_page})"
        )
    capped = list(rows[: max(0, cap_at)])
    if not capped:
        return [[]]
    return [
        capped[start : start + max_rows_per_page]
        for start in range(0, len(capped), max_rows_per_page)
    ]


def max_chars_for_width(column_width: float, char_width: float = AVG_CHAR_WIDTH) -> int:
    return math.floor(column_width / char_width)


def truncate_cell(text: str, column_width: float, char_width: float = AVG_CHAR_WIDTH) -> str:
    """Shorten *text* to what roughly fits in *column_width*.

    Over-long text keeps its first ``limit - 3`` characters followed by
    ``...`` so the result is exactly ``limit`` characters long.  Columns too
    narrow to hold the ellipsis get a plain cut.
    """
    limit = max_chars_for_width(column_width, char_width)
    if len(text) <= limit:
        return text
    if limit <= len(ELLIPSIS):
        return text[: max(0, limit)]
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def fit_rect_preserve_aspect(
    src_w: float,
    src_h: float,
    box_x: float,
    box_y: float,
    box_w: float,
    box_h: float,
) -> tuple[float, float, float, float]:
    """Return (x, y, w, h) centred inside box while preserving src aspect."""
    if src_w <= 0 or src_h <= 0:
        return box_x, box_y, box_w, box_h
    src_ratio = src_w / src_h
    box_ratio = box_w / box_h if box_h else src_ratio
    if box_ratio > src_ratio:
        h = box_h
        w = h * src_ratio
        x = box_x + (box_w - w) / 2
        y = box_y
    else:
        w = box_w
        h = w / src_ratio
        x = box_x
        y = box_y + (box_h - h) / 2
    return x, y, w, h
