"""Chart capability – turn a category -> count mapping into a vector image.

The renderer only depends on :class:`ChartRenderer`; the reportlab-backed
implementations below build a ``Drawing`` off the event loop.  A pie chart
is the default for the status distribution, the proportional bar chart is
the in-layout fallback and is also used for the tests-by-tester page.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from ..analysis import percentages
from .errors import ReportRenderError
from .theme import ReportTheme

CHART_WIDTH = 800
CHART_HEIGHT = 600
LABEL_PLACES = 2


@dataclass(frozen=True, slots=True)
class ChartImage:
    drawing: Any
    width: float
    height: float


class ChartRenderer(Protocol):
    async def render(self, counts: Mapping[str, int], *, title: str) -> ChartImage: ...


def percentage_labels(counts: Mapping[str, int]) -> list[str]:
    """Legend labels such as ``Passed (66.67%)``."""
    shares = percentages(counts, LABEL_PLACES)
    return [f"{name} ({shares[name]:.{LABEL_PLACES}f}%)" for name in counts]


class _DrawingChartRenderer:
    """Shared async wrapper: builds the drawing in a worker thread."""

    def __init__(self, theme: ReportTheme) -> None:
        self._theme = theme

    async def render(self, counts: Mapping[str, int], *, title: str) -> ChartImage:
        snapshot = dict(counts)
        try:
            return await asyncio.to_thread(self._build, snapshot, title)
        except Exception as exc:
            raise ReportRenderError(f"Chart rendering failed for {title!r}") from exc

    def _build(self, counts: dict[str, int], title: str) -> ChartImage:
        raise NotImplementedError

    def _color_for(self, name: str) -> str:
        return self._theme.chart_status_colors.get(name, self._theme.chart_series_color)


class PieChartRenderer(_DrawingChartRenderer):
    def _build(self, counts: dict[str, int], title: str) -> ChartImage:
        from reportlab.graphics.charts.piecharts import Pie
        from reportlab.graphics.shapes import Drawing, Rect, String
        from reportlab.lib import colors

        theme = self._theme
        drawing = Drawing(CHART_WIDTH, CHART_HEIGHT)
        drawing.add(
            String(
                CHART_WIDTH / 2,
                CHART_HEIGHT - 40,
                title,
                fontName=theme.font_bold,
                fontSize=22,
                textAnchor="middle",
                fillColor=colors.HexColor(theme.color("ink")),
            )
        )

        names = list(counts)
        values = [counts[name] for name in names]
        if sum(values) <= 0:
            drawing.add(
                String(
                    CHART_WIDTH / 2,
                    CHART_HEIGHT / 2,
                    "No test cases",
                    fontName=theme.font,
                    fontSize=18,
                    textAnchor="middle",
                    fillColor=colors.HexColor(theme.color("text_muted")),
                )
            )
            return ChartImage(drawing, CHART_WIDTH, CHART_HEIGHT)

        pie = Pie()
        pie.width = pie.height = 380
        pie.x = (CHART_WIDTH - pie.width) / 2
        pie.y = 140
        pie.data = values
        pie.labels = None
        pie.slices.strokeWidth = 1
        pie.slices.strokeColor = colors.white
        for idx, name in enumerate(names):
            pie.slices[idx].fillColor = colors.HexColor(self._color_for(name))
        drawing.add(pie)

        slot_w = CHART_WIDTH / max(len(names), 1)
        legend_y = 60
        for idx, (name, label) in enumerate(zip(names, percentage_labels(counts), strict=True)):
            x0 = idx * slot_w + 12
            color = colors.HexColor(self._color_for(name))
            drawing.add(Rect(x0, legend_y - 2, 18, 18, fillColor=color, strokeColor=color))
            drawing.add(
                String(
                    x0 + 24,
                    legend_y,
                    label,
                    fontName=theme.font,
                    fontSize=18,
                    fillColor=colors.HexColor(theme.color("text_secondary")),
                )
            )
        return ChartImage(drawing, CHART_WIDTH, CHART_HEIGHT)


class ProportionalBarRenderer(_DrawingChartRenderer):
    """One horizontal bar per category, length proportional to its share."""

    row_height = 48
    label_w = 220
    bar_max_w = 380
    header_h = 80

    def _build(self, counts: dict[str, int], title: str) -> ChartImage:
        from reportlab.graphics.shapes import Drawing, Rect, String
        from reportlab.lib import colors

        theme = self._theme
        height = max(CHART_HEIGHT / 2, self.header_h + self.row_height * max(len(counts), 1) + 20)
        drawing = Drawing(CHART_WIDTH, height)
        drawing.add(
            String(
                CHART_WIDTH / 2,
                height - 40,
                title,
                fontName=theme.font_bold,
                fontSize=22,
                textAnchor="middle",
                fillColor=colors.HexColor(theme.color("ink")),
            )
        )

        total = sum(counts.values())
        shares = percentages(counts, LABEL_PLACES)
        y = height - self.header_h - self.row_height
        for name, count in counts.items():
            drawing.add(
                String(
                    self.label_w - 12,
                    y + 14,
                    name,
                    fontName=theme.font,
                    fontSize=18,
                    textAnchor="end",
                    fillColor=colors.HexColor(theme.color("text_secondary")),
                )
            )
            drawing.add(
                Rect(
                    self.label_w,
                    y + 6,
                    self.bar_max_w,
                    30,
                    fillColor=colors.HexColor(theme.color("surface")),
                    strokeColor=colors.HexColor(theme.color("border")),
                )
            )
            bar_w = self.bar_max_w * (count / total) if total > 0 else 0
            if bar_w > 0:
                color = colors.HexColor(self._color_for(name))
                drawing.add(Rect(self.label_w, y + 6, bar_w, 30, fillColor=color, strokeColor=color))
            drawing.add(
                String(
                    self.label_w + self.bar_max_w + 12,
                    y + 14,
                    f"{count} ({shares[name]:.{LABEL_PLACES}f}%)",
                    fontName=theme.font,
                    fontSize=18,
                    fillColor=colors.HexColor(theme.color("ink")),
                )
            )
            y -= self.row_height
        return ChartImage(drawing, CHART_WIDTH, height)


CHART_KINDS = ("pie", "bar")


def build_chart_renderer(kind: str, theme: ReportTheme) -> ChartRenderer:
    if kind == "pie":
        return PieChartRenderer(theme)
    if kind == "bar":
        return ProportionalBarRenderer(theme)
    raise ValueError(f"Unknown chart kind {kind!r}; expected one of {CHART_KINDS}")
