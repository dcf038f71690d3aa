from __future__ import annotations

import pytest
from reportlab.graphics.charts.piecharts import Pie
from reportlab.graphics.shapes import String

from qareport.report.charts import (
    CHART_HEIGHT,
    CHART_WIDTH,
    PieChartRenderer,
    ProportionalBarRenderer,
    build_chart_renderer,
    percentage_labels,
)
from qareport.report.errors import ReportRenderError


def _strings(drawing) -> list[str]:
    return [item.text for item in drawing.contents if isinstance(item, String)]


def test_percentage_labels_two_decimals() -> None:
    labels = percentage_labels({"Passed": 2, "Failed": 1, "Untested": 0, "Other": 0})
    assert labels == ["Passed (66.67%)", "Failed (33.33%)", "Untested (0.00%)", "Other (0.00%)"]


def test_percentage_labels_zero_total() -> None:
    assert percentage_labels({"Passed": 0}) == ["Passed (0.00%)"]


@pytest.mark.asyncio
async def test_pie_chart_has_title_slices_and_legend(theme) -> None:
    counts = {"Passed": 3, "Failed": 1, "Untested": 0, "Other": 0}
    chart = await PieChartRenderer(theme).render(counts, title="Test Status Distribution")
    assert (chart.width, chart.height) == (CHART_WIDTH, CHART_HEIGHT)
    pies = [item for item in chart.drawing.contents if isinstance(item, Pie)]
    assert len(pies) == 1
    assert pies[0].data == [3, 1, 0, 0]
    texts = _strings(chart.drawing)
    assert "Test Status Distribution" in texts
    assert "Passed (75.00%)" in texts
    assert "Failed (25.00%)" in texts


@pytest.mark.asyncio
async def test_pie_chart_without_cases_shows_placeholder(theme) -> None:
    chart = await PieChartRenderer(theme).render(dict.fromkeys(("Passed", "Failed"), 0), title="T")
    assert not any(isinstance(item, Pie) for item in chart.drawing.contents)
    assert "No test cases" in _strings(chart.drawing)


@pytest.mark.asyncio
async def test_bar_chart_labels_counts_with_share(theme) -> None:
    chart = await ProportionalBarRenderer(theme).render({"Alice": 3, "Bob": 1}, title="Tests by Tester")
    texts = _strings(chart.drawing)
    assert "Alice" in texts
    assert "3 (75.00%)" in texts
    assert "1 (25.00%)" in texts


@pytest.mark.asyncio
async def test_chart_failures_surface_as_render_errors(theme) -> None:
    renderer = PieChartRenderer(theme)

    def _boom(counts, title):
        raise RuntimeError("backend crashed")

    renderer._build = _boom
    with pytest.raises(ReportRenderError) as excinfo:
        await renderer.render({"Passed": 1}, title="T")
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_build_chart_renderer_kinds(theme) -> None:
    assert isinstance(build_chart_renderer("pie", theme), PieChartRenderer)
    assert isinstance(build_chart_renderer("bar", theme), ProportionalBarRenderer)
    with pytest.raises(ValueError, match="Unknown chart kind"):
        build_chart_renderer("radar", theme)
