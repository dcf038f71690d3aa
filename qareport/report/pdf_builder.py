"""PDF report builder – Canvas-based multi-page QA summary layout.

Page 1: header banner and three summary panels (general status and
        overview, status distribution chart, per-status breakdown).
Page 2: tests-by-tester chart (optional).
Page 3+: detailed test-case table, paginated and capped.
Last:   free-text notes, only when notes were supplied.

Geometry comes from ``layout.py``; drawing goes through the
``DrawingSurface`` protocol so the page code never touches reportlab
directly.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from .. import __version__
from ..analysis import STATUS_BUCKETS, Metrics, aggregate, pass_rate, percentage
from ..analysis.metrics import (
    BUGS_FIELD,
    STATUS_FIELD,
    TEST_FIELD,
    TICKET_FIELD,
    Row,
)
from .charts import ChartRenderer, PieChartRenderer, ProportionalBarRenderer
from .errors import ReportError, ReportRenderError
from .helpers import (
    cell_text,
    format_percent,
    format_report_date,
    general_status_color,
    general_status_label,
    pass_rate_color,
    row_status_color,
)
from .layout import (
    Box,
    SummaryLayout,
    TableLayout,
    available_width,
    compute_summary_layout,
    compute_table_layout,
    fit_rect_preserve_aspect,
    max_rows_per_page,
    paginate_rows,
    truncate_cell,
)
from .pdf_document import open_report_output
from .report_data import ReportArtifact, ReportOptions, ReportRequest
from .surface import DrawingSurface, ReportLabSurface, draw_label_value
from .theme import ReportTheme

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Style tokens
# ---------------------------------------------------------------------------

FS_TITLE = 18
FS_SUBTITLE = 20
FS_SECTION = 14
FS_BODY = 12
FS_SMALL = 11
FS_CELL = 10
FS_FOOTER = 8

HEADER_TITLE_Y = 50
HEADER_DATE_Y = 75
HEADER_RULE_Y = 110
HEADER_BOTTOM_Y = 130
LOGO_Y = 40
LOGO_WIDTH = 120

SUMMARY_BOTTOM_GAP = 30
STATUS_BOX_HEIGHT = 70
TESTERS_BOTTOM_RESERVE = 80
BREAKDOWN_ROW_STEP = 35

CELL_PAD_X = 8
CELL_PAD_Y = 10
NOTES_BOX_HEIGHT = 400
NOTES_INSET = 20
NOTES_LINE_GAP = 3
FOOTER_OFFSET = 20

STATUS_CHART_TITLE = "Test Status Distribution"
TESTER_CHART_TITLE = "Tests by Tester"
TABLE_HEADERS: tuple[tuple[str, str], ...] = (
    ("test", "Test Case"),
    ("status", "Status"),
    ("ticket", "Ticket"),
    ("bugs", "Bugs"),
)


def _line_height(size: float) -> float:
    return size * 1.2


class ReportRenderer:
    """Render one :class:`ReportRequest` into a paginated PDF.

    A renderer holds no per-request state, so one instance can serve
    concurrent renders.
    """

    def __init__(
        self,
        theme: ReportTheme,
        options: ReportOptions | None = None,
        *,
        status_chart: ChartRenderer | None = None,
        tester_chart: ChartRenderer | None = None,
    ) -> None:
        self.theme = theme
        self.options = options or ReportOptions()
        self.status_chart = status_chart or PieChartRenderer(theme)
        self.tester_chart = tester_chart or ProportionalBarRenderer(theme)

    # -- public entry points --------------------------------------------------

    async def render(self, request: ReportRequest, output_path: Path) -> ReportArtifact:
        """Write the report for *request* to *output_path*.

        Returns once the PDF stream is complete and closed.  Any failure
        leaves no file behind.
        """
        metrics = aggregate(request.rows)
        LOGGER.info(
            "Rendering report: %d cases, %d bugs, status=%r",
            metrics.total_cases,
            metrics.bug_count,
            request.general_status,
        )
        try:
            with open_report_output(output_path) as stream:
                surface = ReportLabSurface(
                    stream,
                    page_size=self.options.page_size,
                    title=self.options.title,
                    author=f"qareport {__version__}",
                )
                await self.draw(surface, request, metrics)
                surface.finish()
        except ReportError:
            LOGGER.error("PDF generation failed.", exc_info=True)
            raise
        except Exception as exc:
            LOGGER.error("PDF generation failed.", exc_info=True)
            raise ReportRenderError("PDF generation failed") from exc

        try:
            size = output_path.stat().st_size
        except OSError as exc:
            raise ReportRenderError(f"Report {output_path} vanished after rendering") from exc
        return ReportArtifact(path=output_path, size_bytes=size, page_count=surface.page_count)

    async def draw(self, surface: DrawingSurface, request: ReportRequest, metrics: Metrics) -> None:
        """Draw every page onto *surface*; the caller finishes the document."""
        self._draw_header(surface)
        self._draw_subtitle(surface)
        await self._draw_summary(surface, metrics, request.general_status)

        if self.options.include_tester_chart and metrics.tests_by_tester:
            self._break_page(surface)
            await self._draw_tester_chart(surface, metrics)

        self._break_page(surface)
        self._draw_table(surface, request.rows)

        notes = request.notes_text
        if notes:
            self._break_page(surface)
            self._draw_notes(surface, notes)

        self._draw_footer(surface)

    # -- page plumbing --------------------------------------------------------

    def _break_page(self, surface: DrawingSurface) -> None:
        self._draw_footer(surface)
        surface.new_page()
        surface.y = self.options.margin

    def _draw_footer(self, surface: DrawingSurface) -> None:
        m = self.options.margin
        y = surface.page_height - FOOTER_OFFSET
        width = surface.page_width - 2 * m
        muted = self.theme.color("text_muted")
        surface.text(m, y, self.options.title, font=self.theme.font, size=FS_FOOTER, color=muted)
        surface.text(
            m,
            y,
            f"Page {surface.page_number}",
            font=self.theme.font,
            size=FS_FOOTER,
            color=muted,
            width=width,
            align="right",
        )

    def _draw_page_title(self, surface: DrawingSurface, title: str) -> None:
        surface.y = surface.text(
            0,
            surface.y,
            title,
            font=self.theme.font_bold,
            size=FS_TITLE,
            color=self.theme.color("brand"),
            width=surface.page_width,
            align="center",
        )
        surface.y += FS_TITLE * 0.5

    # -- page 1: header + summary ---------------------------------------------

    def _draw_header(self, surface: DrawingSurface) -> None:
        theme = self.theme
        m = self.options.margin
        logo = self.options.logo_path
        if logo is not None and logo.is_file():
            try:
                surface.image_file(str(logo), m, LOGO_Y, width=LOGO_WIDTH)
            except OSError:
                LOGGER.warning("Error loading logo %s", logo, exc_info=True)

        surface.text(
            0,
            HEADER_TITLE_Y,
            self.options.title,
            font=theme.font_bold,
            size=FS_TITLE,
            color=theme.color("brand"),
            width=surface.page_width,
            align="center",
        )
        report_day = self.options.report_date or date.today()
        surface.text(
            0,
            HEADER_DATE_Y,
            format_report_date(report_day),
            font=theme.font,
            size=FS_BODY,
            color=theme.color("text_muted"),
            width=surface.page_width,
            align="center",
        )
        surface.line(
            m,
            HEADER_RULE_Y,
            surface.page_width - m,
            HEADER_RULE_Y,
            color=theme.color("border"),
            width=2,
        )
        surface.y = HEADER_BOTTOM_Y

    def _draw_subtitle(self, surface: DrawingSurface) -> None:
        surface.y = surface.text(
            0,
            surface.y,
            self.options.subtitle,
            font=self.theme.font_bold,
            size=FS_SUBTITLE,
            color=self.theme.color("brand"),
            width=surface.page_width,
            align="center",
        )
        surface.y += FS_SUBTITLE * 0.5

    async def _draw_summary(
        self, surface: DrawingSurface, metrics: Metrics, general_status: str
    ) -> None:
        layout = compute_summary_layout(
            surface.page_width,
            self.options.margin,
            top=surface.y,
            ratios=self.options.summary_ratios,
        )
        self._draw_status_panel(surface, layout.left, metrics, general_status)
        await self._draw_chart_panel(surface, layout, metrics)
        self._draw_breakdown_panel(surface, layout.right, metrics)
        surface.y = layout.bottom + SUMMARY_BOTTOM_GAP

    def _draw_status_panel(
        self, surface: DrawingSurface, box: Box, metrics: Metrics, general_status: str
    ) -> None:
        theme = self.theme
        secondary = theme.color("text_secondary")
        brand = theme.color("brand")
        surface.rect(
            box.x, box.y, box.width, box.height, fill=theme.color("surface"), stroke=theme.color("border")
        )

        label = general_status_label(general_status)
        status_color = general_status_color(label, theme)
        surface.rect(
            box.x + 15,
            box.y + 20,
            box.width - 30,
            STATUS_BOX_HEIGHT,
            fill=theme.color("panel"),
            stroke=status_color,
            line_width=3,
        )
        surface.text(
            box.x + 25, box.y + 35, "General Status:", font=theme.font_bold, size=FS_BODY, color=secondary
        )
        surface.text(
            box.x + 25,
            box.y + 55,
            label,
            font=theme.font,
            size=FS_BODY,
            color=status_color,
            width=box.width - 50,
        )

        x = box.x + 20
        y = box.y + 110
        surface.text(x, y, "Overview", font=theme.font_bold, size=FS_SECTION, color=brand)

        rate = pass_rate(metrics)
        kv = {"label_font": theme.font, "value_font": theme.font_bold, "size": FS_BODY}
        y += 30
        draw_label_value(
            surface,
            x,
            y,
            "Pass Rate: ",
            f"{format_percent(rate, 1)}%",
            label_color=secondary,
            value_color=pass_rate_color(rate, theme),
            **kv,
        )
        y += 25
        draw_label_value(
            surface,
            x,
            y,
            "Total Cases: ",
            str(metrics.total_cases),
            label_color=secondary,
            value_color=brand,
            **kv,
        )
        y += 25
        draw_label_value(
            surface,
            x,
            y,
            "Total Bugs: ",
            str(metrics.bug_count),
            label_color=secondary,
            value_color=theme.color("danger"),
            **kv,
        )

        testers_y = box.bottom - TESTERS_BOTTOM_RESERVE
        surface.text(x, testers_y, "Tester(s):", font=theme.font, size=FS_SMALL, color=secondary)
        if metrics.testers:
            surface.text(
                x,
                testers_y + 15,
                ", ".join(metrics.testers),
                font=theme.font_bold,
                size=FS_CELL,
                color=brand,
                width=box.width - 40,
                line_gap=2,
            )

    async def _draw_chart_panel(
        self, surface: DrawingSurface, layout: SummaryLayout, metrics: Metrics
    ) -> None:
        box = layout.middle
        surface.rect(
            box.x,
            box.y,
            box.width,
            box.height,
            fill=self.theme.color("panel"),
            stroke=self.theme.color("border"),
        )
        chart = await self.status_chart.render(metrics.status_counts, title=STATUS_CHART_TITLE)
        self._place_chart(surface, chart, layout.chart_box)

    def _place_chart(self, surface: DrawingSurface, chart, target: Box) -> None:
        x, y, w, h = fit_rect_preserve_aspect(
            chart.width, chart.height, target.x, target.y, target.width, target.height
        )
        surface.image(chart, x, y, w, h)

    def _draw_breakdown_panel(self, surface: DrawingSurface, box: Box, metrics: Metrics) -> None:
        theme = self.theme
        surface.rect(
            box.x, box.y, box.width, box.height, fill=theme.color("surface"), stroke=theme.color("border")
        )
        surface.text(
            box.x + 20,
            box.y + 20,
            "Test Breakdown",
            font=theme.font_bold,
            size=FS_SECTION,
            color=theme.color("brand"),
        )
        top = box.y + 50
        for idx, name in enumerate(STATUS_BUCKETS):
            y = top + idx * BREAKDOWN_ROW_STEP
            count = metrics.status_counts.get(name, 0)
            share = percentage(count, metrics.total_cases, 1)
            surface.text(
                box.x + 40,
                y + 2,
                f"{name}:",
                font=theme.font,
                size=FS_BODY,
                color=theme.color("text_secondary"),
            )
            surface.text(
                box.x + 40,
                y + 16,
                f"{count} ({format_percent(share, 1)}%)",
                font=theme.font_bold,
                size=FS_BODY,
                color=theme.breakdown_colors.get(name, theme.default_text_color),
            )

    # -- tester chart page ----------------------------------------------------

    async def _draw_tester_chart(self, surface: DrawingSurface, metrics: Metrics) -> None:
        m = self.options.margin
        self._draw_page_title(surface, TESTER_CHART_TITLE)
        chart = await self.tester_chart.render(metrics.tests_by_tester, title=TESTER_CHART_TITLE)
        target = Box(
            m,
            surface.y,
            available_width(surface.page_width, m),
            surface.page_height - surface.y - m,
        )
        self._place_chart(surface, chart, target)
        surface.y = target.bottom

    # -- detailed table pages -------------------------------------------------

    def _draw_table(self, surface: DrawingSurface, rows: list[Row] | tuple[Row, ...]) -> None:
        self._draw_page_title(surface, "Detailed Test Cases")
        table = compute_table_layout(surface.page_width, self.options.margin)
        table_top = surface.y
        rows_top = table_top + table.header_height
        per_page = max_rows_per_page(
            surface.page_height - rows_top - self.options.margin, table.row_height
        )
        pages = paginate_rows(rows, per_page, self.options.row_cap)
        LOGGER.debug(
            "Table: %d rows over %d page(s), %d rows per page",
            sum(len(page) for page in pages),
            len(pages),
            per_page,
        )

        for page_idx, page_rows in enumerate(pages):
            if page_idx > 0:
                self._break_page(surface)
            self._draw_table_header(surface, table, table_top)
            y = rows_top
            for row_idx, row in enumerate(page_rows):
                self._draw_table_row(surface, table, y, row, zebra=row_idx % 2 == 0)
                y += table.row_height
            surface.y = y

    def _draw_table_header(self, surface: DrawingSurface, table: TableLayout, top: float) -> None:
        theme = self.theme
        surface.rect(
            table.x, top, table.total_width, table.header_height, fill=theme.color("table_header_bg")
        )
        text_y = top + (table.header_height - FS_BODY) / 2
        column_x = table.column_x
        for key, label in TABLE_HEADERS:
            surface.text(
                column_x[key] + CELL_PAD_X,
                text_y,
                label,
                font=theme.font_bold,
                size=FS_BODY,
                color=theme.color("table_header_text"),
            )
        surface.rect(
            table.x,
            top,
            table.total_width,
            table.header_height,
            stroke=theme.color("border"),
            line_width=1,
        )

    def _draw_table_row(
        self, surface: DrawingSurface, table: TableLayout, y: float, row: Row, *, zebra: bool
    ) -> None:
        theme = self.theme
        fill = theme.color("table_zebra_bg") if zebra else theme.color("panel")
        surface.rect(table.x, y, table.total_width, table.row_height, fill=fill)

        border = theme.color("border")
        for x in table.boundaries:
            surface.line(x, y, x, y + table.row_height, color=border, width=0.5)
        surface.line(
            table.x,
            y + table.row_height,
            table.x + table.total_width,
            y + table.row_height,
            color=border,
            width=0.5,
        )

        widths = table.column_widths
        column_x = table.column_x
        text_y = y + CELL_PAD_Y
        ink = theme.default_text_color

        status = cell_text(row.get(STATUS_FIELD), "N/A")
        cells = (
            ("test", cell_text(row.get(TEST_FIELD), "N/A"), theme.font, ink),
            ("status", status, theme.font_bold, row_status_color(status, theme)),
            ("ticket", cell_text(row.get(TICKET_FIELD), "None"), theme.font, ink),
            ("bugs", cell_text(row.get(BUGS_FIELD), "None"), theme.font, ink),
        )
        # Cells are single-line; anything wider than the column is cut.
        for key, text, font, color in cells:
            surface.text(
                column_x[key] + CELL_PAD_X,
                text_y,
                truncate_cell(text, widths[key]),
                font=font,
                size=FS_CELL,
                color=color,
                width=widths[key] - 2 * CELL_PAD_X,
                max_lines=1,
            )

    # -- notes page -----------------------------------------------------------

    def _draw_notes(self, surface: DrawingSurface, notes: str) -> None:
        """Notes in a bordered box; lines past the box continue on further pages."""
        theme = self.theme
        m = self.options.margin
        width = available_width(surface.page_width, m)
        lines = surface.wrap_lines(notes, theme.font, FS_BODY, width - 2 * NOTES_INSET)

        self._draw_notes_title(surface)
        top = surface.y
        box_h = min(NOTES_BOX_HEIGHT, surface.page_height - m - top)
        per_box = max_rows_per_page(box_h - 2 * NOTES_INSET, _line_height(FS_BODY) + NOTES_LINE_GAP)
        for page_idx, chunk in enumerate(paginate_rows(lines, per_box, cap_at=len(lines))):
            if page_idx:
                self._break_page(surface)
                self._draw_notes_title(surface)
            surface.rect(
                m, top, width, box_h, fill=theme.color("surface"), stroke=theme.color("border")
            )
            surface.y = surface.text(
                m + NOTES_INSET,
                top + NOTES_INSET,
                "\n".join(chunk),
                font=theme.font,
                size=FS_BODY,
                color=theme.color("ink"),
                line_gap=NOTES_LINE_GAP,
            )

    def _draw_notes_title(self, surface: DrawingSurface) -> None:
        self._draw_page_title(surface, "Notes")
        surface.y += _line_height(FS_TITLE) - FS_TITLE * 0.5
