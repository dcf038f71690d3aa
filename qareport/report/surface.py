"""Drawing surface used by the report renderer.

``DrawingSurface`` is the stateful drawing context the page code talks to:
rectangles, lines, text, vector images and page breaks, plus a vertical
cursor.  Coordinates are top-left based; :class:`ReportLabSurface` flips
them onto a reportlab ``Canvas``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO, Protocol

from reportlab.lib import colors
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen.canvas import Canvas

if TYPE_CHECKING:
    from .charts import ChartImage

ASCENT_RATIO = 0.8
LINE_HEIGHT_RATIO = 1.2


class DrawingSurface(Protocol):
    page_width: float
    page_height: float
    y: float

    @property
    def page_number(self) -> int: ...

    def rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        line_width: float = 1,
    ) -> None: ...

    def line(
        self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float = 1
    ) -> None: ...

    def text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        font: str,
        size: float,
        color: str,
        width: float | None = None,
        align: str = "left",
        line_gap: float = 0,
        max_lines: int | None = None,
    ) -> float: ...

    def string_width(self, text: str, font: str, size: float) -> float: ...

    def wrap_lines(self, text: str, font: str, size: float, width: float) -> list[str]: ...

    def image(self, chart: ChartImage, x: float, y: float, w: float, h: float) -> None: ...

    def image_file(self, path: str, x: float, y: float, *, width: float) -> None: ...

    def new_page(self) -> None: ...

    def finish(self) -> None: ...


def _hex(value: str) -> colors.Color:
    return colors.HexColor(value)


class ReportLabSurface:
    """:class:`DrawingSurface` backed by a reportlab ``Canvas``."""

    def __init__(
        self,
        output: BinaryIO,
        *,
        page_size: tuple[float, float],
        title: str = "",
        author: str = "",
    ) -> None:
        self.page_width, self.page_height = page_size
        self._canvas = Canvas(output, pagesize=page_size, pageCompression=0)
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)
        self.y = 0.0
        self._pages_finished = 0

    @property
    def page_number(self) -> int:
        return self._canvas.getPageNumber()

    @property
    def page_count(self) -> int:
        return self._pages_finished

    def _flip(self, y: float, h: float = 0) -> float:
        return self.page_height - y - h

    def rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        line_width: float = 1,
    ) -> None:
        c = self._canvas
        c.saveState()
        if fill is not None:
            c.setFillColor(_hex(fill))
        if stroke is not None:
            c.setStrokeColor(_hex(stroke))
            c.setLineWidth(line_width)
        c.rect(
            x,
            self._flip(y, h),
            w,
            h,
            stroke=1 if stroke is not None else 0,
            fill=1 if fill is not None else 0,
        )
        c.restoreState()

    def line(
        self, x1: float, y1: float, x2: float, y2: float, *, color: str, width: float = 1
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(_hex(color))
        c.setLineWidth(width)
        c.line(x1, self._flip(y1), x2, self._flip(y2))
        c.restoreState()

    def string_width(self, text: str, font: str, size: float) -> float:
        return self._canvas.stringWidth(text, font, size)

    def wrap_lines(self, text: str, font: str, size: float, width: float) -> list[str]:
        lines: list[str] = []
        for paragraph in text.split("\n"):
            lines.extend(simpleSplit(paragraph, font, size, width) or [""])
        return lines

    def text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        font: str,
        size: float,
        color: str,
        width: float | None = None,
        align: str = "left",
        line_gap: float = 0,
        max_lines: int | None = None,
    ) -> float:
        """Draw *text* with its top edge at *y*; returns the y below the last line.

        With *width* the text wraps; *max_lines* keeps only the leading lines.
        """
        if width is not None:
            lines = self.wrap_lines(text, font, size, width)
        else:
            lines = text.split("\n")
        if max_lines is not None:
            lines = lines[:max_lines]
        leading = size * LINE_HEIGHT_RATIO + line_gap
        c = self._canvas
        c.saveState()
        c.setFillColor(_hex(color))
        c.setFont(font, size)
        cursor = y
        for line in lines:
            baseline = self._flip(cursor + size * ASCENT_RATIO)
            if align == "center" and width is not None:
                c.drawCentredString(x + width / 2, baseline, line)
            elif align == "right" and width is not None:
                c.drawRightString(x + width, baseline, line)
            else:
                c.drawString(x, baseline, line)
            cursor += leading
        c.restoreState()
        return cursor

    def image(self, chart: ChartImage, x: float, y: float, w: float, h: float) -> None:
        drawing = chart.drawing
        c = self._canvas
        c.saveState()
        c.translate(x, self._flip(y, h))
        c.scale(w / chart.width, h / chart.height)
        drawing.drawOn(c, 0, 0)
        c.restoreState()

    def image_file(self, path: str, x: float, y: float, *, width: float) -> None:
        from reportlab.lib.utils import ImageReader

        reader = ImageReader(path)
        img_w, img_h = reader.getSize()
        height = width * img_h / img_w if img_w else width
        self._canvas.drawImage(
            reader, x, self._flip(y, height), width=width, height=height, mask="auto"
        )

    def new_page(self) -> None:
        self._canvas.showPage()
        self._pages_finished += 1
        self.y = 0.0

    def finish(self) -> None:
        """Close the current page and write the document to the output stream."""
        self._canvas.showPage()
        self._pages_finished += 1
        self._canvas.save()


def draw_label_value(
    surface: DrawingSurface,
    x: float,
    y: float,
    label: str,
    value: str,
    *,
    label_font: str,
    value_font: str,
    size: float,
    label_color: str,
    value_color: str,
) -> float:
    """Draw ``label`` followed inline by ``value``; returns the y below the line."""
    surface.text(x, y, label, font=label_font, size=size, color=label_color)
    offset = surface.string_width(label, label_font, size)
    return surface.text(x + offset, y, value, font=value_font, size=size, color=value_color)
