"""Row builders and a recording drawing surface shared across tests."""

from __future__ import annotations

import io
import textwrap
from dataclasses import dataclass, field
from typing import Any

from reportlab.lib.pagesizes import A4, landscape

from qareport.analysis.metrics import (
    BUGS_FIELD,
    CREATED_AT_FIELD,
    STATUS_FIELD,
    TESTER_FIELD,
    TEST_FIELD,
    TICKET_FIELD,
)
from qareport.report.surface import ReportLabSurface

CSV_HEADER = (TEST_FIELD, STATUS_FIELD, TICKET_FIELD, BUGS_FIELD, TESTER_FIELD, CREATED_AT_FIELD)


def make_row(
    status: str = "Passed",
    *,
    test: str = "Login works",
    ticket: str = "",
    bugs: str = "",
    tester: str = "Alice",
    created_at: str = "2024-05-01T10:00:00Z",
) -> dict[str, str]:
    return {
        TEST_FIELD: test,
        STATUS_FIELD: status,
        TICKET_FIELD: ticket,
        BUGS_FIELD: bugs,
        TESTER_FIELD: tester,
        CREATED_AT_FIELD: created_at,
    }


def make_rows(n: int, status: str = "Passed", **kwargs: Any) -> list[dict[str, str]]:
    return [make_row(status, test=f"Case {i}", **kwargs) for i in range(n)]


def rows_to_csv(rows: list[dict[str, str]], header: tuple[str, ...] = CSV_HEADER) -> str:
    def quote(value: str) -> str:
        if any(ch in value for ch in ',"\n'):
            return '"' + value.replace('"', '""') + '"'
        return value

    lines = [",".join(quote(h) for h in header)]
    for row in rows:
        lines.append(",".join(quote(row.get(h, "")) for h in header))
    return "\n".join(lines) + "\n"


@dataclass
class DrawOp:
    page: int
    kind: str
    args: tuple
    kwargs: dict[str, Any]


@dataclass
class RecordingSurface:
    """In-memory stand-in for the reportlab surface that records every call."""

    page_width: float = landscape(A4)[0]
    page_height: float = landscape(A4)[1]
    y: float = 0.0
    char_width: float = 6.0
    ops: list[DrawOp] = field(default_factory=list)
    pages_finished: int = 0
    finished: bool = False

    @property
    def page_number(self) -> int:
        return self.pages_finished + 1

    def _record(self, kind: str, *args: Any, **kwargs: Any) -> None:
        self.ops.append(DrawOp(self.page_number, kind, args, kwargs))

    def rect(self, x, y, w, h, *, fill=None, stroke=None, line_width=1) -> None:
        self._record("rect", x, y, w, h, fill=fill, stroke=stroke, line_width=line_width)

    def line(self, x1, y1, x2, y2, *, color, width=1) -> None:
        self._record("line", x1, y1, x2, y2, color=color, width=width)

    def text(
        self, x, y, text, *, font, size, color, width=None, align="left", line_gap=0, max_lines=None
    ) -> float:
        self._record(
            "text",
            x,
            y,
            text,
            font=font,
            size=size,
            color=color,
            width=width,
            align=align,
            max_lines=max_lines,
        )
        lines = text.count("\n") + 1
        if max_lines is not None:
            lines = min(lines, max_lines)
        return y + (size * 1.2 + line_gap) * lines

    def string_width(self, text, font, size) -> float:
        return len(text) * self.char_width

    def wrap_lines(self, text, font, size, width) -> list[str]:
        chars = max(1, int(width // self.char_width))
        lines: list[str] = []
        for paragraph in text.split("\n"):
            lines.extend(textwrap.wrap(paragraph, chars) or [""])
        return lines

    def image(self, chart, x, y, w, h) -> None:
        self._record("image", chart, x, y, w, h)

    def image_file(self, path, x, y, *, width) -> None:
        self._record("image_file", path, x, y, width=width)

    def new_page(self) -> None:
        self.pages_finished += 1
        self.y = 0.0

    def finish(self) -> None:
        self.pages_finished += 1
        self.finished = True

    # -- query helpers ---------------------------------------------------------

    def texts(self, page: int | None = None) -> list[str]:
        return [
            op.args[2]
            for op in self.ops
            if op.kind == "text" and (page is None or op.page == page)
        ]

    def text_ops(self, value: str) -> list[DrawOp]:
        return [op for op in self.ops if op.kind == "text" and op.args[2] == value]

    def pages_with_text(self, value: str) -> list[int]:
        return sorted({op.page for op in self.text_ops(value)})

    @property
    def page_total(self) -> int:
        return max((op.page for op in self.ops), default=0)


class MeasuringSurface(ReportLabSurface):
    """Real reportlab surface that also keeps where each text block landed."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(io.BytesIO(), page_size=kwargs.pop("page_size", landscape(A4)), **kwargs)
        self.placed: list[tuple[int, float, float, str]] = []

    def text(self, x, y, text, **kwargs: Any) -> float:
        bottom = super().text(x, y, text, **kwargs)
        self.placed.append((self.page_number, y, bottom, text))
        return bottom


class StubChartRenderer:
    """Chart capability that records its inputs and returns an empty drawing."""

    def __init__(self, width: float = 800, height: float = 600) -> None:
        self.width = width
        self.height = height
        self.calls: list[tuple[str, dict[str, int]]] = []

    async def render(self, counts, *, title: str):
        from reportlab.graphics.shapes import Drawing

        from qareport.report.charts import ChartImage

        self.calls.append((title, dict(counts)))
        return ChartImage(Drawing(self.width, self.height), self.width, self.height)


class FailingChartRenderer:
    async def render(self, counts, *, title: str):
        from qareport.report.errors import ReportRenderError

        raise ReportRenderError("chart backend unavailable")
