"""qareport.report – renderer-only PDF modules.

This package contains **only** layout and drawing code.  Row aggregation
lives in ``qareport.analysis``; the renderer consumes its ``Metrics``.
"""

from .errors import (
    DegenerateLayoutError,
    ReportError,
    ReportInputError,
    ReportLayoutError,
    ReportRenderError,
)
from .pdf_builder import ReportRenderer
from .report_data import ReportArtifact, ReportOptions, ReportRequest

__all__ = [
    "DegenerateLayoutError",
    "ReportArtifact",
    "ReportError",
    "ReportInputError",
    "ReportLayoutError",
    "ReportOptions",
    "ReportRenderError",
    "ReportRenderer",
    "ReportRequest",
]
