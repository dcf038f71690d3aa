"""Exception types raised by report generation.

``ReportInputError`` means the upload itself was unusable; everything else
means the service could not produce an artifact from otherwise valid input.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for report generation failures."""


class ReportInputError(ReportError):
    """The uploaded CSV could not be read."""


class ReportLayoutError(ReportError):
    """Page geometry cannot host the requested content."""


class DegenerateLayoutError(ReportLayoutError):
    """Not even one table row fits in the available vertical space."""


class ReportRenderError(ReportError):
    """Drawing, chart rendering or writing the output document failed."""
