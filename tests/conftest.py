"""Shared test helpers for the qareport test suite."""

from __future__ import annotations

from datetime import date
from io import BytesIO

import pytest

from qareport.report.report_data import ReportOptions
from qareport.report.theme import ReportTheme

REPORT_DAY = date(2026, 10, 16)


# ---------------------------------------------------------------------------
# PDF text extraction helper
# ---------------------------------------------------------------------------


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF byte string using pypdf."""
    from pypdf import PdfReader

    reader = PdfReader(BytesIO(pdf_bytes))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


def pdf_page_count(pdf_bytes: bytes) -> int:
    from pypdf import PdfReader

    return len(PdfReader(BytesIO(pdf_bytes)).pages)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def theme() -> ReportTheme:
    return ReportTheme()


@pytest.fixture
def options() -> ReportOptions:
    return ReportOptions(report_date=REPORT_DAY)
