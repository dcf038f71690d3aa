"""Parse an uploaded QA export into row mappings.

The header line names the fields; every following record becomes one
``dict`` keyed by header.  Fields are kept as-is (no trimming, no type
coercion): tolerance for messy values lives in the aggregator.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from .report.errors import ReportInputError

LOGGER = logging.getLogger(__name__)

CSV_ENCODING = "utf-8-sig"


def parse_csv_text(text: str) -> list[dict[str, str]]:
    """Rows of *text*; short records get ``""`` for the missing fields."""
    try:
        reader = csv.DictReader(io.StringIO(text, newline=""), restval="")
        rows = [{key: value for key, value in row.items() if key is not None} for row in reader]
    except csv.Error as exc:
        raise ReportInputError(f"Malformed CSV: {exc}") from exc
    LOGGER.debug("Parsed %d CSV rows", len(rows))
    return rows


def parse_csv_bytes(data: bytes) -> list[dict[str, str]]:
    try:
        text = data.decode(CSV_ENCODING)
    except UnicodeDecodeError as exc:
        raise ReportInputError("CSV is not valid UTF-8") from exc
    return parse_csv_text(text)


def read_csv_rows(path: Path) -> list[dict[str, str]]:
    """Read and parse the CSV file at *path*."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ReportInputError(f"Cannot read CSV file {path}") from exc
    return parse_csv_bytes(data)
