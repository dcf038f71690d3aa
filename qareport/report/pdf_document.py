"""Output artifact handling for rendered reports.

The document is written to a ``.part`` sibling and only renamed into place
once the PDF stream has been completely written and closed, so a failed
render never leaves a partial report behind.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from .errors import ReportRenderError

LOGGER = logging.getLogger(__name__)

PART_SUFFIX = ".part"


def report_output_path(output_dir: Path) -> Path:
    """Unique ``report_<millis>_<token>.pdf`` path inside *output_dir*."""
    stamp = int(time.time() * 1000)
    return output_dir / f"report_{stamp}_{uuid.uuid4().hex[:8]}.pdf"


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        LOGGER.warning("Could not remove partial report %s", path, exc_info=True)


@contextmanager
def open_report_output(path: Path) -> Iterator[BinaryIO]:
    """Yield a writable binary stream that becomes *path* on clean exit.

    The stream is always closed.  On any exception the partial file is
    deleted and the exception propagates.
    """
    part = path.with_name(path.name + PART_SUFFIX)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        stream = part.open("wb")
    except OSError as exc:
        raise ReportRenderError(f"Cannot open report output {path}") from exc

    try:
        yield stream
    except BaseException:
        stream.close()
        _discard(part)
        raise

    try:
        stream.close()
        part.replace(path)
    except OSError as exc:
        _discard(part)
        raise ReportRenderError(f"Cannot finalize report output {path}") from exc
    LOGGER.debug("Report written to %s", path)


def remove_report(path: Path) -> None:
    """Delete a delivered report; missing files are ignored."""
    try:
        path.unlink(missing_ok=True)
    except OSError:
        LOGGER.warning("Error deleting report %s", path, exc_info=True)
