"""CSV upload endpoint: parse the export, render the report, stream the PDF."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from ..api_models import ErrorResponse
from ..csv_rows import read_csv_rows
from ..report.errors import ReportInputError
from ..report.pdf_document import remove_report, report_output_path
from ..report.report_data import ReportRequest
from ._helpers import read_upload_limited, require_csv_upload, upload_temp_path

if TYPE_CHECKING:
    from ..app import RuntimeState

LOGGER = logging.getLogger(__name__)

DOWNLOAD_NAME = "QA_Report.pdf"
RENDER_FAILED_DETAIL = "Failed to process file or generate PDF"


def _save_upload(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def _discard_upload(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        LOGGER.warning("Error deleting uploaded file %s", path, exc_info=True)


def create_report_routes(state: RuntimeState) -> APIRouter:
    router = APIRouter()

    @router.post(
        "/api/upload",
        response_class=FileResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def upload_report(
        request: Request,
        csv_file: UploadFile | None = File(default=None, alias="csvFile"),
        general_status: str | None = Form(default=None, alias="generalStatus"),
        notes: str | None = Form(default=None),
    ) -> FileResponse:
        upload = require_csv_upload(csv_file)
        try:
            data = await read_upload_limited(upload, state.config.uploads.max_bytes)
        finally:
            await upload.close()

        # Browser clients sometimes put the form fields on the query string.
        if general_status is None:
            general_status = request.query_params.get("generalStatus", "")
        if notes is None:
            notes = request.query_params.get("notes")

        upload_path = upload_temp_path(state.config.uploads.dir)
        try:
            await asyncio.to_thread(_save_upload, upload_path, data)
            rows = await asyncio.to_thread(read_csv_rows, upload_path)
        except ReportInputError as exc:
            LOGGER.warning("Rejected upload %r: %s", upload.filename, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except OSError as exc:
            LOGGER.error("Could not store upload %s", upload_path, exc_info=True)
            raise HTTPException(status_code=500, detail=RENDER_FAILED_DETAIL) from exc
        finally:
            await asyncio.to_thread(_discard_upload, upload_path)

        report_request = ReportRequest(rows=rows, general_status=general_status, notes=notes)
        output_path = report_output_path(state.config.report.output_dir)
        timeout_s = state.config.report.render_timeout_s
        try:
            artifact = await asyncio.wait_for(
                state.renderer.render(report_request, output_path), timeout=timeout_s
            )
        except TimeoutError as exc:
            LOGGER.error("Report rendering exceeded %.1f s", timeout_s)
            remove_report(output_path)
            raise HTTPException(status_code=500, detail=RENDER_FAILED_DETAIL) from exc
        except Exception as exc:
            LOGGER.error("Error generating report for %r", upload.filename, exc_info=True)
            raise HTTPException(status_code=500, detail=RENDER_FAILED_DETAIL) from exc

        LOGGER.info(
            "Report ready: %s (%d pages, %d bytes)",
            artifact.path.name,
            artifact.page_count,
            artifact.size_bytes,
        )
        return FileResponse(
            artifact.path,
            media_type="application/pdf",
            filename=DOWNLOAD_NAME,
            background=BackgroundTask(remove_report, artifact.path),
        )

    return router
