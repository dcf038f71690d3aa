"""Shared route helpers for upload handling."""

from __future__ import annotations

import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile

CSV_CONTENT_TYPES: frozenset[str] = frozenset({"text/csv", "application/csv"})
_UPLOAD_CHUNK = 1024 * 1024


def is_csv_upload(upload: UploadFile) -> bool:
    """Accept by ``.csv`` extension or by CSV MIME type."""
    filename = (upload.filename or "").strip().lower()
    content_type = (upload.content_type or "").split(";", 1)[0].strip().lower()
    return filename.endswith(".csv") or content_type in CSV_CONTENT_TYPES


def require_csv_upload(upload: UploadFile | None) -> UploadFile:
    """Return *upload* or raise HTTP 400 when it is missing or not a CSV."""
    if upload is None or not (upload.filename or "").strip():
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not is_csv_upload(upload):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")
    return upload


async def read_upload_limited(upload: UploadFile, max_bytes: int) -> bytes:
    """Read the whole upload, raising HTTP 400 once it exceeds *max_bytes*."""
    chunks: list[bytes] = []
    size = 0
    while chunk := await upload.read(_UPLOAD_CHUNK):
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File too large (limit {max_bytes} bytes)",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def upload_temp_path(upload_dir: Path) -> Path:
    return upload_dir / f"upload_{uuid.uuid4().hex}.csv"
