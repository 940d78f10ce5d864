from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, BackgroundTasks, File, Form, HTTPException, UploadFile

from assetsiq.application import get_inventory_service
from assetsiq.core.errors import BatchInProgressError
from assetsiq.core.sanitize import is_supported_upload
from assetsiq.workers.pipeline import UploadedDocument

router = APIRouter(prefix="/batches", tags=["batches"])

UPLOAD_SOURCES = {"picker", "drop"}


@router.post("")
async def upload_batch(
    background_tasks: BackgroundTasks,
    files: list[UploadFile] = File(...),
    source: str = Form("picker"),
) -> dict:
    """Submit report files as a new batch; processing continues in the background."""
    if source not in UPLOAD_SOURCES:
        raise HTTPException(status_code=400, detail="source must be picker or drop")

    documents: list[UploadedDocument] = []
    for upload in files:
        try:
            if not upload.filename:
                raise HTTPException(status_code=400, detail="Uploaded file must have a filename")

            safe_name = Path(upload.filename).name
            # Dropped files are filtered to HTML reports; picker selections are taken as-is.
            if source == "drop" and not is_supported_upload(safe_name, upload.content_type):
                continue

            data = await upload.read()
            documents.append(UploadedDocument(filename=safe_name, data=data, content_type=upload.content_type))
        finally:
            await upload.close()

    if not documents:
        raise HTTPException(status_code=400, detail="No supported files were provided")

    service = get_inventory_service()
    try:
        jobs = service.start_batch(documents)
    except BatchInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    background_tasks.add_task(service.run_batch)
    return {"items": jobs, "processing": True}


@router.get("/current")
async def get_current_batch() -> dict:
    service = get_inventory_service()
    return service.batch_overview()
