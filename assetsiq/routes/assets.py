from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from assetsiq.application import get_inventory_service
from assetsiq.core.errors import BatchInProgressError
from assetsiq.exporters.asset_export import EXPORT_FORMATS

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("")
async def list_assets() -> dict:
    service = get_inventory_service()
    items = service.list_assets()
    return {"items": items, "count": len(items)}


@router.delete("")
async def clear_assets() -> dict:
    service = get_inventory_service()
    try:
        service.clear()
    except BatchInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"cleared": True}


@router.get("/export")
async def export_assets(fmt: str = Query(default="csv", alias="format")) -> Response:
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail=f"format must be one of {', '.join(EXPORT_FORMATS)}")

    service = get_inventory_service()
    artifact = service.export(fmt)
    if artifact is None:
        return Response(status_code=204)
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )
