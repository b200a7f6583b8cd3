"""Backup export/import endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from loguru import logger

from hundreds.api.dependencies import get_tracker
from hundreds.api.schemas import ImportResponse
from hundreds.config.settings import Settings, get_settings
from hundreds.errors import InvalidImportFormatError, StorageUnavailableError
from hundreds.progress.engine import DayRecordEngine
from hundreds.transfer.service import default_export_filename, export_json, import_payload

router = APIRouter(prefix="/transfer", tags=["transfer"])


@router.get("/export")
def export_data(
    tracker: DayRecordEngine = Depends(get_tracker),
    config: Settings = Depends(get_settings),
):
    """Download a JSON backup of today's record and the full history."""
    try:
        body = export_json(tracker, config.export_version)
    except StorageUnavailableError as e:
        tracker.report(e)
        raise HTTPException(status_code=503, detail="Workout history is unavailable") from e

    filename = default_export_filename(tracker.today)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResponse)
async def import_data(request: Request, tracker: DayRecordEngine = Depends(get_tracker)):
    """Import a JSON backup. Each day in the file overwrites the stored day."""
    raw = await request.body()
    try:
        report = await run_in_threadpool(import_payload, tracker, raw)
    except InvalidImportFormatError as e:
        logger.warning(f"[IMPORT] Rejected import file: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ImportResponse(
        imported=report.imported,
        skipped=report.skipped,
        errors=[str(error) for error in report.errors],
    )
