"""Calendar month and day-detail endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path
from loguru import logger

from hundreds.api.dependencies import get_tracker
from hundreds.api.schemas import CalendarCellResponse, CalendarMonthResponse, DayDetailResponse
from hundreds.calendar.aggregator import day_detail, load_month, month_title, row_count, shift_month, weekday_headers
from hundreds.config.settings import Settings, get_settings
from hundreds.errors import StorageUnavailableError
from hundreds.progress.engine import DayRecordEngine
from hundreds.utils.timezone import parse_date_key

router = APIRouter(prefix="/calendar", tags=["calendar"])


def _month_response(year: int, month: int, tracker: DayRecordEngine, config: Settings) -> CalendarMonthResponse:
    try:
        cells = load_month(tracker.store, year, month, tracker.current, config.first_weekday_index)
    except StorageUnavailableError as e:
        tracker.report(e)
        raise HTTPException(status_code=503, detail="Workout history is unavailable") from e

    first = date(year, month, 1)
    return CalendarMonthResponse(
        year=year,
        month=month,
        title=month_title(year, month),
        weekdays=weekday_headers(config.first_weekday_index),
        rows=row_count(cells),
        cells=[CalendarCellResponse.from_cell(cell) for cell in cells],
        previous=shift_month(first, -1).isoformat(),
        next=shift_month(first, 1).isoformat(),
    )


@router.get("/current", response_model=CalendarMonthResponse)
def get_current_month(
    tracker: DayRecordEngine = Depends(get_tracker),
    config: Settings = Depends(get_settings),
):
    """Calendar for the month containing today."""
    today = tracker.today
    return _month_response(today.year, today.month, tracker, config)


@router.get("/day/{day_key}", response_model=DayDetailResponse)
def get_day(day_key: str, tracker: DayRecordEngine = Depends(get_tracker)):
    """Values, percentages and headline for one date (yyyy-MM-dd)."""
    try:
        day = parse_date_key(day_key)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        detail = day_detail(tracker.store, day, tracker.current)
    except StorageUnavailableError as e:
        tracker.report(e)
        raise HTTPException(status_code=503, detail="Workout history is unavailable") from e
    return DayDetailResponse.from_detail(detail)


@router.get("/{year}/{month}", response_model=CalendarMonthResponse)
def get_month(
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    tracker: DayRecordEngine = Depends(get_tracker),
    config: Settings = Depends(get_settings),
):
    logger.debug(f"[CALENDAR] GET /calendar/{year}/{month}")
    return _month_response(year, month, tracker, config)
