"""Today's progress endpoints.

Thin adapter over DayRecordEngine: every route delegates to one engine
operation and renders the resulting record.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from loguru import logger

from hundreds.api.dependencies import get_exercise, get_tracker
from hundreds.api.schemas import DayRecordResponse, SetValueRequest
from hundreds.exercises.catalog import ExerciseKind
from hundreds.progress.engine import DayRecordEngine

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/today", response_model=DayRecordResponse)
def get_today(tracker: DayRecordEngine = Depends(get_tracker)):
    """Get today's live record."""
    return DayRecordResponse.from_record(tracker.current)


@router.put("/today/{exercise}", response_model=DayRecordResponse)
def set_exercise(
    body: SetValueRequest,
    kind: ExerciseKind = Depends(get_exercise),
    tracker: DayRecordEngine = Depends(get_tracker),
):
    """Set one exercise to an exact value (clamped to the exercise's range)."""
    logger.info(f"[PROGRESS] PUT /progress/today/{kind.value} value={body.value}")
    return DayRecordResponse.from_record(tracker.set_value(kind, body.value))


@router.post("/today/{exercise}/increment", response_model=DayRecordResponse)
def increment_exercise(
    kind: ExerciseKind = Depends(get_exercise),
    tracker: DayRecordEngine = Depends(get_tracker),
):
    return DayRecordResponse.from_record(tracker.increment(kind))


@router.post("/today/{exercise}/decrement", response_model=DayRecordResponse)
def decrement_exercise(
    kind: ExerciseKind = Depends(get_exercise),
    tracker: DayRecordEngine = Depends(get_tracker),
):
    return DayRecordResponse.from_record(tracker.decrement(kind))


@router.post("/today/reset", response_model=DayRecordResponse)
def reset_today(tracker: DayRecordEngine = Depends(get_tracker)):
    logger.info("[PROGRESS] POST /progress/today/reset")
    return DayRecordResponse.from_record(tracker.reset_today())


@router.get("/errors", response_model=list[str])
def drain_errors(tracker: DayRecordEngine = Depends(get_tracker)):
    """Return (and clear) recoverable errors reported since the last call."""
    return [str(error) for error in tracker.drain_errors()]
