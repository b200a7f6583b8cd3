from fastapi import HTTPException, Request

from hundreds.exercises.catalog import ExerciseKind, parse_kind
from hundreds.progress.engine import DayRecordEngine


def get_tracker(request: Request) -> DayRecordEngine:
    """Return the engine owned by the running application."""
    return request.app.state.tracker


def get_exercise(exercise: str) -> ExerciseKind:
    """Resolve the {exercise} path parameter, 404 for unknown names."""
    try:
        return parse_kind(exercise)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
