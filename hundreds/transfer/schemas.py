"""Export/import file schemas.

File layout:
    {
      "currentDate": "2025-03-01",
      "currentData": {"pushups": 40, "situps": 0, "squats": 10, "running": 1.5},
      "workoutHistory": {"2025-02-28": {...same four fields...}},
      "version": "1.0",
      "exportDate": "2025-03-01T09:15:00+00:00"
    }

Older mobile exports are a bare list of {"date", "pushups", "situps",
"squats", "running"} objects; those are accepted on import too.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hundreds.exercises.catalog import ExerciseKind
from hundreds.progress.day_record import DayRecord


class ExerciseValues(BaseModel):
    """The four exercise values of one day.

    Values must be real JSON numbers: strings (even numeric ones), booleans
    and non-finite numbers are rejected.
    """

    model_config = ConfigDict(extra="ignore")

    pushups: float = Field(allow_inf_nan=False)
    situps: float = Field(allow_inf_nan=False)
    squats: float = Field(allow_inf_nan=False)
    running: float = Field(allow_inf_nan=False)

    @field_validator("pushups", "situps", "squats", "running", mode="before")
    @classmethod
    def require_number(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"must be a number, got {type(value).__name__}")
        return value

    @classmethod
    def from_record(cls, record: DayRecord) -> ExerciseValues:
        return cls(
            pushups=record.pushups,
            situps=record.situps,
            squats=record.squats,
            running=record.running,
        )

    def as_kind_map(self) -> dict[ExerciseKind, float]:
        return {
            ExerciseKind.PUSHUPS: self.pushups,
            ExerciseKind.SITUPS: self.situps,
            ExerciseKind.SQUATS: self.squats,
            ExerciseKind.RUNNING: self.running,
        }


class ExportPayload(BaseModel):
    """Full backup of live state and history."""

    current_date: str = Field(serialization_alias="currentDate")
    current_data: ExerciseValues = Field(serialization_alias="currentData")
    workout_history: dict[str, ExerciseValues] = Field(serialization_alias="workoutHistory")
    version: str
    export_date: str = Field(serialization_alias="exportDate")

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
