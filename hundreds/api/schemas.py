"""Response and request models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from hundreds.calendar.aggregator import CalendarCell, CompletionStatus, DayDetail, progress_segments
from hundreds.exercises.catalog import ALL_KINDS, format_target, format_value, spec_of
from hundreds.progress.day_record import DayRecord, motivational_message


class ExerciseProgress(BaseModel):
    exercise: str
    display_name: str
    value: float
    formatted: str = Field(description="Value at display precision, e.g. '42/100' or '3.5/10.0 mi'")
    completion_percentage: float


class DayRecordResponse(BaseModel):
    date: str
    exercises: list[ExerciseProgress]
    total_completion_percentage: float
    is_complete: bool
    message: str

    @classmethod
    def from_record(cls, record: DayRecord) -> DayRecordResponse:
        exercises = [
            ExerciseProgress(
                exercise=kind.value,
                display_name=spec_of(kind).display_name,
                value=record.value_of(kind),
                formatted=f"{format_value(kind, record.value_of(kind))}/{format_target(kind)}",
                completion_percentage=record.completion_percentage(kind),
            )
            for kind in ALL_KINDS
        ]
        return cls(
            date=record.date_key,
            exercises=exercises,
            total_completion_percentage=record.total_completion_percentage,
            is_complete=record.is_complete,
            message=motivational_message(record.total_completion_percentage),
        )


class DayDetailResponse(DayRecordResponse):
    display_date: str
    headline: str = Field(description="'Workout Completed' or 'No Activity'")
    is_today: bool

    @classmethod
    def from_detail(cls, detail: DayDetail) -> DayDetailResponse:
        base = DayRecordResponse.from_record(detail.record)
        return cls(
            **base.model_dump(),
            display_date=detail.display_date,
            headline=detail.headline,
            is_today=detail.is_today,
        )


class SetValueRequest(BaseModel):
    value: float = Field(allow_inf_nan=False)


class SegmentResponse(BaseModel):
    exercise: str
    start: float
    end: float


class CalendarCellResponse(BaseModel):
    date: str | None
    day_number: str
    is_today: bool
    is_in_displayed_month: bool
    completion_status: CompletionStatus
    progress_summary: str
    segments: list[SegmentResponse]

    @classmethod
    def from_cell(cls, cell: CalendarCell) -> CalendarCellResponse:
        segments = []
        if cell.record is not None:
            segments = [
                SegmentResponse(exercise=s.kind.value, start=s.start, end=s.end)
                for s in progress_segments(cell.record)
            ]
        return cls(
            date=cell.date.isoformat() if cell.date else None,
            day_number=cell.day_number,
            is_today=cell.is_today,
            is_in_displayed_month=cell.is_in_displayed_month,
            completion_status=cell.completion_status,
            progress_summary=cell.progress_summary,
            segments=segments,
        )


class CalendarMonthResponse(BaseModel):
    year: int
    month: int
    title: str
    weekdays: list[str]
    rows: int
    cells: list[CalendarCellResponse]
    previous: str = Field(description="First day of the previous month")
    next: str = Field(description="First day of the next month")


class ImportResponse(BaseModel):
    imported: int
    skipped: int
    errors: list[str]
