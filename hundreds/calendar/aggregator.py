"""Calendar aggregation.

Builds the month view model from a snapshot of history: one cell per grid
slot, joined against stored records and the live record, with a completion
classification and progress-ring segments per cell.

Read-only and deterministic. Nothing here writes to storage or keeps state
between calls.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from loguru import logger

from hundreds.exercises.catalog import ALL_KINDS, ExerciseKind, target_of
from hundreds.progress.day_record import DayRecord
from hundreds.storage.base import HistoryStore
from hundreds.utils.calendar import DAYS_IN_WEEK, add_months, days_in_month, leading_padding, last_of_month

SEGMENT_WIDTH = 1.0 / len(ALL_KINDS)
SUNDAY = 6


class CompletionStatus(StrEnum):
    """Per-day completion classification."""

    NONE = "none"
    PARTIAL = "partial"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ProgressSegment:
    """Filled arc of one exercise's quarter of the progress ring (fractions of a full turn)."""

    kind: ExerciseKind
    start: float
    end: float


@dataclass(frozen=True)
class CalendarCell:
    """One slot of the month grid.

    Padding cells before the 1st have date=None and is_in_displayed_month=False.
    """

    date: date | None
    record: DayRecord | None
    is_today: bool
    is_in_displayed_month: bool

    @property
    def completion_status(self) -> CompletionStatus:
        return completion_status(self)

    @property
    def day_number(self) -> str:
        return str(self.date.day) if self.date is not None else ""

    @property
    def progress_summary(self) -> str:
        """Compact "P/S/Q" and running text, empty when there is no record."""
        if self.record is None:
            return ""
        r = self.record
        return f"{int(r.pushups)}/{int(r.situps)}/{int(r.squats)}\n{r.running:.1f}mi"


def completion_status(cell: CalendarCell) -> CompletionStatus:
    record = cell.record
    if record is None or not record.has_progress:
        return CompletionStatus.NONE
    if record.is_complete:
        return CompletionStatus.COMPLETE
    return CompletionStatus.PARTIAL


def progress_segments(record: DayRecord) -> list[ProgressSegment]:
    """Split the ring into equal quarters in catalog order and fill each by its progress.

    Quarter i spans [i * 0.25, (i + 1) * 0.25); the filled part ends at
    i * 0.25 + min(1, value / target) * 0.25. Order never depends on values.
    """
    segments: list[ProgressSegment] = []
    for index, kind in enumerate(ALL_KINDS):
        start = index * SEGMENT_WIDTH
        fill = min(1.0, record.value_of(kind) / target_of(kind)) * SEGMENT_WIDTH
        segments.append(ProgressSegment(kind=kind, start=start, end=start + fill))
    return segments


def _index_history(history_snapshot: Mapping[date, DayRecord] | Iterable[DayRecord]) -> dict[date, DayRecord]:
    if isinstance(history_snapshot, Mapping):
        return dict(history_snapshot)
    return {record.date: record for record in history_snapshot}


def cells_for_month(
    year: int,
    month: int,
    history_snapshot: Mapping[date, DayRecord] | Iterable[DayRecord],
    today: DayRecord,
    first_weekday: int = SUNDAY,
) -> list[CalendarCell]:
    """Build the 7-wide grid for a month.

    Args:
        year: Displayed year
        month: Displayed month (1-12)
        history_snapshot: Stored records, as a date mapping or a sequence
        today: The live record; its date marks today and its values win over
            history so unsaved edits show immediately
        first_weekday: Weekday of the first column (Monday = 0, Sunday = 6)

    Returns:
        Leading padding cells followed by one cell per day of the month
    """
    history = _index_history(history_snapshot)
    cells: list[CalendarCell] = [
        CalendarCell(date=None, record=None, is_today=False, is_in_displayed_month=False)
        for _ in range(leading_padding(year, month, first_weekday))
    ]

    for day_number in range(1, days_in_month(year, month) + 1):
        day = date(year, month, day_number)
        is_today = day == today.date
        record = today if is_today else history.get(day)
        cells.append(CalendarCell(date=day, record=record, is_today=is_today, is_in_displayed_month=True))

    return cells


def row_count(cells: list[CalendarCell]) -> int:
    """Number of 7-wide rows needed for the grid."""
    return -(-len(cells) // DAYS_IN_WEEK)


def shift_month(current: date, delta: int) -> date:
    """First day of the month `delta` months from current's month."""
    return add_months(current, delta)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), last_of_month(year, month)


def month_title(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def weekday_headers(first_weekday: int = SUNDAY) -> list[str]:
    return [calendar.day_abbr[(first_weekday + offset) % DAYS_IN_WEEK] for offset in range(DAYS_IN_WEEK)]


@dataclass(frozen=True)
class DayDetail:
    """One selected day: its record (zero-valued when nothing was logged) and whether it is today."""

    record: DayRecord
    is_today: bool

    @property
    def headline(self) -> str:
        return "Workout Completed" if self.record.has_progress else "No Activity"

    @property
    def display_date(self) -> str:
        day = self.record.date
        return f"{day:%A, %B} {day.day}, {day.year}"


def day_detail(store: HistoryStore, day: date, today: DayRecord) -> DayDetail:
    """Detail for one calendar day.

    Today's date reads the live record; any other date reads the store and
    falls back to a zero record when nothing is stored.

    Raises:
        StorageUnavailableError: If the store cannot be read
    """
    if day == today.date:
        return DayDetail(record=today, is_today=True)
    record = store.get(day)
    logger.bind(day=day.isoformat(), found=record is not None).debug("[CALENDAR] Loaded day detail")
    return DayDetail(record=record or DayRecord.empty(day), is_today=False)


def load_month(
    store: HistoryStore,
    year: int,
    month: int,
    today: DayRecord,
    first_weekday: int = SUNDAY,
) -> list[CalendarCell]:
    """Read one snapshot of the month from the store and build its cells.

    Raises:
        StorageUnavailableError: If the store cannot be read
    """
    start, end = month_bounds(year, month)
    snapshot = store.all(start, end)
    logger.bind(year=year, month=month, records=len(snapshot)).debug("[CALENDAR] Loaded month snapshot")
    return cells_for_month(year, month, snapshot, today, first_weekday)
