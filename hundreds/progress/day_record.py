"""Day record model and completion math."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from hundreds.exercises.catalog import ALL_KINDS, ExerciseKind, clamp, target_of


@dataclass(frozen=True)
class DayRecord:
    """Progress for exactly one calendar day.

    `date` is the sole identity key. Values are always inside the catalog
    bounds because every write goes through `with_value`, which clamps.
    Records are immutable snapshots; the engine swaps in a new instance on
    every change.
    """

    date: date
    pushups: float = 0.0
    situps: float = 0.0
    squats: float = 0.0
    running: float = 0.0

    @classmethod
    def empty(cls, day: date) -> DayRecord:
        return cls(date=day)

    @classmethod
    def from_values(cls, day: date, values: dict[ExerciseKind, float]) -> DayRecord:
        """Build a record, clamping each provided value. Missing kinds are zero."""
        record = cls(date=day)
        for kind, value in values.items():
            record = record.with_value(kind, value)
        return record

    @property
    def date_key(self) -> str:
        """The `yyyy-MM-dd` form of the date, used in files and mappings."""
        return self.date.isoformat()

    def value_of(self, kind: ExerciseKind) -> float:
        return getattr(self, kind.value)

    def with_value(self, kind: ExerciseKind, value: float) -> DayRecord:
        """Return a copy with one exercise set to the clamped value."""
        return replace(self, **{kind.value: clamp(kind, value)})

    def values(self) -> dict[ExerciseKind, float]:
        return {kind: self.value_of(kind) for kind in ALL_KINDS}

    def completion_percentage(self, kind: ExerciseKind) -> float:
        return min(100.0, 100.0 * self.value_of(kind) / target_of(kind))

    @property
    def total_completion_percentage(self) -> float:
        percentages = [self.completion_percentage(kind) for kind in ALL_KINDS]
        return sum(percentages) / len(percentages)

    @property
    def is_complete(self) -> bool:
        return self.total_completion_percentage >= 100

    @property
    def has_progress(self) -> bool:
        return any(self.value_of(kind) > 0 for kind in ALL_KINDS)


def motivational_message(total_percentage: float) -> str:
    """Encouragement text for the day's overall progress."""
    if total_percentage <= 0:
        return "Ready to crush your hundreds? 💪"
    if total_percentage < 25:
        return "Great start! Keep it up! 🚀"
    if total_percentage < 50:
        return "You're making progress! 🔥"
    if total_percentage < 75:
        return "Halfway there! Don't stop now! ⚡"
    if total_percentage < 100:
        return "Almost there! Push through! 🎯"
    return "Hundreds complete! You're amazing! 🏆"
