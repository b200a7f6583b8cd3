"""Exercise catalog.

Static metadata for the four daily exercises: targets, +/- step, ceiling,
display precision and unit. Defined once at import time and never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum


class ExerciseKind(StrEnum):
    """Exercise identifiers, declared in catalog order."""

    PUSHUPS = "pushups"
    SITUPS = "situps"
    SQUATS = "squats"
    RUNNING = "running"


@dataclass(frozen=True)
class ExerciseSpec:
    """Immutable per-exercise configuration."""

    kind: ExerciseKind
    display_name: str
    target: float
    increment: float
    max_value: float
    decimal_places: int  # 0 for reps, 1 for distance
    unit: str  # empty for rep-based exercises


CATALOG: dict[ExerciseKind, ExerciseSpec] = {
    ExerciseKind.PUSHUPS: ExerciseSpec(
        kind=ExerciseKind.PUSHUPS,
        display_name="Pushups",
        target=100,
        increment=1,
        max_value=999,
        decimal_places=0,
        unit="",
    ),
    ExerciseKind.SITUPS: ExerciseSpec(
        kind=ExerciseKind.SITUPS,
        display_name="Situps",
        target=100,
        increment=1,
        max_value=999,
        decimal_places=0,
        unit="",
    ),
    ExerciseKind.SQUATS: ExerciseSpec(
        kind=ExerciseKind.SQUATS,
        display_name="Squats",
        target=100,
        increment=1,
        max_value=999,
        decimal_places=0,
        unit="",
    ),
    ExerciseKind.RUNNING: ExerciseSpec(
        kind=ExerciseKind.RUNNING,
        display_name="Running",
        target=10.0,
        increment=0.1,
        max_value=99.9,
        decimal_places=1,
        unit="mi",
    ),
}

ALL_KINDS: tuple[ExerciseKind, ...] = tuple(CATALOG)


def spec_of(kind: ExerciseKind) -> ExerciseSpec:
    return CATALOG[kind]


def target_of(kind: ExerciseKind) -> float:
    return CATALOG[kind].target


def increment_of(kind: ExerciseKind) -> float:
    return CATALOG[kind].increment


def parse_kind(name: str) -> ExerciseKind:
    """Resolve an exercise name (case-insensitive) to its kind.

    Raises:
        ValueError: If the name is not in the catalog
    """
    try:
        return ExerciseKind(name.strip().lower())
    except ValueError:
        valid = ", ".join(k.value for k in ALL_KINDS)
        raise ValueError(f"Unknown exercise '{name}'. Valid exercises: {valid}") from None


def _snap_to_tenth(value: float) -> float:
    # Half-up rounding; value is already non-negative here
    return math.floor(value * 10 + 0.5) / 10


def clamp(kind: ExerciseKind, value: float) -> float:
    """Bound a raw value to [0, max_value] for the kind.

    Running is additionally snapped to the nearest 0.1. NaN clamps to 0.
    """
    spec = CATALOG[kind]
    value = float(value)
    if math.isnan(value):
        value = 0.0
    clamped = max(0.0, min(spec.max_value, value))
    if spec.decimal_places == 1:
        clamped = min(spec.max_value, _snap_to_tenth(clamped))
    return clamped


def format_value(kind: ExerciseKind, value: float) -> str:
    """Format a value with the kind's display precision ("42", "3.5").

    Rep counts show whole reps only, so a fractional 12.5 displays as "12".
    """
    if CATALOG[kind].decimal_places == 0:
        return str(int(value))
    return f"{value:.1f}"


def format_target(kind: ExerciseKind) -> str:
    """Format the daily target with its unit ("100", "10.0 mi")."""
    spec = CATALOG[kind]
    target_string = format_value(kind, spec.target)
    return f"{target_string} {spec.unit}" if spec.unit else target_string
