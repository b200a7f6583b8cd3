from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Float
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class DayRecordRow(Base):
    """Persisted progress for one calendar day.

    Stores:
    - day: Local calendar date (primary key, so at most one row per day)
    - pushups / situps / squats / running: Clamped exercise values
    - last_modified: UTC timestamp of the latest upsert
    """

    __tablename__ = "day_records"

    day: Mapped[date] = mapped_column(Date, primary_key=True)
    pushups: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    situps: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    squats: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    running: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_modified: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
