"""SQLAlchemy-backed history store.

One row per day in `day_records`; upsert updates the existing row for the
date or inserts a new one. Database errors are translated into the core's
recoverable error kinds.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from hundreds.db.models import DayRecordRow
from hundreds.db.session import session_scope
from hundreds.errors import PersistenceWriteFailedError, StorageUnavailableError
from hundreds.progress.day_record import DayRecord


def _row_to_record(row: DayRecordRow) -> DayRecord:
    return DayRecord(
        date=row.day,
        pushups=row.pushups,
        situps=row.situps,
        squats=row.squats,
        running=row.running,
    )


class SqlHistoryStore:
    """History store over any SQLAlchemy database."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, day: date) -> DayRecord | None:
        try:
            with session_scope(self._session_factory) as session:
                row = session.get(DayRecordRow, day)
                return _row_to_record(row) if row is not None else None
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Failed to load record for {day.isoformat()}: {e}") from e

    def upsert(self, record: DayRecord) -> None:
        try:
            with session_scope(self._session_factory) as session:
                row = session.get(DayRecordRow, record.date)
                if row is None:
                    row = DayRecordRow(day=record.date)
                    session.add(row)
                row.pushups = record.pushups
                row.situps = record.situps
                row.squats = record.squats
                row.running = record.running
                row.last_modified = datetime.now(timezone.utc)
        except SQLAlchemyError as e:
            raise PersistenceWriteFailedError(f"Failed to save record for {record.date_key}: {e}") from e
        logger.bind(day=record.date_key).debug("[STORE] Upserted day record")

    def all(self, start: date | None = None, end: date | None = None) -> list[DayRecord]:
        query = select(DayRecordRow).order_by(DayRecordRow.day)
        if start is not None:
            query = query.where(DayRecordRow.day >= start)
        if end is not None:
            query = query.where(DayRecordRow.day <= end)
        try:
            with session_scope(self._session_factory) as session:
                rows = session.execute(query).scalars().all()
                return [_row_to_record(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Failed to load workout history: {e}") from e

    def delete_all(self) -> None:
        try:
            with session_scope(self._session_factory) as session:
                result = session.execute(delete(DayRecordRow))
        except SQLAlchemyError as e:
            raise PersistenceWriteFailedError(f"Failed to reset workout history: {e}") from e
        logger.bind(deleted=result.rowcount).info("[STORE] Deleted all day records")
