"""DayRecord engine.

Owns the single live "today" record. Every mutation (set, increment,
decrement, reset, rollover, import) runs under one re-entrant lock, so
concurrent callers never interleave partial updates. The live record is
updated first and then written through to the history store; a failed write
is reported, never rolled back.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from loguru import logger

from hundreds.errors import HundredsError, PersistenceWriteFailedError, StorageUnavailableError
from hundreds.exercises.catalog import ExerciseKind, increment_of
from hundreds.progress.clock import Clock
from hundreds.progress.day_record import DayRecord
from hundreds.progress.notifications import LoggingNotifier, Notifier
from hundreds.storage.base import HistoryStore
from hundreds.utils.timezone import day_key


@dataclass(frozen=True)
class RolloverResult:
    """Outcome of a day-change check.

    Attributes:
        rolled_over: Whether the day changed on this call
        old_date: Date of the outgoing record (None when nothing changed)
        new_date: Date of the new live record (None when nothing changed)
        archived: Whether the outgoing record was written to history
    """

    rolled_over: bool
    old_date: date | None = None
    new_date: date | None = None
    archived: bool = False


class DayRecordEngine:
    """Single-writer owner of today's progress."""

    def __init__(
        self,
        store: HistoryStore,
        clock: Clock,
        notifier: Notifier | None = None,
        tz: tzinfo | None = None,
        max_errors: int = 50,
    ):
        self.store = store
        self.clock = clock
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.tz = tz
        self.lock = threading.RLock()
        self.errors: deque[HundredsError] = deque(maxlen=max_errors)
        self._today = DayRecord.empty(self.day_of(clock.now()))

    def day_of(self, reference: datetime | date) -> date:
        return day_key(reference, self.tz)

    @property
    def current(self) -> DayRecord:
        """Snapshot of the live record."""
        with self.lock:
            return self._today

    @property
    def today(self) -> date:
        return self.current.date

    # Loading

    def load_today(self, reference_now: datetime | None = None) -> DayRecord:
        """Make the stored record for the reference day live, or a zero record if none.

        A missing record is expected. A storage failure falls back to a zero
        record and is reported as StorageUnavailableError.
        """
        now = reference_now or self.clock.now()
        day = self.day_of(now)
        with self.lock:
            try:
                record = self.store.get(day)
            except StorageUnavailableError as e:
                self.report(e)
                record = None
            self._today = record or DayRecord.empty(day)
            logger.bind(day=day.isoformat(), found=record is not None).info("[ENGINE] Loaded today's record")
            return self._today

    def reload(self, reference_now: datetime | None = None) -> DayRecord:
        """Explicitly re-read today's record from the store, dropping the live copy."""
        return self.load_today(reference_now)

    # Mutation

    def set_value(self, kind: ExerciseKind, raw_value: float) -> DayRecord:
        """Clamp and store one exercise value on the live record, then persist it."""
        with self.lock:
            self._today = self._today.with_value(kind, raw_value)
            self._persist(self._today)
            logger.bind(day=self._today.date_key, exercise=kind.value, value=self._today.value_of(kind)).debug(
                "[ENGINE] Exercise updated"
            )
            return self._today

    def increment(self, kind: ExerciseKind) -> DayRecord:
        with self.lock:
            return self.set_value(kind, self._today.value_of(kind) + increment_of(kind))

    def decrement(self, kind: ExerciseKind) -> DayRecord:
        with self.lock:
            return self.set_value(kind, max(0.0, self._today.value_of(kind) - increment_of(kind)))

    def reset_today(self) -> DayRecord:
        """Zero every exercise for the live day and persist the empty record."""
        with self.lock:
            self._today = DayRecord.empty(self._today.date)
            self._persist(self._today)
            logger.bind(day=self._today.date_key).info("[ENGINE] Today's record reset")
            return self._today

    def replace_today(self, record: DayRecord) -> bool:
        """Swap in record as the live record if it carries the live date.

        Returns:
            True if the live record was replaced
        """
        with self.lock:
            if record.date != self._today.date:
                return False
            self._today = record
            return True

    def upsert_history(self, record: DayRecord) -> PersistenceWriteFailedError | None:
        """Write record to history, replacing the live record when it is today's.

        Returns:
            The write error if the upsert failed (already reported), else None
        """
        with self.lock:
            error = self._persist(record)
            if error is None:
                self.replace_today(record)
            return error

    # Day change

    def check_rollover(self, reference_now: datetime | None = None) -> RolloverResult:
        """Archive the outgoing day and start a fresh one if the date changed.

        Safe to call repeatedly: once the live record carries the current day,
        further calls on the same day are no-ops.
        """
        now = reference_now or self.clock.now()
        new_day = self.day_of(now)
        with self.lock:
            outgoing = self._today
            if new_day == outgoing.date:
                return RolloverResult(rolled_over=False)

            archived = False
            if outgoing.has_progress:
                # Usually already persisted by set_value; rewriting is harmless
                archived = self._persist(outgoing) is None

            self._today = DayRecord.empty(new_day)
            result = RolloverResult(
                rolled_over=True,
                old_date=outgoing.date,
                new_date=new_day,
                archived=archived,
            )

        logger.bind(old_date=outgoing.date.isoformat(), new_date=new_day.isoformat(), archived=archived).info(
            "[ROLLOVER] Day changed"
        )
        self.notifier.day_rolled_over(outgoing.date, new_day)
        return result

    # Errors

    def report(self, error: HundredsError) -> None:
        """Deliver a recoverable error through the caller-visible channel."""
        logger.bind(error_type=type(error).__name__).warning(f"[ENGINE] {error}")
        self.errors.append(error)
        self.notifier.error_reported(error)

    def drain_errors(self) -> list[HundredsError]:
        """Return and clear the errors reported since the last drain."""
        with self.lock:
            drained = list(self.errors)
            self.errors.clear()
            return drained

    def _persist(self, record: DayRecord) -> PersistenceWriteFailedError | None:
        try:
            self.store.upsert(record)
        except PersistenceWriteFailedError as e:
            self.report(e)
            return e
        return None
