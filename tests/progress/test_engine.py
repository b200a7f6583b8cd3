"""Tests for the DayRecord engine: loading, mutation and error reporting."""

import threading
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from hypothesis import given
from hypothesis import strategies as st

from hundreds.errors import PersistenceWriteFailedError, StorageUnavailableError
from hundreds.exercises.catalog import ExerciseKind
from hundreds.progress.day_record import DayRecord
from hundreds.progress.engine import DayRecordEngine
from hundreds.storage.memory import InMemoryHistoryStore

TODAY = date(2025, 3, 1)


class _FixedClock:
    def __init__(self, now):
        self._now = now

    def now(self):
        return self._now


class TestLoadToday:
    def test_missing_record_gives_zero_record(self, engine):
        assert engine.current == DayRecord.empty(TODAY)
        assert engine.drain_errors() == []

    def test_existing_record_is_loaded(self, store, clock, notifier):
        store.upsert(DayRecord(TODAY, pushups=40, running=1.5))
        tracker = DayRecordEngine(store=store, clock=clock, notifier=notifier)

        assert tracker.load_today() == DayRecord(TODAY, pushups=40, running=1.5)

    def test_storage_failure_falls_back_and_reports(self, store, clock, notifier):
        """An unreadable store yields a zero record plus a reported error, never an exception."""
        store.fail_reads = True
        tracker = DayRecordEngine(store=store, clock=clock, notifier=notifier)

        record = tracker.load_today()

        assert record == DayRecord.empty(TODAY)
        assert len(notifier.errors) == 1
        assert isinstance(notifier.errors[0], StorageUnavailableError)
        assert [type(e) for e in tracker.drain_errors()] == [StorageUnavailableError]
        assert tracker.drain_errors() == []

    def test_aware_reference_is_converted_to_local_day(self):
        """23:30 UTC on Feb 28 is already March 1 in Tokyo."""
        reference = datetime(2025, 2, 28, 23, 30, tzinfo=timezone.utc)
        tracker = DayRecordEngine(
            store=InMemoryHistoryStore(), clock=_FixedClock(reference), tz=ZoneInfo("Asia/Tokyo")
        )

        assert tracker.load_today().date == date(2025, 3, 1)

    def test_reload_picks_up_external_writes(self, engine, store):
        store.upsert(DayRecord(TODAY, squats=25))

        assert engine.reload().squats == 25


class TestMutation:
    def test_set_value_clamps_and_persists(self, engine, store):
        record = engine.set_value(ExerciseKind.PUSHUPS, 1500)

        assert record.pushups == 999
        assert store.get(TODAY).pushups == 999

    def test_set_value_last_write_wins(self, engine):
        engine.set_value(ExerciseKind.SITUPS, 30)
        engine.set_value(ExerciseKind.SITUPS, 12)

        assert engine.current.situps == 12

    def test_increment_uses_exercise_step(self, engine):
        engine.increment(ExerciseKind.SQUATS)
        for _ in range(3):
            engine.increment(ExerciseKind.RUNNING)

        assert engine.current.squats == 1
        assert engine.current.running == 0.3

    def test_decrement_never_goes_below_zero(self, engine):
        engine.decrement(ExerciseKind.PUSHUPS)
        engine.decrement(ExerciseKind.RUNNING)

        assert engine.current.pushups == 0
        assert engine.current.running == 0

    def test_increment_at_ceiling_stays_at_ceiling(self, engine):
        engine.set_value(ExerciseKind.RUNNING, 99.9)
        engine.increment(ExerciseKind.RUNNING)

        assert engine.current.running == 99.9

    def test_reset_today_zeroes_and_persists(self, engine, store):
        engine.set_value(ExerciseKind.PUSHUPS, 60)

        engine.reset_today()

        assert engine.current == DayRecord.empty(TODAY)
        assert store.get(TODAY) == DayRecord.empty(TODAY)

    def test_write_failure_keeps_new_value_and_reports(self, engine, store, notifier):
        """A failed write-through leaves the in-memory change in place."""
        store.fail_writes = True

        record = engine.set_value(ExerciseKind.SQUATS, 50)

        assert record.squats == 50
        assert engine.current.squats == 50
        assert store.get(TODAY) is None
        assert isinstance(notifier.errors[-1], PersistenceWriteFailedError)

    def test_replace_today_ignores_other_dates(self, engine):
        assert not engine.replace_today(DayRecord(date(2025, 2, 1), pushups=5))
        assert engine.replace_today(DayRecord(TODAY, pushups=5))
        assert engine.current.pushups == 5

    def test_concurrent_increments_are_not_lost(self, engine):
        def work():
            for _ in range(50):
                engine.increment(ExerciseKind.PUSHUPS)

        threads = [threading.Thread(target=work) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert engine.current.pushups == 200


class TestIncrementDecrementProperty:
    @given(start=st.integers(min_value=0, max_value=979), steps=st.integers(min_value=1, max_value=20))
    def test_reps_round_trip(self, start, steps):
        tracker = DayRecordEngine(store=InMemoryHistoryStore(), clock=_FixedClock(datetime(2025, 3, 1, 8)))
        tracker.set_value(ExerciseKind.PUSHUPS, start)

        for _ in range(steps):
            tracker.increment(ExerciseKind.PUSHUPS)
        for _ in range(steps):
            tracker.decrement(ExerciseKind.PUSHUPS)

        assert tracker.current.pushups == start

    @given(tenths=st.integers(min_value=0, max_value=979), steps=st.integers(min_value=1, max_value=20))
    def test_running_round_trip(self, tenths, steps):
        tracker = DayRecordEngine(store=InMemoryHistoryStore(), clock=_FixedClock(datetime(2025, 3, 1, 8)))
        tracker.set_value(ExerciseKind.RUNNING, tenths / 10)

        for _ in range(steps):
            tracker.increment(ExerciseKind.RUNNING)
        for _ in range(steps):
            tracker.decrement(ExerciseKind.RUNNING)

        assert tracker.current.running == tenths / 10
