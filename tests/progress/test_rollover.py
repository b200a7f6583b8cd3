"""Tests for day rollover and the scheduled tick."""

from datetime import date, datetime

from hundreds.exercises.catalog import ExerciseKind
from hundreds.progress.day_record import DayRecord
from hundreds.progress.scheduler import ROLLOVER_JOB_ID, RolloverTicker, start_rollover_scheduler

TODAY = date(2025, 3, 1)
TOMORROW = date(2025, 3, 2)


class TestCheckRollover:
    def test_same_day_is_noop(self, engine, notifier):
        engine.set_value(ExerciseKind.PUSHUPS, 10)

        result = engine.check_rollover(datetime(2025, 3, 1, 23, 59))

        assert not result.rolled_over
        assert engine.current.pushups == 10
        assert notifier.rollovers == []

    def test_day_change_archives_progress_and_starts_fresh(self, engine, store, clock, notifier):
        engine.set_value(ExerciseKind.SITUPS, 70)
        clock.set(datetime(2025, 3, 2, 0, 0, 5))

        result = engine.check_rollover()

        assert result.rolled_over
        assert result.archived
        assert (result.old_date, result.new_date) == (TODAY, TOMORROW)
        assert engine.current == DayRecord.empty(TOMORROW)
        assert store.get(TODAY).situps == 70
        assert notifier.rollovers == [(TODAY, TOMORROW)]

    def test_empty_day_is_not_archived(self, engine, store, clock):
        clock.set(datetime(2025, 3, 2, 7))

        result = engine.check_rollover()

        assert result.rolled_over
        assert not result.archived
        assert len(store) == 0

    def test_second_call_on_new_day_is_noop(self, engine, clock, notifier):
        engine.set_value(ExerciseKind.SQUATS, 5)
        clock.set(datetime(2025, 3, 2, 7))

        first = engine.check_rollover()
        engine.increment(ExerciseKind.SQUATS)
        second = engine.check_rollover()

        assert first.rolled_over
        assert not second.rolled_over
        assert engine.current.squats == 1
        assert len(notifier.rollovers) == 1

    def test_archive_failure_still_rolls_over(self, engine, store, clock, notifier):
        engine.set_value(ExerciseKind.PUSHUPS, 20)
        store.fail_writes = True
        clock.set(datetime(2025, 3, 2, 7))

        result = engine.check_rollover()

        assert result.rolled_over
        assert not result.archived
        assert engine.today == TOMORROW
        assert notifier.errors

    def test_skipping_several_days(self, engine, clock):
        clock.set(datetime(2025, 3, 9, 12))

        result = engine.check_rollover()

        assert result.new_date == date(2025, 3, 9)


class TestRolloverTicker:
    def test_tick_uses_engine_clock(self, engine, clock):
        clock.set(datetime(2025, 3, 2, 0, 1))

        result = RolloverTicker(engine).tick()

        assert result.rolled_over
        assert engine.today == TOMORROW

    def test_overlapping_tick_is_skipped(self, engine, clock):
        ticker = RolloverTicker(engine)
        clock.set(datetime(2025, 3, 2, 0, 1))
        ticker._in_flight.acquire()
        try:
            assert ticker.tick() is None
        finally:
            ticker._in_flight.release()

        assert engine.today == TODAY

    def test_scheduler_registers_single_instance_job(self, engine):
        scheduler = start_rollover_scheduler(engine, interval_seconds=3600)
        try:
            job = scheduler.get_job(ROLLOVER_JOB_ID)
            assert job is not None
            assert job.max_instances == 1
            assert job.coalesce
        finally:
            scheduler.shutdown(wait=False)
