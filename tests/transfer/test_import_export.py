"""Tests for JSON export and import."""

import json
from datetime import date, datetime, timezone

import pytest

from hundreds.errors import InvalidImportFormatError, InvalidImportRecordError, PersistenceWriteFailedError
from hundreds.exercises.catalog import ExerciseKind
from hundreds.progress.day_record import DayRecord
from hundreds.progress.engine import DayRecordEngine
from hundreds.storage.memory import InMemoryHistoryStore
from hundreds.transfer.service import (
    build_export,
    default_export_filename,
    export_json,
    import_file,
    import_payload,
    validate_candidate,
    write_export,
)

TODAY = date(2025, 3, 1)


def _values(pushups=0, situps=0, squats=0, running=0.0):
    return {"pushups": pushups, "situps": situps, "squats": squats, "running": running}


class TestExport:
    def test_payload_shape(self, engine, store):
        store.upsert(DayRecord(date(2025, 2, 27), pushups=30))
        engine.set_value(ExerciseKind.RUNNING, 2.5)

        data = json.loads(export_json(engine))

        assert set(data) == {"currentDate", "currentData", "workoutHistory", "version", "exportDate"}
        assert data["currentDate"] == "2025-03-01"
        assert data["currentData"] == _values(running=2.5)
        assert list(data["workoutHistory"]) == ["2025-02-27", "2025-03-01"]
        assert data["workoutHistory"]["2025-02-27"]["pushups"] == 30
        assert data["version"] == "1.0"
        assert datetime.fromisoformat(data["exportDate"]).tzinfo is not None

    def test_export_date_comes_from_engine_clock(self, engine, clock):
        clock.set(datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc))

        payload = build_export(engine)

        assert payload.export_date == "2025-03-01T09:30:00+00:00"

    def test_empty_live_day_is_not_in_history(self, engine):
        payload = build_export(engine)

        assert payload.workout_history == {}
        assert payload.current_data.pushups == 0

    def test_write_export_to_directory_uses_default_name(self, engine, tmp_path):
        path = write_export(engine, tmp_path)

        assert path == tmp_path / default_export_filename(TODAY)
        assert path.name == "hundreds-backup-2025-03-01.json"
        assert json.loads(path.read_text())["currentDate"] == "2025-03-01"


class TestValidateCandidate:
    def test_valid_record_is_clamped(self):
        record = validate_candidate("2025-02-20", _values(pushups=-3, situps=2000, running=3.14))

        assert record == DayRecord(date(2025, 2, 20), pushups=0, situps=999, running=3.1)

    @pytest.mark.parametrize(
        "key, values",
        [
            ("2025-02-30", _values()),
            ("2025-2-3", _values()),
            ("yesterday", _values()),
            ("2025-02-20", {"pushups": 1, "situps": 1, "squats": 1}),
            ("2025-02-20", _values(situps="abc")),
            ("2025-02-20", _values(squats="50")),
            ("2025-02-20", _values(pushups=True)),
            ("2025-02-20", _values(pushups=None)),
            ("2025-02-20", [1, 2, 3, 4]),
        ],
    )
    def test_invalid_candidates(self, key, values):
        with pytest.raises(InvalidImportRecordError) as excinfo:
            validate_candidate(key, values)

        assert excinfo.value.key == key


class TestImport:
    def test_bad_record_is_skipped_and_rest_applied(self, engine, store, notifier):
        payload = {
            "workoutHistory": {
                "2025-02-20": _values(pushups=50, situps="abc"),
                "2025-02-21": _values(squats=60),
            }
        }

        report = import_payload(engine, json.dumps(payload))

        assert (report.imported, report.skipped) == (1, 1)
        assert isinstance(report.errors[0], InvalidImportRecordError)
        assert store.get(date(2025, 2, 20)) is None
        assert store.get(date(2025, 2, 21)).squats == 60
        assert notifier.imports == [(1, 1)]

    def test_import_overwrites_whole_record(self, engine, store):
        store.upsert(DayRecord(date(2025, 2, 21), pushups=80, squats=20))

        import_payload(engine, {"workoutHistory": {"2025-02-21": _values(situps=15)}})

        assert store.get(date(2025, 2, 21)) == DayRecord(date(2025, 2, 21), situps=15)

    def test_history_entry_for_today_replaces_live_record(self, engine):
        engine.set_value(ExerciseKind.PUSHUPS, 5)

        import_payload(engine, {"workoutHistory": {"2025-03-01": _values(pushups=70, running=4.0)}})

        assert engine.current == DayRecord(TODAY, pushups=70, running=4.0)

    def test_current_data_for_today_replaces_live_record(self, engine, store):
        payload = {"currentDate": "2025-03-01", "currentData": _values(squats=33), "workoutHistory": {}}

        report = import_payload(engine, payload)

        assert report.imported == 1
        assert engine.current.squats == 33
        assert store.get(TODAY).squats == 33

    def test_current_data_wins_over_same_day_history(self, engine):
        payload = {
            "currentDate": "2025-03-01",
            "currentData": _values(pushups=90),
            "workoutHistory": {"2025-03-01": _values(pushups=40)},
        }

        report = import_payload(engine, payload)

        assert report.imported == 1
        assert engine.current.pushups == 90

    def test_empty_current_day_does_not_create_history(self, engine, store):
        """A zero-valued current day that is not stored stays out of history."""
        payload = {"currentDate": "2025-02-10", "currentData": _values(), "workoutHistory": {}}

        report = import_payload(engine, payload)

        assert store.get(date(2025, 2, 10)) is None
        assert (report.imported, report.skipped) == (0, 0)
        assert engine.current == DayRecord.empty(TODAY)

    def test_legacy_list_format(self, engine, store):
        legacy = [
            {"date": "2025-01-05", **_values(pushups=100, situps=100, squats=100, running=10.0)},
            {"date": "2025-01-06", **_values(squats=12)},
            {"pushups": 1},
        ]

        report = import_payload(engine, json.dumps(legacy))

        assert (report.imported, report.skipped) == (2, 1)
        assert store.get(date(2025, 1, 5)).is_complete

    def test_write_failure_counts_as_skipped(self, engine, store, notifier):
        store.fail_writes = True

        report = import_payload(engine, {"workoutHistory": {"2025-02-21": _values(squats=60)}})

        assert (report.imported, report.skipped) == (0, 1)
        assert isinstance(report.errors[0], PersistenceWriteFailedError)
        assert isinstance(notifier.errors[0], PersistenceWriteFailedError)

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "42",
            json.dumps({"version": "1.0"}),
            json.dumps({"workoutHistory": [1, 2]}),
        ],
    )
    def test_structurally_broken_payload_applies_nothing(self, engine, store, raw):
        with pytest.raises(InvalidImportFormatError):
            import_payload(engine, raw)

        assert len(store) == 0
        assert engine.current == DayRecord.empty(TODAY)

    def test_import_file_missing(self, engine, tmp_path):
        with pytest.raises(InvalidImportFormatError):
            import_file(engine, tmp_path / "missing.json")


class TestRoundTrip:
    def _seeded(self, clock):
        store = InMemoryHistoryStore(
            [
                DayRecord(date(2025, 2, 1), pushups=100, situps=100, squats=100, running=10.0),
                DayRecord(date(2025, 2, 14), situps=35, running=0.7),
            ]
        )
        tracker = DayRecordEngine(store=store, clock=clock)
        tracker.load_today()
        tracker.set_value(ExerciseKind.SQUATS, 42)
        return tracker

    def test_export_then_import_into_empty_store(self, clock):
        source = self._seeded(clock)
        target_store = InMemoryHistoryStore()
        target = DayRecordEngine(store=target_store, clock=clock)
        target.load_today()

        report = import_payload(target, export_json(source))

        assert report.skipped == 0
        assert target_store.all() == source.store.all()
        assert target.current == source.current

    def test_reimport_into_same_engine_changes_nothing(self, clock):
        tracker = self._seeded(clock)
        before = tracker.store.all()

        import_payload(tracker, export_json(tracker))

        assert tracker.store.all() == before

    def test_file_round_trip(self, clock, tmp_path):
        source = self._seeded(clock)
        path = write_export(source, tmp_path / "backup.json")
        target = DayRecordEngine(store=InMemoryHistoryStore(), clock=clock)

        report = import_file(target, path)

        assert report.imported == 3
        assert target.store.all() == source.store.all()
