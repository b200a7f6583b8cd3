"""Root conftest for all tests.

Shared collaborators: a frozen clock that tests move by hand, a notifier that
records what it receives, a store that can be told to fail, and SQLite-backed
stores for persistence tests.
"""

from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from hundreds.db.session import build_session_factory, create_schema
from hundreds.errors import PersistenceWriteFailedError, StorageUnavailableError
from hundreds.progress.engine import DayRecordEngine
from hundreds.storage.memory import InMemoryHistoryStore
from hundreds.storage.sql import SqlHistoryStore

START = datetime(2025, 3, 1, 9, 30)


class FrozenClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def set(self, now: datetime) -> None:
        self.current = now

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


class RecordingNotifier:
    def __init__(self):
        self.rollovers: list[tuple[date, date]] = []
        self.imports: list[tuple[int, int]] = []
        self.errors: list[Exception] = []

    def day_rolled_over(self, old_date, new_date):
        self.rollovers.append((old_date, new_date))

    def import_completed(self, imported_count, skipped_count):
        self.imports.append((imported_count, skipped_count))

    def error_reported(self, error):
        self.errors.append(error)


class FlakyStore(InMemoryHistoryStore):
    """In-memory store whose reads and writes can be switched to failing."""

    def __init__(self, records=None):
        super().__init__(records)
        self.fail_reads = False
        self.fail_writes = False

    def get(self, day):
        if self.fail_reads:
            raise StorageUnavailableError("history database is offline")
        return super().get(day)

    def all(self, start=None, end=None):
        if self.fail_reads:
            raise StorageUnavailableError("history database is offline")
        return super().all(start, end)

    def upsert(self, record):
        if self.fail_writes:
            raise PersistenceWriteFailedError(f"disk full while saving {record.date_key}")
        super().upsert(record)


@pytest.fixture
def clock():
    return FrozenClock(START)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def engine(store, clock, notifier):
    tracker = DayRecordEngine(store=store, clock=clock, notifier=notifier)
    tracker.load_today()
    return tracker


@pytest.fixture
def sql_engine():
    """In-memory SQLite engine shared across sessions via StaticPool."""
    db = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(db)
    yield db
    db.dispose()


@pytest.fixture
def sql_store(sql_engine):
    return SqlHistoryStore(build_session_factory(sql_engine))
