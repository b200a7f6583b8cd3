"""In-memory history store.

Backs tests and ephemeral runs. A lock makes each call atomic so concurrent
readers always see a consistent snapshot.
"""

from __future__ import annotations

import threading
from datetime import date

from hundreds.progress.day_record import DayRecord


class InMemoryHistoryStore:
    def __init__(self, records: list[DayRecord] | None = None):
        self._records: dict[date, DayRecord] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self._records[record.date] = record

    def get(self, day: date) -> DayRecord | None:
        with self._lock:
            return self._records.get(day)

    def upsert(self, record: DayRecord) -> None:
        with self._lock:
            self._records[record.date] = record

    def all(self, start: date | None = None, end: date | None = None) -> list[DayRecord]:
        with self._lock:
            days = sorted(self._records)
            return [
                self._records[d]
                for d in days
                if (start is None or d >= start) and (end is None or d <= end)
            ]

    def delete_all(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
