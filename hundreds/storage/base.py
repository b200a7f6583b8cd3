"""History store contract.

The core only ever talks to storage through this protocol. Each call is
assumed durable and atomic on its own; nothing spans multiple calls.

Implementations raise `StorageUnavailableError` when a read fails and
`PersistenceWriteFailedError` when a write fails.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from hundreds.progress.day_record import DayRecord


class HistoryStore(Protocol):
    def get(self, day: date) -> DayRecord | None:
        """Return the record stored for `day`, or None when there is none."""
        ...

    def upsert(self, record: DayRecord) -> None:
        """Insert or overwrite the record for `record.date`."""
        ...

    def all(self, start: date | None = None, end: date | None = None) -> Sequence[DayRecord]:
        """Records with start <= date <= end (open-ended when None), ascending by date."""
        ...

    def delete_all(self) -> None: ...
