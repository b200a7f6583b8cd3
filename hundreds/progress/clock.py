"""Clock collaborator.

The engine and the rollover job never call `datetime.now()` directly; they
ask an injected clock so tests can cross midnight without waiting.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Protocol

from hundreds.utils.timezone import now_local


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in the configured timezone (host local time when unset)."""

    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz

    def now(self) -> datetime:
        return now_local(self.tz)
