"""Notification collaborator.

Purely informational hooks the core calls after a day change, after an
import, and whenever a recoverable error occurs. Delivery to a real user
(toast, push notification) belongs to whoever implements the protocol.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from loguru import logger

from hundreds.errors import HundredsError


class Notifier(Protocol):
    def day_rolled_over(self, old_date: date, new_date: date) -> None: ...

    def import_completed(self, imported_count: int, skipped_count: int) -> None: ...

    def error_reported(self, error: HundredsError) -> None: ...


class LoggingNotifier:
    """Default notifier: writes every event to the log."""

    def day_rolled_over(self, old_date: date, new_date: date) -> None:
        logger.bind(old_date=old_date.isoformat(), new_date=new_date.isoformat()).info(
            "New day started! 💪"
        )

    def import_completed(self, imported_count: int, skipped_count: int) -> None:
        logger.bind(imported=imported_count, skipped=skipped_count).info(
            f"Import finished: {imported_count} imported, {skipped_count} skipped"
        )

    def error_reported(self, error: HundredsError) -> None:
        logger.bind(error_type=type(error).__name__).warning(f"Recoverable error: {error}")
