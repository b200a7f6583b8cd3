"""Recurring day-change check.

APScheduler runs `RolloverTicker.tick` on a fixed interval. The scheduler
itself never starts a second instance of the job while one is running, and
the tick guards against overlap on its own for direct callers.
"""

from __future__ import annotations

import threading

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from hundreds.progress.engine import DayRecordEngine, RolloverResult

ROLLOVER_JOB_ID = "day_rollover"


class RolloverTicker:
    """Wraps engine.check_rollover so overlapping ticks are skipped, not queued."""

    def __init__(self, engine: DayRecordEngine):
        self.engine = engine
        self._in_flight = threading.Lock()

    def tick(self) -> RolloverResult | None:
        """Run one check.

        Returns:
            The rollover result, or None if another tick was still running
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("[ROLLOVER] Previous tick still running, skipping")
            return None
        try:
            return self.engine.check_rollover(self.engine.clock.now())
        finally:
            self._in_flight.release()


def start_rollover_scheduler(engine: DayRecordEngine, interval_seconds: int = 60) -> BackgroundScheduler:
    """Start a background scheduler that checks for a day change every interval."""
    ticker = RolloverTicker(engine)
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        ticker.tick,
        trigger=IntervalTrigger(seconds=interval_seconds),
        id=ROLLOVER_JOB_ID,
        name="Day Rollover Check",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(f"[SCHEDULER] Started day rollover check (runs every {interval_seconds} seconds)")
    return scheduler
