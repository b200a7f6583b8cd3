"""Wiring for the progress core.

Builds one DayRecordEngine over the configured database and clock. The API
and the CLI each call this once and pass the engine around explicitly.
"""

from __future__ import annotations

from loguru import logger

from hundreds.config.settings import Settings, settings as default_settings
from hundreds.db.session import build_engine, build_session_factory, create_schema
from hundreds.progress.clock import Clock, SystemClock
from hundreds.progress.engine import DayRecordEngine
from hundreds.progress.notifications import LoggingNotifier, Notifier
from hundreds.storage.base import HistoryStore
from hundreds.storage.sql import SqlHistoryStore
from hundreds.utils.timezone import resolve_timezone


def build_store(config: Settings) -> SqlHistoryStore:
    """Create the SQL history store for config.database_url, creating tables if needed."""
    engine = build_engine(config.database_url)
    create_schema(engine)
    return SqlHistoryStore(build_session_factory(engine))


def build_tracker(
    config: Settings | None = None,
    *,
    store: HistoryStore | None = None,
    clock: Clock | None = None,
    notifier: Notifier | None = None,
) -> DayRecordEngine:
    """Create an engine and load today's record.

    Any collaborator left as None is built from config.
    """
    config = config or default_settings
    tz = resolve_timezone(config.timezone)
    engine = DayRecordEngine(
        store=store if store is not None else build_store(config),
        clock=clock or SystemClock(tz),
        notifier=notifier or LoggingNotifier(),
        tz=tz,
    )
    today = engine.load_today()
    logger.bind(day=today.date_key).info("[BOOTSTRAP] Tracker ready")
    return engine
