"""Timezone helpers.

A day key is the local calendar date of a timestamp: time of day is dropped
after converting into the configured zone, so every record is keyed by local
midnight.
"""

from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Get the configured zone as a tzinfo.

    Args:
        name: IANA timezone name, or empty/None for the host's local zone

    Returns:
        ZoneInfo for the name, or None meaning "host local time"
    """
    if not name:
        return None
    return ZoneInfo(name)


def now_local(tz: tzinfo | None) -> datetime:
    """Current timezone-aware datetime in tz (host local zone when tz is None)."""
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


def day_key(reference: datetime | date, tz: tzinfo | None = None) -> date:
    """Normalize a timestamp to its local calendar day.

    Naive datetimes are taken as already local. Aware datetimes are converted
    into tz first when one is given.
    """
    if not isinstance(reference, datetime):
        return reference
    if tz is not None and reference.tzinfo is not None:
        reference = reference.astimezone(tz)
    return reference.date()


def parse_date_key(value: str) -> date:
    """Parse a `yyyy-MM-dd` key.

    Raises:
        ValueError: If value is not a strict yyyy-MM-dd date
    """
    parsed = datetime.strptime(value, "%Y-%m-%d").date()
    if parsed.isoformat() != value:
        raise ValueError(f"Date key must be zero-padded yyyy-MM-dd, got {value!r}")
    return parsed
