"""UTC timestamps for database columns and order numbers.

Every ``DateTime(timezone=True)`` column defaults to ``utc_now``; order
numbers embed ``compact_timestamp()`` so they sort by creation time.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def compact_timestamp(dt: datetime | None = None) -> str:
    """``YYYYMMDDHHMMSS`` for ``dt`` (default: now), always in UTC."""
    dt = dt or utc_now()
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y%m%d%H%M%S")
