"""UTC clock helpers.

Every timestamp the domain stores or compares is timezone-aware UTC.
SQLite hands back naive datetimes, so values read from storage pass
through ``ensure_tz_aware`` first.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def ensure_tz_aware(dt: datetime) -> datetime:
    """Interpret naive ``dt`` as UTC; convert aware values to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
