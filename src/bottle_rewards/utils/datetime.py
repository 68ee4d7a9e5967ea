"""Date-time helpers for timestamp columns."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, matching the DateTime columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)
