"""Date-time helpers shared by records and the store clock."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC timestamp."""

    return datetime.now(timezone.utc)
