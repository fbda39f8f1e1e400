"""UTC clock utilities. The store persists timestamps as epoch milliseconds."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def epoch_millis() -> int:
    """Return the current UTC time as milliseconds since the epoch."""
    return int(utc_now().timestamp() * 1000)
