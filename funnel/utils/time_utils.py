"""Time utilities."""
import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


def epoch_ms() -> int:
    """Current time in epoch milliseconds (answer timestamps, session ids)."""
    return int(time.time() * 1000)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite round trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
