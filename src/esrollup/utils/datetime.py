"""UTC helpers shared by the query builder, walker and writer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Ensure a datetime is UTC-aware; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def epoch_ms_to_datetime(epoch_ms: Any) -> Optional[datetime]:
    """Convert epoch-milliseconds (histogram bucket keys) to UTC datetime."""
    if epoch_ms is None or isinstance(epoch_ms, bool):
        return None
    try:
        ts = int(epoch_ms) / 1000.0
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    except (ValueError, TypeError, OSError, OverflowError):
        return None
