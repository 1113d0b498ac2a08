from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def iso_z(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_ago(now: datetime, **delta: float) -> str:
    """ISO-8601 (Z) timestamp for ``now`` minus ``timedelta(**delta)``."""
    return iso_z(now - timedelta(**delta))


def epoch_ms() -> int:
    return int(time.time() * 1000)
