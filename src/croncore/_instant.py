from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


def to_utc(dt: datetime) -> datetime:
    """Normalize a datetime to UTC. Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def from_epoch_ms(ms: int | float) -> datetime:
    return _EPOCH + timedelta(milliseconds=ms)


def to_epoch_ms(dt: datetime) -> int:
    return (to_utc(dt) - _EPOCH) // _MILLISECOND
