"""
Plain fast records and the time helpers shared by the statistics engine.

Engine functions accept ``FastRecord`` instances, SQLAlchemy ``Fast`` rows or
plain dicts; anything exposing ``start_time``, ``end_time`` and ``completed``.
Timestamps are epoch milliseconds. Calendar bucketing always goes through an
explicit timezone so results never depend on the host clock or locale.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Optional, Union

import pytz

MS_PER_HOUR = 3_600_000
MS_PER_DAY = 24 * MS_PER_HOUR

Timestamp = Union[int, float, datetime]
TimezoneLike = Union[str, tzinfo, None]


@dataclass(frozen=True)
class FastRecord:
    id: str
    start_time: int
    end_time: Optional[int] = None
    target_duration: float = 16
    completed: bool = False
    user_id: Optional[str] = None
    plan_id: str = ""
    plan_name: str = ""
    note: Optional[str] = None

    @classmethod
    def from_model(cls, fast: Any) -> "FastRecord":
        return cls(
            id=field(fast, "id"),
            user_id=field(fast, "user_id"),
            start_time=field(fast, "start_time"),
            end_time=field(fast, "end_time"),
            target_duration=field(fast, "target_duration", 16),
            completed=bool(field(fast, "completed", False)),
            plan_id=field(fast, "plan_id", "") or "",
            plan_name=field(fast, "plan_name", "") or "",
            note=field(fast, "note"),
        )


def field(fast: Any, name: str, default: Any = None) -> Any:
    if isinstance(fast, Mapping):
        return fast.get(name, default)
    return getattr(fast, name, default)


def resolve_tz(tz: TimezoneLike) -> tzinfo:
    if tz is None:
        return pytz.UTC
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def finite_ms(value: Any) -> Optional[float]:
    """Return ``value`` if it is a usable epoch-ms number, else None."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def to_millis(value: Timestamp) -> int:
    """Epoch milliseconds for an int/float timestamp or a datetime (naive means UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = pytz.UTC.localize(value)
        return int(value.timestamp() * 1000)
    return int(value)


def local_datetime(ms: Any, tz: TimezoneLike = None) -> Optional[datetime]:
    ms = finite_ms(ms)
    if ms is None:
        return None
    try:
        return datetime.fromtimestamp(ms / 1000, resolve_tz(tz))
    except (OverflowError, OSError, ValueError):
        return None


def local_date(ms: Any, tz: TimezoneLike = None) -> Optional[date]:
    dt = local_datetime(ms, tz)
    return dt.date() if dt else None


def as_of_date(as_of: Timestamp, tz: TimezoneLike = None) -> date:
    if isinstance(as_of, datetime):
        if as_of.tzinfo is None:
            as_of = pytz.UTC.localize(as_of)
        return as_of.astimezone(resolve_tz(tz)).date()
    return local_date(as_of, tz) or datetime.fromtimestamp(0, pytz.UTC).date()


def is_completed(fast: Any) -> bool:
    """Completed with a usable end time."""
    return bool(field(fast, "completed")) and finite_ms(field(fast, "end_time")) is not None


def completed_fasts(fasts) -> list:
    return [f for f in (fasts or []) if is_completed(f)]


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def day_before(d: date) -> date:
    return d - timedelta(days=1)
