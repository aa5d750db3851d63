"""Selección de rangos de tiempo (día/semana/mes y ventana móvil)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, time, timedelta, timezone
from typing import Literal, Protocol, TypeVar

from dateutil.relativedelta import MO, relativedelta

PeriodKind = Literal["day", "week", "month"]
PERIOD_KINDS: tuple[PeriodKind, ...] = ("day", "week", "month")


class _Timestamped(Protocol):
    @property
    def timestamp(self) -> datetime: ...


T = TypeVar("T", bound=_Timestamped)


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


def period_bounds(kind: PeriodKind, now: datetime) -> tuple[datetime, datetime]:
    """Inclusive bounds of the day, week (Monday first) or month containing now.

    Raises:
        ValueError: If ``kind`` is unknown.
    """
    if kind == "day":
        return start_of_day(now), end_of_day(now)
    if kind == "week":
        monday = now + relativedelta(weekday=MO(-1))
        return start_of_day(monday), end_of_day(monday + timedelta(days=6))
    if kind == "month":
        first = now + relativedelta(day=1)
        last = now + relativedelta(day=31)
        return start_of_day(first), end_of_day(last)
    raise ValueError(f"Unknown period: {kind}")


def select_between(items: Iterable[T], start: datetime, end: datetime) -> list[T]:
    """Items with ``start <= timestamp <= end``, oldest first."""
    selected = [item for item in items if start <= item.timestamp <= end]
    selected.sort(key=lambda item: item.timestamp)
    return selected


def trailing_window(items: Iterable[T], now: datetime, hours: int = 24) -> list[T]:
    """Items from ``now - hours`` up to the end of today, oldest first.

    The lookback is elapsed time, so a DST change inside the window does
    not stretch or shrink it.
    """
    if now.tzinfo is None:
        start = now - timedelta(hours=hours)
    else:
        utc_start = now.astimezone(timezone.utc) - timedelta(hours=hours)
        start = utc_start.astimezone(now.tzinfo)
    return select_between(items, start, end_of_day(now))
