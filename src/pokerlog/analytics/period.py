"""Period resolution for analytics queries.

A period token (``today|week|month|last30|all|custom``) resolves to inclusive
day bounds: start at 00:00:00.000 and end at 23:59:59.999 of their days, in
the configured calendar timezone. Weeks start on Sunday.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from typing import NamedTuple, TypeVar
from zoneinfo import ZoneInfo

from pokerlog.errors import InputValidationError

PERIOD_TOKENS: tuple[str, ...] = ("today", "week", "month", "last30", "all", "custom")

_END_OF_DAY = time(23, 59, 59, 999000)

T = TypeVar("T")


class PeriodBounds(NamedTuple):
    """Inclusive instant range. ``None`` on both ends means unbounded."""

    start: datetime | None
    end: datetime | None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date) -> bool:
        """True if the calendar day falls inside the bounds (both ends inclusive)."""
        if self.start is not None and day < self.start.date():
            return False
        if self.end is not None and day > self.end.date():
            return False
        return True


UNBOUNDED = PeriodBounds(None, None)


def get_zone(tz: str | None = None) -> ZoneInfo:
    """Resolve the calendar timezone (defaults to UTC)."""
    return ZoneInfo(tz or "UTC")


def local_now(now: datetime | None = None, tz: str | None = None) -> datetime:
    """Current instant expressed in the calendar timezone."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(get_zone(tz))


def local_today(now: datetime | None = None, tz: str | None = None) -> date:
    """Calendar day of ``now`` in the calendar timezone."""
    return local_now(now, tz).date()


def start_of_day(day: date, tz: str | None = None) -> datetime:
    return datetime.combine(day, time.min, tzinfo=get_zone(tz))


def end_of_day(day: date, tz: str | None = None) -> datetime:
    return datetime.combine(day, _END_OF_DAY, tzinfo=get_zone(tz))


def get_week_start(day: date) -> date:
    """Most recent Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def resolve_period(
    token: str | None,
    start: date | None = None,
    end: date | None = None,
    *,
    now: datetime | None = None,
    tz: str | None = None,
) -> PeriodBounds:
    """Resolve a period token into inclusive day bounds.

    ``all`` (and a missing token) is unbounded. ``custom`` needs both explicit
    bounds; while either is missing the filter is a no-op rather than an error
    so a caller mid-way through picking dates still gets data.

    Raises:
        InputValidationError: unknown token, or custom bounds with start after end.
    """
    token = token or "all"
    if token not in PERIOD_TOKENS:
        msg = f"Unknown period '{token}'. Expected one of: {', '.join(PERIOD_TOKENS)}"
        raise InputValidationError(msg, field="period")

    if token == "all":
        return UNBOUNDED

    if token == "custom":
        if start is None or end is None:
            return UNBOUNDED
        if start > end:
            msg = "start_date must be on or before end_date"
            raise InputValidationError(msg, field="start_date")
        return PeriodBounds(start_of_day(start, tz), end_of_day(end, tz))

    today = local_today(now, tz)
    if token == "today":
        first = today
    elif token == "week":
        first = get_week_start(today)
    elif token == "month":
        first = today.replace(day=1)
    else:  # last30
        first = today - timedelta(days=30)

    return PeriodBounds(start_of_day(first, tz), end_of_day(today, tz))


def filter_by_period(sessions: Iterable[T], bounds: PeriodBounds) -> list[T]:
    """Sessions whose ``date`` falls inside ``bounds``."""
    if bounds.is_unbounded:
        return list(sessions)
    return [s for s in sessions if bounds.contains(s.date)]  # type: ignore[attr-defined]
