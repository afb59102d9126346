"""Session aggregation: totals, breakdowns, trend series and streaks.

All functions are pure and accept any objects exposing the session fields
(``date``, ``buy_in``, ``cash_out``, ``duration_minutes``, ``game_type``,
``stakes``, ``venue``, ``hands``, ``blinds``). Profit sums stay integral;
hours keep full precision so rates computed from them do not drift.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import date, timedelta
from typing import Any

from pokerlog.analytics.period import UNBOUNDED, PeriodBounds, filter_by_period

DIMENSIONS: tuple[str, ...] = ("game_type", "stakes", "venue")

_CURRENCY_CHARS = re.compile(r"[\s$€£¥₩]")
_STAKE_PAIR = re.compile(r"(\d[\d,]*(?:\.\d+)?)([kKmM]?)[/-](\d[\d,]*(?:\.\d+)?)([kKmM]?)")
_UNIT = {"": 1, "k": 1_000, "m": 1_000_000}


def session_profit(session: Any) -> int:
    return session.cash_out - session.buy_in


def session_hours(session: Any) -> float:
    return session.duration_minutes / 60


def is_win(session: Any) -> bool:
    """A session counts as a win when it did not lose money."""
    return session_profit(session) >= 0


def win_rate(wins: int, count: int) -> float:
    """Percentage of winning sessions, one decimal."""
    if count <= 0:
        return 0.0
    return round(wins / count * 100, 1)


def compute_totals(sessions: Sequence[Any]) -> dict:
    return {
        "sessions": len(sessions),
        "profit": sum(session_profit(s) for s in sessions),
        "hours": sum(session_hours(s) for s in sessions),
    }


# ---------------------------------------------------------------------------
# Stakes
# ---------------------------------------------------------------------------


def _to_amount(number: str, unit: str) -> float:
    return float(number.replace(",", "")) * _UNIT[unit.lower()]


def parse_big_blind(descriptor: str | None) -> float | None:
    """Best-effort big blind from a stake descriptor such as ``1/2``, ``$1K/$2K``
    or ``1,000-2,000 (200 ante)``. Returns None when nothing parseable is found.
    """
    if not descriptor:
        return None
    match = _STAKE_PAIR.search(_CURRENCY_CHARS.sub("", descriptor))
    if match is None:
        return None
    big_blind = _to_amount(match.group(3), match.group(4))
    return big_blind if big_blind > 0 else None


def bb_per_100(sessions: Sequence[Any], stakes: str) -> float | None:
    """Big blinds won per 100 hands for one stakes group.

    Only sessions with a recorded hand count contribute. None when the big
    blind cannot be inferred or no hands were recorded.
    """
    big_blind = parse_big_blind(stakes)
    if big_blind is None:
        big_blind = next(
            (bb for bb in (parse_big_blind(s.blinds) for s in sessions if getattr(s, "blinds", None)) if bb),
            None,
        )
    if big_blind is None:
        return None

    with_hands = [s for s in sessions if (s.hands or 0) > 0]
    hands = sum(s.hands for s in with_hands)
    if hands == 0:
        return None
    profit = sum(session_profit(s) for s in with_hands)
    return profit / big_blind / hands * 100


# ---------------------------------------------------------------------------
# Breakdowns
# ---------------------------------------------------------------------------


def _dimension_key(dimension: str) -> Callable[[Any], str]:
    if dimension == "game_type":
        return lambda s: getattr(s.game_type, "value", s.game_type)
    if dimension == "stakes":
        return lambda s: s.stakes
    if dimension == "venue":
        return lambda s: s.venue
    msg = f"Unknown dimension: {dimension}"
    raise ValueError(msg)


def breakdown(sessions: Sequence[Any], dimension: str) -> list[dict]:
    """Group sessions by ``dimension`` (exact match) with per-group profit,
    count and win rate. Stakes groups also carry ``bb_per_100``.

    Groups are ordered by session count, then key.
    """
    key_of = _dimension_key(dimension)
    groups: dict[str, list[Any]] = defaultdict(list)
    for s in sessions:
        groups[key_of(s)].append(s)

    rows = []
    for key, members in groups.items():
        wins = sum(1 for s in members if is_win(s))
        row: dict[str, Any] = {
            dimension: key,
            "profit": sum(session_profit(s) for s in members),
            "sessions": len(members),
            "win_rate": win_rate(wins, len(members)),
        }
        if dimension == "stakes":
            row["bb_per_100"] = bb_per_100(members, key)
        rows.append(row)

    rows.sort(key=lambda r: (-r["sessions"], r[dimension]))
    return rows


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------


def _bucketed(sessions: Iterable[Any], label: str, key_of: Callable[[Any], str]) -> list[dict]:
    buckets: dict[str, dict] = {}
    for s in sessions:
        key = key_of(s)
        bucket = buckets.setdefault(key, {label: key, "profit": 0, "sessions": 0})
        bucket["profit"] += session_profit(s)
        bucket["sessions"] += 1
    return [buckets[k] for k in sorted(buckets)]


def daily_trend(sessions: Iterable[Any]) -> list[dict]:
    """Per calendar date profit and count, ascending by date."""
    return _bucketed(sessions, "date", lambda s: s.date.isoformat())


def monthly_trend(sessions: Iterable[Any]) -> list[dict]:
    """Per year-month profit and count, ascending by month."""
    return _bucketed(sessions, "month", lambda s: s.date.strftime("%Y-%m"))


def tail(series: Sequence[dict], n: int) -> list[dict]:
    """The most recent ``n`` buckets of an ascending series."""
    if n <= 0:
        return []
    return list(series[-n:])


def daily_profit_series(sessions: Iterable[Any], first_day: date, last_day: date) -> list[dict]:
    """Zero-filled per-day profit and count for every day in ``[first_day, last_day]``."""
    by_day = {row["date"]: row for row in daily_trend(s for s in sessions if first_day <= s.date <= last_day)}
    series = []
    day = first_day
    while day <= last_day:
        key = day.isoformat()
        row = by_day.get(key, {"date": key, "profit": 0, "sessions": 0})
        series.append(row)
        day += timedelta(days=1)
    return series


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------


def longest_winning_streak(sessions: Iterable[Any], end: date | None = None) -> int:
    """Longest run of consecutive calendar days whose net profit is >= 0.

    Days are taken on or before ``end``. A day without sessions, or with a
    net loss, breaks the run.
    """
    daily: dict[date, int] = defaultdict(int)
    for s in sessions:
        if end is None or s.date <= end:
            daily[s.date] += session_profit(s)

    longest = current = 0
    previous: date | None = None
    for day in sorted(daily):
        if daily[day] < 0:
            current = 0
        elif previous is not None and current > 0 and day - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def aggregate(
    sessions: Iterable[Any],
    bounds: PeriodBounds = UNBOUNDED,
    dimension: str | None = None,
) -> dict:
    """Period-scoped analytics over a session set.

    Returns totals, breakdowns (all dimensions, or just ``dimension``) and the
    full daily and monthly trend series. An empty selection yields zero totals
    and empty lists, never None.
    """
    if dimension is not None and dimension not in DIMENSIONS:
        msg = f"Unknown dimension: {dimension}"
        raise ValueError(msg)

    selected = filter_by_period(sessions, bounds)
    dimensions = (dimension,) if dimension else DIMENSIONS

    result: dict[str, Any] = {"totals": compute_totals(selected)}
    for dim in DIMENSIONS:
        result[f"by_{dim}"] = breakdown(selected, dim) if dim in dimensions else []
    result["daily_trend"] = daily_trend(selected)
    result["monthly_trend"] = monthly_trend(selected)
    return result
