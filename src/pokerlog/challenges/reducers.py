"""One reduction per goal category, registered in ``REDUCERS``.

Every reducer takes the already-selected sessions and an optional last day
(used by ``streak``) and returns the goal's current value.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

from pokerlog.analytics.aggregator import (
    is_win,
    longest_winning_streak,
    session_hours,
    session_profit,
    win_rate,
)

Reducer = Callable[[Sequence[Any], date | None], int | float]


def reduce_sessions(sessions: Sequence[Any], end: date | None = None) -> int:
    return len(sessions)


def reduce_profit(sessions: Sequence[Any], end: date | None = None) -> int:
    """Signed profit sum; losses lower the value."""
    return sum(session_profit(s) for s in sessions)


def reduce_hours(sessions: Sequence[Any], end: date | None = None) -> float:
    return sum(session_hours(s) for s in sessions)


def reduce_streak(sessions: Sequence[Any], end: date | None = None) -> int:
    return longest_winning_streak(sessions, end)


def reduce_venue(sessions: Sequence[Any], end: date | None = None) -> int:
    """Number of distinct venues visited."""
    return len({s.venue for s in sessions})


def reduce_win_rate(sessions: Sequence[Any], end: date | None = None) -> float:
    wins = sum(1 for s in sessions if is_win(s))
    return win_rate(wins, len(sessions))


REDUCERS: dict[str, Reducer] = {
    "sessions": reduce_sessions,
    "profit": reduce_profit,
    "hours": reduce_hours,
    "streak": reduce_streak,
    "venue": reduce_venue,
    "winRate": reduce_win_rate,
}


def reduce(category: str, sessions: Sequence[Any], end: date | None = None) -> int | float:
    """Current value of ``category`` over ``sessions``.

    Raises:
        ValueError: no reducer is registered for ``category``.
    """
    try:
        reducer = REDUCERS[category]
    except KeyError:
        msg = f"Unknown goal category: {category}"
        raise ValueError(msg) from None
    return reducer(sessions, end)
