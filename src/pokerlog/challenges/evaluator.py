"""Challenge and mission progress evaluation.

Two modes, kept separate on purpose:

* challenges **latch**: ``currentValue`` is recomputed live from the sessions
  in the challenge window, but once the target has been reached the status
  stays ``completed`` (the caller persists the flag).
* missions are **live**: completion is a pure function of all-time stats and
  can be lost if history changes.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from pokerlog.challenges.reducers import reduce


def progress_pct(current_value: float, target_value: float) -> float:
    """Percent toward target, clamped to [0, 100].

    A non-positive target counts as reached once the value is non-negative.
    """
    if target_value <= 0:
        return 100.0 if current_value >= 0 else 0.0
    return min(max(current_value / target_value * 100, 0.0), 100.0)


def window_sessions(sessions: Iterable[Any], start: date, end: date) -> list[Any]:
    return [s for s in sessions if start <= s.date <= end]


def _reached(current_value: float, target_value: float) -> bool:
    if target_value <= 0:
        return current_value >= 0
    return current_value >= target_value


def evaluate_challenge(challenge: Any, sessions: Sequence[Any], today: date) -> dict:
    """Evaluate one challenge against its owner's sessions.

    Status is ``completed`` when the stored flag is set or the target is
    reached while the window is open, otherwise ``scheduled`` before the
    window, ``expired`` after it and ``active`` inside it. A session
    backdated into a closed window moves ``current_value`` but never
    completes it. ``newly_completed`` tells the caller to persist the latch.
    """
    selected = window_sessions(sessions, challenge.start_date, challenge.end_date)
    current_value = reduce(challenge.type, selected, challenge.end_date)
    is_open = challenge.start_date <= today <= challenge.end_date
    newly_completed = (
        is_open
        and not challenge.completed
        and _reached(current_value, challenge.target_value)
    )

    if challenge.completed or newly_completed:
        status = "completed"
    elif today < challenge.start_date:
        status = "scheduled"
    elif today > challenge.end_date:
        status = "expired"
    else:
        status = "active"

    return {
        "current_value": current_value,
        "progress_pct": progress_pct(current_value, challenge.target_value),
        "status": status,
        "newly_completed": newly_completed,
    }


def evaluate_mission(mission: dict, sessions: Sequence[Any]) -> dict:
    """Evaluate a catalog mission over all-time sessions. Not latched."""
    current_value = reduce(mission["category"], sessions)
    if _reached(current_value, mission["target"]):
        status = "completed"
    elif current_value > 0:
        status = "in_progress"
    else:
        status = "available"

    return {
        **mission,
        "current_value": current_value,
        "progress_pct": progress_pct(current_value, mission["target"]),
        "status": status,
    }


def evaluate_missions(missions: Iterable[dict], sessions: Sequence[Any]) -> dict:
    """Evaluate the whole catalog and summarize it."""
    evaluated = [evaluate_mission(m, sessions) for m in missions]
    completed = [m for m in evaluated if m["status"] == "completed"]
    return {
        "missions": evaluated,
        "completed_count": len(completed),
        "in_progress_count": sum(1 for m in evaluated if m["status"] == "in_progress"),
        "earned_xp": sum(m["xp_reward"] for m in completed),
    }
