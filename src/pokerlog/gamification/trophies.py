"""Trophy catalog and eligibility.

Each entry names the metric it reads from the trophy stats and the
threshold that metric has to reach. Evaluation is pure; persistence lives
in ``trophy_service``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pokerlog.analytics.aggregator import is_win

TROPHY_CATALOG: list[dict] = [
    {
        "type": "first_session",
        "title": "First Game",
        "description": "Recorded your first session",
        "icon": "sports_esports",
        "rarity": "common",
        "reward_points": 50,
        "metric": "total_sessions",
        "threshold": 1,
    },
    {
        "type": "sessions_milestone",
        "title": "Regular Player",
        "description": "Played 10 sessions",
        "icon": "event_repeat",
        "rarity": "rare",
        "reward_points": 100,
        "metric": "total_sessions",
        "threshold": 10,
    },
    {
        "type": "profit_milestone",
        "title": "Millionaire",
        "description": "Earned 1,000,000 in profit",
        "icon": "payments",
        "rarity": "epic",
        "reward_points": 300,
        "metric": "total_profit",
        "threshold": 1_000_000,
    },
    {
        "type": "hours_milestone",
        "title": "Dedicated Grinder",
        "description": "Played for 100 hours",
        "icon": "schedule",
        "rarity": "rare",
        "reward_points": 150,
        "metric": "total_hours",
        "threshold": 100,
    },
    {
        "type": "winning_streak",
        "title": "Hot Streak",
        "description": "5 winning sessions in a row",
        "icon": "local_fire_department",
        "rarity": "epic",
        "reward_points": 200,
        "metric": "winning_streak",
        "threshold": 5,
    },
    {
        "type": "challenge_complete",
        "title": "Challenge Master",
        "description": "Completed 10 challenges",
        "icon": "emoji_events",
        "rarity": "legendary",
        "reward_points": 500,
        "metric": "completed_challenges",
        "threshold": 10,
    },
]

TROPHIES_BY_TYPE: dict[str, dict] = {t["type"]: t for t in TROPHY_CATALOG}

RARITIES = ("common", "rare", "epic", "legendary")


def winning_session_streak(sessions: Iterable[Any]) -> int:
    """Longest run of consecutive winning sessions.

    Sessions are ordered by date; same-day sessions keep the reverse of
    their input order, so a newest-first list plays back chronologically.
    """
    longest = current = 0
    for s in sorted(reversed(list(sessions)), key=lambda s: s.date):
        current = current + 1 if is_win(s) else 0
        longest = max(longest, current)
    return longest


def eligible_trophies(stats: dict) -> list[dict]:
    """Catalog entries whose threshold ``stats`` has reached, in catalog order."""
    return [t for t in TROPHY_CATALOG if stats.get(t["metric"], 0) >= t["threshold"]]
