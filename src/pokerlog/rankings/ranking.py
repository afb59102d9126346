"""Leaderboard projection: metrics per player, deterministic ordering, lookup.

Players are plain dicts built by ``build_player``. Ordering is by metric value
descending, then earliest ranking opt-in, then user id, so equal values always
rank the same way.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from pokerlog.analytics.aggregator import is_win, session_profit, win_rate
from pokerlog.challenges.evaluator import evaluate_missions
from pokerlog.challenges.missions import MISSIONS

RANKING_CATEGORIES: tuple[str, ...] = ("profit", "winRate", "sessions", "level", "missions")


def calculate_percentile(rank: int, total: int) -> float:
    """Calculate percentile from rank and total participants.

    Rank 1 out of 100 → 99.0 (top 1%)
    Rank 100 out of 100 → 0.0 (bottom)
    Rank 1 out of 1 → 100.0 (a lone participant is the top)
    """
    if total <= 0 or rank <= 0:
        return 0.0
    if total == 1:
        return 100.0
    return round(100 - (rank / total * 100), 2)


def build_player(
    *,
    user_id: int,
    nickname: str,
    opted_in_at: datetime | None,
    level: int,
    sessions: Sequence[Any],
) -> dict:
    """Compute every ranking metric for one player from all-time sessions."""
    count = len(sessions)
    wins = sum(1 for s in sessions if is_win(s))
    return {
        "user_id": user_id,
        "nickname": nickname,
        "opted_in_at": opted_in_at,
        "level": level,
        "profit": sum(session_profit(s) for s in sessions),
        "winRate": win_rate(wins, count),
        "sessions": count,
        "missions": evaluate_missions(MISSIONS, sessions)["completed_count"],
    }


def is_eligible(player: dict, category: str, min_win_rate_sessions: int) -> bool:
    if category == "winRate":
        return player["sessions"] >= min_win_rate_sessions
    return True


def _sort_key(category: str):
    def key(player: dict) -> tuple:
        opted_in_at = player["opted_in_at"]
        joined = opted_in_at.timestamp() if opted_in_at is not None else float("inf")
        return (-player[category], joined, player["user_id"])

    return key


def rank_players(
    players: Iterable[dict],
    category: str,
    min_win_rate_sessions: int = 5,
) -> list[dict]:
    """Eligible players sorted for ``category`` with 1-based ``rank`` and ``value``.

    Raises:
        ValueError: unknown category.
    """
    if category not in RANKING_CATEGORIES:
        msg = f"Unknown ranking category: {category}"
        raise ValueError(msg)

    eligible = [p for p in players if is_eligible(p, category, min_win_rate_sessions)]
    eligible.sort(key=_sort_key(category))
    return [
        {**player, "rank": index, "value": player[category]}
        for index, player in enumerate(eligible, start=1)
    ]


def locate_player(ranked: Sequence[dict], user_id: int) -> dict | None:
    """Rank, value, population size and percentile of one player, or None if absent."""
    total = len(ranked)
    for entry in ranked:
        if entry["user_id"] == user_id:
            return {
                "rank": entry["rank"],
                "value": entry["value"],
                "total": total,
                "percentile": calculate_percentile(entry["rank"], total),
            }
    return None
