"""Mission catalog.

Missions are fixed, not owned by users, and evaluated live against all-time
session stats. ``target`` units follow the category: percent for ``winRate``,
currency units for ``profit``, counts for ``sessions`` and days for ``streak``.
"""

from __future__ import annotations

MISSIONS: list[dict] = [
    {"id": "winRate10", "category": "winRate", "difficulty": "easy", "target": 10, "xp_reward": 50},
    {"id": "winRate30", "category": "winRate", "difficulty": "medium", "target": 30, "xp_reward": 100},
    {"id": "winRate50", "category": "winRate", "difficulty": "hard", "target": 50, "xp_reward": 200},
    {"id": "profit1m", "category": "profit", "difficulty": "easy", "target": 1_000_000, "xp_reward": 100},
    {"id": "profit5m", "category": "profit", "difficulty": "medium", "target": 5_000_000, "xp_reward": 200},
    {"id": "profit10m", "category": "profit", "difficulty": "hard", "target": 10_000_000, "xp_reward": 500},
    {"id": "sessions10", "category": "sessions", "difficulty": "easy", "target": 10, "xp_reward": 50},
    {"id": "sessions50", "category": "sessions", "difficulty": "medium", "target": 50, "xp_reward": 150},
    {"id": "sessions100", "category": "sessions", "difficulty": "hard", "target": 100, "xp_reward": 300},
    {"id": "streak3", "category": "streak", "difficulty": "easy", "target": 3, "xp_reward": 75},
    {"id": "streak5", "category": "streak", "difficulty": "medium", "target": 5, "xp_reward": 150},
    {"id": "streak7", "category": "streak", "difficulty": "hard", "target": 7, "xp_reward": 300},
]

MISSION_CATEGORIES: tuple[str, ...] = ("winRate", "profit", "sessions", "streak")
DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")


def get_mission(mission_id: str) -> dict | None:
    return next((m for m in MISSIONS if m["id"] == mission_id), None)
