"""Level thresholds and computation.

``cumulative`` is the total XP at which a level is reached; ``xp_required``
is the XP needed to clear that level and reach the next one.
"""

from __future__ import annotations

LEVEL_THRESHOLDS: list[dict] = [
    {"level": 1, "title": "Observer", "xp_required": 100, "cumulative": 0},
    {"level": 2, "title": "Beginner", "xp_required": 300, "cumulative": 100},
    {"level": 3, "title": "Player", "xp_required": 600, "cumulative": 400},
    {"level": 4, "title": "Regular", "xp_required": 1000, "cumulative": 1000},
    {"level": 5, "title": "Shark", "xp_required": 2000, "cumulative": 2000},
    {"level": 6, "title": "Master", "xp_required": 4000, "cumulative": 4000},
    {"level": 7, "title": "Grandmaster", "xp_required": 8000, "cumulative": 8000},
    {"level": 8, "title": "Legend", "xp_required": 0, "cumulative": 16000},
]

MAX_LEVEL = LEVEL_THRESHOLDS[-1]["level"]


def level_for_xp(total_xp: int, thresholds: list[dict] = LEVEL_THRESHOLDS) -> int:
    """Largest level whose cumulative threshold is <= total_xp."""
    level = thresholds[0]["level"]
    for entry in thresholds:
        if total_xp >= entry["cumulative"]:
            level = entry["level"]
    return level


def compute_level(total_xp: int, thresholds: list[dict] = LEVEL_THRESHOLDS) -> dict:
    """Compute level info from total XP.

    ``progress`` is a percentage clamped to [0, 100]. At the top level there is
    no next target: ``required_xp`` is 0 and ``progress`` is 100.
    """
    index = 0
    for i, entry in enumerate(thresholds):
        if total_xp >= entry["cumulative"]:
            index = i

    current = thresholds[index]
    current_xp = total_xp - current["cumulative"]

    if index == len(thresholds) - 1:
        return {
            "level": current["level"],
            "title": current["title"],
            "current_xp": current_xp,
            "required_xp": 0,
            "progress": 100.0,
            "next_level": None,
            "next_title": None,
        }

    next_level = thresholds[index + 1]
    required_xp = next_level["cumulative"] - current["cumulative"]
    progress = current_xp / required_xp * 100 if required_xp > 0 else 100.0

    return {
        "level": current["level"],
        "title": current["title"],
        "current_xp": current_xp,
        "required_xp": required_xp,
        "progress": min(max(progress, 0.0), 100.0),
        "next_level": next_level["level"],
        "next_title": next_level["title"],
    }
