"""Level computation tests."""

import pytest

from pokerlog.gamification.level_thresholds import (
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
    compute_level,
    level_for_xp,
)

EXAMPLE_THRESHOLDS = [
    {"level": 1, "title": "One", "xp_required": 100, "cumulative": 0},
    {"level": 2, "title": "Two", "xp_required": 200, "cumulative": 100},
    {"level": 3, "title": "Three", "xp_required": 400, "cumulative": 300},
    {"level": 4, "title": "Four", "xp_required": 0, "cumulative": 700},
]


class TestLevelTable:
    def test_eight_levels(self):
        assert len(LEVEL_THRESHOLDS) == 8
        assert MAX_LEVEL == 8

    def test_cumulative_is_running_sum(self):
        running = 0
        for entry in LEVEL_THRESHOLDS:
            assert entry["cumulative"] == running
            running += entry["xp_required"]

    def test_titles(self):
        assert [e["title"] for e in LEVEL_THRESHOLDS] == [
            "Observer", "Beginner", "Player", "Regular", "Shark", "Master", "Grandmaster", "Legend",
        ]


class TestLevelComputation:
    def test_level_1_at_zero_xp(self):
        result = compute_level(0)
        assert result["level"] == 1
        assert result["title"] == "Observer"
        assert result["progress"] == 0.0

    def test_level_boundary_99_xp(self):
        """99 XP is still level 1."""
        assert compute_level(99)["level"] == 1

    def test_level_2_at_100_xp(self):
        result = compute_level(100)
        assert result["level"] == 2
        assert result["current_xp"] == 0
        assert result["required_xp"] == 300

    def test_level_3_at_400_xp(self):
        assert compute_level(400)["level"] == 3

    def test_progress_is_fraction_of_span(self):
        result = compute_level(250, EXAMPLE_THRESHOLDS)
        assert result["level"] == 2
        assert result["current_xp"] == 150
        assert result["required_xp"] == 200
        assert result["progress"] == pytest.approx(75.0)

    def test_max_level_has_no_target(self):
        result = compute_level(16000)
        assert result["level"] == 8
        assert result["title"] == "Legend"
        assert result["required_xp"] == 0
        assert result["progress"] == 100.0
        assert result["next_level"] is None

    def test_beyond_max_level(self):
        result = compute_level(1_000_000)
        assert result["level"] == 8
        assert result["current_xp"] == 1_000_000 - 16000
        assert result["progress"] == 100.0

    @pytest.mark.parametrize("xp", [0, 1, 99, 100, 399, 400, 999, 1000, 15999, 16000, 20000])
    def test_level_for_xp_matches_compute_level(self, xp):
        assert level_for_xp(xp) == compute_level(xp)["level"]

    @pytest.mark.parametrize("xp", [0, 50, 100, 250, 999, 5000, 15999])
    def test_progress_within_bounds(self, xp):
        assert 0.0 <= compute_level(xp)["progress"] <= 100.0
