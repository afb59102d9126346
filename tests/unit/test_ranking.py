"""Ranking projector tests: ordering, tie-breaks, eligibility, percentile."""

from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from pokerlog.rankings.ranking import (
    build_player,
    calculate_percentile,
    locate_player,
    rank_players,
)


def _player(user_id: int, *, joined_day: int = 1, level: int = 1, sessions=()) -> dict:
    return build_player(
        user_id=user_id,
        nickname=f"P{user_id}",
        opted_in_at=datetime(2024, 1, joined_day, tzinfo=timezone.utc),
        level=level,
        sessions=list(sessions),
    )


def _s(buy_in: int, cash_out: int) -> SimpleNamespace:
    return SimpleNamespace(date=date(2024, 1, 1), buy_in=buy_in, cash_out=cash_out, duration_minutes=60, venue="A")


class TestRankPlayers:
    def test_sorted_descending_with_ranks(self):
        players = [
            _player(1, sessions=[_s(0, 100)]),
            _player(2, sessions=[_s(0, 300)]),
            _player(3, sessions=[_s(0, 200)]),
        ]
        ranked = rank_players(players, "profit")
        assert [(p["user_id"], p["rank"], p["value"]) for p in ranked] == [(2, 1, 300), (3, 2, 200), (1, 3, 100)]

    def test_ties_broken_by_earliest_opt_in(self):
        players = [_player(1, joined_day=5, level=3), _player(2, joined_day=2, level=3)]
        assert [p["user_id"] for p in rank_players(players, "level")] == [2, 1]

    def test_ties_then_broken_by_user_id(self):
        players = [_player(9, level=2), _player(4, level=2)]
        assert [p["user_id"] for p in rank_players(players, "level")] == [4, 9]

    def test_win_rate_requires_minimum_sessions(self):
        players = [
            _player(1, sessions=[_s(0, 10)] * 4),
            _player(2, sessions=[_s(0, 10)] * 3 + [_s(10, 0)] * 2),
        ]
        ranked = rank_players(players, "winRate", min_win_rate_sessions=5)
        assert [p["user_id"] for p in ranked] == [2]
        assert ranked[0]["value"] == 60.0

    def test_empty_population(self):
        assert rank_players([], "profit") == []

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            rank_players([], "luck")

    def test_missions_metric(self):
        player = _player(1, sessions=[_s(0, 10)] * 10)
        # winRate 10/30/50, sessions10
        assert player["missions"] == 4


class TestLocatePlayer:
    def test_found(self):
        ranked = rank_players([_player(i, level=i) for i in range(1, 5)], "level")
        assert locate_player(ranked, 3) == {"rank": 2, "value": 3, "total": 4, "percentile": 50.0}

    def test_absent(self):
        assert locate_player([], 1) is None


class TestPercentile:
    def test_top(self):
        assert calculate_percentile(1, 100) == 99.0

    def test_bottom(self):
        assert calculate_percentile(100, 100) == 0.0

    def test_degenerate(self):
        assert calculate_percentile(0, 0) == 0.0

    def test_single_participant_is_top(self):
        assert calculate_percentile(1, 1) == 100.0
