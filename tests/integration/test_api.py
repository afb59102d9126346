"""Endpoint tests for profile, levels, XP, rankings, challenges and missions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

SESSION = {
    "date": "2024-01-01",
    "venue": "Casino A",
    "game_type": "cash",
    "stakes": "1/2",
    "duration_minutes": 60,
    "buy_in": 100000,
    "cash_out": 250000,
}


class TestProfile:
    @pytest.mark.asyncio
    async def test_first_request_bootstraps_user(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/users/me")
        assert response.status_code == 200
        data = response.json()
        assert data["display_name"] == "Alice"
        assert data["ranking_opt_in"] is False
        assert data["stats"] == {"total_sessions": 0, "total_profit": 0, "total_hours": 0.0, "win_rate": 0.0}

    @pytest.mark.asyncio
    async def test_profile_stats_follow_sessions(self, authed_client: AsyncClient):
        await authed_client.post("/api/v1/sessions", json=SESSION)
        data = (await authed_client.get("/api/v1/users/me")).json()
        assert data["stats"]["total_sessions"] == 1
        assert data["stats"]["total_profit"] == 150000
        assert data["stats"]["win_rate"] == 100.0


class TestLevels:
    @pytest.mark.asyncio
    async def test_levels_are_public(self, client: AsyncClient):
        response = await client.get("/api/v1/levels")
        assert response.status_code == 200
        levels = response.json()["levels"]
        assert levels[0] == {"level": 1, "title": "Observer", "xp_required": 100, "cumulative": 0}
        assert [entry["level"] for entry in levels] == list(range(1, len(levels) + 1))

    @pytest.mark.asyncio
    async def test_my_level_starts_at_one(self, authed_client: AsyncClient):
        data = (await authed_client.get("/api/v1/users/me/level")).json()
        assert data["level"] == 1
        assert data["total_xp"] == 0
        assert data["can_earn_login_xp"] is True
        assert data["xp_rules"]["dailyLogin"] == 20


class TestXP:
    @pytest.mark.asyncio
    async def test_daily_login_once_per_day(self, authed_client: AsyncClient):
        first = await authed_client.post("/api/v1/users/me/xp", json={"action": "dailyLogin"})
        second = await authed_client.post("/api/v1/users/me/xp", json={"action": "dailyLogin"})

        assert first.status_code == 200
        assert first.json()["granted"] == 20
        assert second.json()["granted"] == 0

        level = (await authed_client.get("/api/v1/users/me/level")).json()
        assert level["total_xp"] == 20
        assert level["today_xp"] == 20
        assert level["progress"] == pytest.approx(20.0)
        assert level["can_earn_login_xp"] is False

    @pytest.mark.asyncio
    async def test_upload_with_source_id_is_idempotent(self, authed_client: AsyncClient):
        body = {"action": "uploadScreenshot", "source_id": "shot-1"}
        first = (await authed_client.post("/api/v1/users/me/xp", json=body)).json()
        second = (await authed_client.post("/api/v1/users/me/xp", json=body)).json()

        assert first["granted"] == 100
        assert first["leveled_up"] is True
        assert first["new_level"] == 2
        assert second["granted"] == 0

    @pytest.mark.asyncio
    async def test_unknown_action_is_rejected(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/users/me/xp", json={"action": "cheat"})
        assert response.status_code == 422
        assert response.json()["field"] == "action"


class TestRankings:
    @pytest.mark.asyncio
    async def test_not_opted_in(self, authed_client: AsyncClient):
        data = (await authed_client.get("/api/v1/users/me/ranking")).json()
        assert data["opted_in"] is False
        assert data["rankings"] is None

    @pytest.mark.asyncio
    async def test_only_opted_in_players_are_ranked(self, client: AsyncClient, auth_headers):
        alice = auth_headers()
        bob = auth_headers("uid-bob", "Bob")
        carol = auth_headers("uid-carol", "Carol")

        await client.post("/api/v1/sessions", json=SESSION, headers=alice)
        await client.post("/api/v1/sessions", json={**SESSION, "cash_out": 150000}, headers=bob)
        await client.post("/api/v1/sessions", json={**SESSION, "cash_out": 900000}, headers=carol)

        opt_in = await client.post("/api/v1/users/me/ranking", json={"opt_in": True, "nickname": "AceHigh"}, headers=alice)
        assert opt_in.json() == {"opted_in": True, "nickname": "AceHigh"}
        bob_opt_in = await client.post("/api/v1/users/me/ranking", json={"opt_in": True}, headers=bob)
        assert bob_opt_in.json()["nickname"] == "Bo***"

        board = (await client.get("/api/v1/users/ranking", params={"category": "profit"}, headers=carol)).json()
        assert board["total_participants"] == 2
        assert [(e["rank"], e["nickname"], e["value"]) for e in board["entries"]] == [
            (1, "AceHigh", 150000),
            (2, "Bo***", 50000),
        ]

        mine = (await client.get("/api/v1/users/me/ranking", headers=bob)).json()
        assert mine["opted_in"] is True
        assert mine["rankings"]["profit"] == {"rank": 2, "value": 50000, "total": 2, "percentile": 0.0}
        assert mine["rankings"]["winRate"] is None

    @pytest.mark.asyncio
    async def test_lone_participant_is_top_percentile(self, authed_client: AsyncClient):
        await authed_client.post("/api/v1/sessions", json=SESSION)
        await authed_client.post("/api/v1/users/me/ranking", json={"opt_in": True})

        mine = (await authed_client.get("/api/v1/users/me/ranking")).json()
        assert mine["rankings"]["profit"] == {"rank": 1, "value": 150000, "total": 1, "percentile": 100.0}

    @pytest.mark.asyncio
    async def test_opt_out_leaves_board(self, authed_client: AsyncClient):
        await authed_client.post("/api/v1/users/me/ranking", json={"opt_in": True})
        await authed_client.post("/api/v1/users/me/ranking", json={"opt_in": False})

        board = (await authed_client.get("/api/v1/users/ranking")).json()
        assert board["total_participants"] == 0
        assert board["entries"] == []

    @pytest.mark.asyncio
    async def test_unknown_category(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/users/ranking", params={"category": "bluffs"})
        assert response.status_code == 422
        assert response.json()["field"] == "category"


class TestChallenges:
    @pytest.mark.asyncio
    async def test_new_user_has_default_challenges(self, authed_client: AsyncClient):
        data = (await authed_client.get("/api/v1/challenges")).json()
        assert {c["title"] for c in data["challenges"]} == {"First Steps", "Profit Hunter", "Grinder"}

    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, authed_client: AsyncClient):
        today = datetime.now(timezone.utc).date()
        response = await authed_client.post(
            "/api/v1/challenges",
            json={
                "title": "Weekend grind",
                "type": "sessions",
                "target_value": 2,
                "start_date": (today - timedelta(days=3)).isoformat(),
                "end_date": (today + timedelta(days=3)).isoformat(),
            },
        )
        assert response.status_code == 201
        challenge = response.json()
        assert challenge["current_value"] == 0

        await authed_client.post("/api/v1/sessions", json={**SESSION, "date": (today - timedelta(days=1)).isoformat()})
        fetched = (await authed_client.get(f"/api/v1/challenges/{challenge['id']}")).json()
        assert fetched["current_value"] == 1
        assert fetched["progress_pct"] == 50.0

        patched = (
            await authed_client.patch(f"/api/v1/challenges/{challenge['id']}", json={"target_value": 1})
        ).json()
        assert patched["status"] == "completed"

        deleted = await authed_client.delete(f"/api/v1/challenges/{challenge['id']}")
        assert deleted.status_code == 204
        assert (await authed_client.get(f"/api/v1/challenges/{challenge['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, authed_client: AsyncClient):
        response = await authed_client.post(
            "/api/v1/challenges",
            json={
                "title": "Backwards",
                "type": "profit",
                "target_value": 10,
                "start_date": "2024-02-01",
                "end_date": "2024-01-01",
            },
        )
        assert response.status_code == 422
        assert response.json()["field"] == "end_date"

    @pytest.mark.asyncio
    async def test_stats(self, authed_client: AsyncClient):
        data = (await authed_client.get("/api/v1/challenges/stats")).json()
        assert data["total"] == 3
        assert data["completed"] == 0


class TestMissions:
    @pytest.mark.asyncio
    async def test_missions_track_all_time_stats(self, authed_client: AsyncClient):
        await authed_client.post("/api/v1/sessions", json=SESSION)
        data = (await authed_client.get("/api/v1/missions")).json()

        by_id = {m["id"]: m for m in data["missions"]}
        assert by_id["winRate50"]["status"] == "completed"
        assert by_id["sessions10"]["status"] == "in_progress"
        assert by_id["sessions10"]["progress_pct"] == 10.0
        assert by_id["profit1m"]["current_value"] == 150000
        assert data["completed_count"] == 3
        assert data["earned_xp"] == 50 + 100 + 200
