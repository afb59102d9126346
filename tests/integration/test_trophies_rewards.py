"""Trophy awards, challenge rewards and the reward ledger."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from pokerlog.challenges import service as challenges
from pokerlog.challenges.schemas import ChallengeCreate
from pokerlog.db.models import Reward, RewardType, Trophy
from pokerlog.errors import NotFoundError
from pokerlog.gamification import reward_service, trophy_service
from pokerlog.sessions.schemas import SessionCreate
from pokerlog.sessions.service import create_session
from pokerlog.users.service import get_or_create_user

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

SESSION = {
    "date": "2024-01-01",
    "venue": "Casino A",
    "game_type": "cash",
    "stakes": "1/2",
    "duration_minutes": 60,
    "buy_in": 100000,
    "cash_out": 250000,
}


def _session(day: int, buy_in: int = 1000, cash_out: int = 2000) -> SessionCreate:
    return SessionCreate(date=date(2024, 1, day), venue="Casino A", stakes="1/2", buy_in=buy_in, cash_out=cash_out)


def _challenge(target: int = 1, reward_points: int = 50) -> ChallengeCreate:
    return ChallengeCreate(
        title="January grind",
        type="sessions",
        target_value=target,
        reward_points=reward_points,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
    )


async def _count(db, model, *where) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*where))).scalar_one()


class TestTrophyAwards:
    @pytest.mark.asyncio
    async def test_first_session_awarded_once(self, db_session, user):
        await create_session(db_session, user.id, _session(3))

        first = await trophy_service.check_and_award_trophies(db_session, user.id, now=NOW)
        again = await trophy_service.check_and_award_trophies(db_session, user.id, now=NOW)

        assert [t.type for t in first] == ["first_session"]
        assert again == []
        assert await _count(db_session, Trophy, Trophy.user_id == user.id) == 1
        assert await _count(db_session, Reward, Reward.type == RewardType.TROPHY_EARNED.value) == 1

    @pytest.mark.asyncio
    async def test_award_trophy_twice_returns_none(self, db_session, user):
        awarded = await trophy_service.award_trophy(db_session, user.id, "hours_milestone")
        duplicate = await trophy_service.award_trophy(db_session, user.id, "hours_milestone")

        assert awarded is not None
        assert awarded.rarity == "rare"
        assert duplicate is None
        assert await _count(db_session, Trophy) == 1

    @pytest.mark.asyncio
    async def test_unknown_trophy_type(self, db_session, user):
        assert await trophy_service.award_trophy(db_session, user.id, "royal_flush") is None

    @pytest.mark.asyncio
    async def test_trophy_reward_references_trophy(self, db_session, user):
        trophy = await trophy_service.award_trophy(db_session, user.id, "first_session")
        rewards = await reward_service.list_rewards(db_session, user.id)

        assert len(rewards) == 1
        assert rewards[0].reference_id == trophy.id
        assert rewards[0].points == 50
        assert rewards[0].is_claimed is False

    @pytest.mark.asyncio
    async def test_session_milestones_and_streak(self, db_session, user):
        for day in range(1, 11):
            await create_session(db_session, user.id, _session(day))

        awarded = await trophy_service.check_and_award_trophies(db_session, user.id, now=NOW)

        assert {t.type for t in awarded} == {"first_session", "sessions_milestone", "winning_streak"}
        stats = await trophy_service.get_trophy_stats(db_session, user.id)
        assert stats["total"] == 3
        assert stats["by_rarity"] == {"common": 1, "rare": 1, "epic": 1, "legendary": 0}
        assert stats["total_points_earned"] == 50 + 100 + 200

    @pytest.mark.asyncio
    async def test_latched_challenges_count_toward_trophy(self, db_session, user):
        await create_session(db_session, user.id, _session(3))
        for _ in range(10):
            await challenges.create_challenge(db_session, user.id, _challenge(), now=NOW)

        awarded = await trophy_service.check_and_award_trophies(db_session, user.id, now=NOW)

        assert {t.type for t in awarded} == {"first_session", "challenge_complete"}
        assert await _count(db_session, Reward, Reward.type == RewardType.CHALLENGE_COMPLETE.value) == 10


class TestChallengeRewards:
    @pytest.mark.asyncio
    async def test_latch_stages_one_reward(self, db_session, user):
        created = await challenges.create_challenge(db_session, user.id, _challenge(target=2), now=NOW)
        await create_session(db_session, user.id, _session(3))
        await create_session(db_session, user.id, _session(4))

        for _ in range(3):
            result = await challenges.get_challenge(db_session, user.id, created["id"], now=NOW)
            assert result["status"] == "completed"

        rewards = await reward_service.list_rewards(db_session, user.id)
        assert [(r.type, r.points, r.reference_id) for r in rewards] == [
            ("challenge_complete", 50, created["id"]),
        ]
        assert rewards[0].description == "Challenge completed"

    @pytest.mark.asyncio
    async def test_reward_recorded_by_another_request(self, db_session, user):
        created = await challenges.create_challenge(db_session, user.id, _challenge(target=2), now=NOW)
        reward_service.stage_reward(db_session, user.id, RewardType.CHALLENGE_COMPLETE, 50, reference_id=created["id"])
        await db_session.commit()
        await create_session(db_session, user.id, _session(3))
        await create_session(db_session, user.id, _session(4))

        result = await challenges.get_challenge(db_session, user.id, created["id"], now=NOW)

        assert result["status"] == "completed"
        assert await _count(db_session, Reward) == 1

    @pytest.mark.asyncio
    async def test_no_reward_while_in_progress(self, db_session, user):
        created = await challenges.create_challenge(db_session, user.id, _challenge(target=5), now=NOW)
        await create_session(db_session, user.id, _session(3))
        await challenges.get_challenge(db_session, user.id, created["id"], now=NOW)
        assert await _count(db_session, Reward) == 0


class TestRewardLedger:
    @pytest.mark.asyncio
    async def test_claim_is_idempotent(self, db_session, user):
        reward = reward_service.stage_reward(db_session, user.id, RewardType.TROPHY_EARNED, 50, reference_id="t-1")
        await db_session.commit()

        claimed = await reward_service.claim_reward(db_session, user.id, reward.id)
        claimed_at = claimed.claimed_at
        again = await reward_service.claim_reward(db_session, user.id, reward.id)

        assert claimed.is_claimed is True
        assert claimed_at is not None
        assert again.claimed_at == claimed_at

    @pytest.mark.asyncio
    async def test_claim_other_users_reward(self, db_session, user):
        bob = await get_or_create_user(db_session, "uid-bob")
        reward = reward_service.stage_reward(db_session, bob.id, RewardType.TROPHY_EARNED, 50, reference_id="t-1")
        await db_session.commit()

        with pytest.raises(NotFoundError):
            await reward_service.claim_reward(db_session, user.id, reward.id)

    @pytest.mark.asyncio
    async def test_claim_all_and_stats(self, db_session, user):
        reward_service.stage_reward(db_session, user.id, RewardType.TROPHY_EARNED, 50, reference_id="t-1")
        reward_service.stage_reward(db_session, user.id, RewardType.CHALLENGE_COMPLETE, 200, reference_id="c-1")
        await db_session.commit()

        before = await reward_service.get_reward_stats(db_session, user.id)
        assert before["pending_count"] == 2
        assert before["pending_points"] == 250
        assert before["by_type"] == {"trophy_earned": 50, "challenge_complete": 200}

        assert await reward_service.claim_all_pending(db_session, user.id) == {"claimed": 2, "total_points": 250}
        assert await reward_service.claim_all_pending(db_session, user.id) == {"claimed": 0, "total_points": 0}

        after = await reward_service.get_reward_stats(db_session, user.id)
        assert after["total_earned"] == 250
        assert after["total_claimed"] == 250
        assert after["pending_count"] == 0
        assert await reward_service.list_rewards(db_session, user.id, pending_only=True) == []


class TestTrophyRewardEndpoints:
    @pytest.mark.asyncio
    async def test_catalog_is_public(self, client: AsyncClient):
        response = await client.get("/api/v1/trophies/catalog")
        assert response.status_code == 200
        assert len(response.json()) == 6

    @pytest.mark.asyncio
    async def test_session_earns_trophy_and_reward(self, authed_client: AsyncClient):
        created = await authed_client.post("/api/v1/sessions", json=SESSION)
        assert created.status_code == 201
        await authed_client.patch(f"/api/v1/sessions/{created.json()['id']}", json={"notes": "deep run"})

        trophies = (await authed_client.get("/api/v1/trophies")).json()
        assert trophies["total"] == 1
        assert trophies["trophies"][0]["type"] == "first_session"

        stats = (await authed_client.get("/api/v1/trophies/stats")).json()
        assert stats["by_rarity"]["common"] == 1

        pending = (await authed_client.get("/api/v1/rewards/pending")).json()
        assert pending["total"] == 1
        assert pending["rewards"][0]["points"] == 50

        claim_all = (await authed_client.post("/api/v1/rewards/claim-all")).json()
        assert claim_all == {"claimed": 1, "total_points": 50}

        reward_stats = (await authed_client.get("/api/v1/rewards/stats")).json()
        assert reward_stats["total_claimed"] == 50
        assert reward_stats["pending_count"] == 0

    @pytest.mark.asyncio
    async def test_claim_single_reward(self, authed_client: AsyncClient):
        await authed_client.post("/api/v1/sessions", json=SESSION)
        reward_id = (await authed_client.get("/api/v1/rewards")).json()["rewards"][0]["id"]

        first = await authed_client.post(f"/api/v1/rewards/{reward_id}/claim")
        second = await authed_client.post(f"/api/v1/rewards/{reward_id}/claim")

        assert first.status_code == 200
        assert first.json()["is_claimed"] is True
        assert second.status_code == 200
        assert second.json()["is_claimed"] is True

    @pytest.mark.asyncio
    async def test_claim_unknown_reward(self, authed_client: AsyncClient):
        response = await authed_client.post("/api/v1/rewards/nope/claim")
        assert response.status_code == 404
