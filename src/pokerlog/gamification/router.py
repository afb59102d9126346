"""Gamification API endpoints: level info, XP awards, trophies, rewards and the level table."""

from __future__ import annotations

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.auth.dependencies import get_current_user
from pokerlog.database import get_session
from pokerlog.db.models import User
from pokerlog.gamification import reward_service, trophy_service
from pokerlog.gamification.level_thresholds import LEVEL_THRESHOLDS
from pokerlog.gamification.schemas import (
    AllLevelsResponse,
    ClaimAllResponse,
    LevelEntry,
    LevelInfoResponse,
    RewardListResponse,
    RewardResponse,
    RewardStatsResponse,
    TrophyCatalogEntry,
    TrophyListResponse,
    TrophyResponse,
    TrophyStatsResponse,
    XPAwardRequest,
    XPAwardResponse,
)
from pokerlog.gamification.trophies import TROPHY_CATALOG
from pokerlog.gamification.xp_service import award_xp, get_level_info
from pokerlog.redis_client import get_optional_redis

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


# ── Public endpoints ──


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Get all level definitions."""
    return AllLevelsResponse(levels=[LevelEntry(**entry) for entry in LEVEL_THRESHOLDS])


@router.get("/trophies/catalog", response_model=list[TrophyCatalogEntry])
async def list_trophy_catalog():
    """Get every trophy that can be earned."""
    return [TrophyCatalogEntry(**entry) for entry in TROPHY_CATALOG]


# ── Authenticated endpoints ──


@router.get("/users/me/level", response_model=LevelInfoResponse)
async def get_my_level(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Get current level, progress and today's XP state."""
    return LevelInfoResponse(**await get_level_info(db, user.id))


@router.post("/users/me/xp", response_model=XPAwardResponse)
async def add_xp(
    body: XPAwardRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
    redis: aioredis.Redis | None = Depends(get_optional_redis),
):
    """Award XP for an action. A capped action returns ``granted: 0``."""
    result = await award_xp(db, user.id, body.action, source_id=body.source_id, redis=redis)
    return XPAwardResponse(**result)


# ── Trophies ──


@router.get("/trophies", response_model=TrophyListResponse)
async def list_my_trophies(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Earned trophies, newest first. Newly reached milestones are awarded first."""
    user_id = user.id
    await trophy_service.check_and_award_trophies(db, user_id)
    trophies = await trophy_service.list_trophies(db, user_id)
    return TrophyListResponse(
        trophies=[TrophyResponse.model_validate(t) for t in trophies],
        total=len(trophies),
    )


@router.get("/trophies/stats", response_model=TrophyStatsResponse)
async def get_my_trophy_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return TrophyStatsResponse(**await trophy_service.get_trophy_stats(db, user.id))


# ── Rewards ──


@router.get("/rewards", response_model=RewardListResponse)
async def list_my_rewards(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    rewards = await reward_service.list_rewards(db, user.id)
    return RewardListResponse(rewards=[RewardResponse.model_validate(r) for r in rewards], total=len(rewards))


@router.get("/rewards/pending", response_model=RewardListResponse)
async def list_pending_rewards(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    rewards = await reward_service.list_rewards(db, user.id, pending_only=True)
    return RewardListResponse(rewards=[RewardResponse.model_validate(r) for r in rewards], total=len(rewards))


@router.get("/rewards/stats", response_model=RewardStatsResponse)
async def get_my_reward_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Points earned, claimed and pending, with a per-type split."""
    return RewardStatsResponse(**await reward_service.get_reward_stats(db, user.id))


@router.post("/rewards/claim-all", response_model=ClaimAllResponse)
async def claim_all_rewards(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return ClaimAllResponse(**await reward_service.claim_all_pending(db, user.id))


@router.post("/rewards/{reward_id}/claim", response_model=RewardResponse)
async def claim_reward(
    reward_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Claim one reward. Claiming an already claimed reward is a no-op."""
    return RewardResponse.model_validate(await reward_service.claim_reward(db, user.id, reward_id))
