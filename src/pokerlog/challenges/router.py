"""Challenge and mission API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.auth.dependencies import get_current_user
from pokerlog.challenges import service
from pokerlog.challenges.schemas import (
    ChallengeCreate,
    ChallengeListResponse,
    ChallengeResponse,
    ChallengeStatsResponse,
    ChallengeUpdate,
    MissionListResponse,
)
from pokerlog.database import get_session
from pokerlog.db.models import User

router = APIRouter(prefix="/api/v1", tags=["Challenges"])


@router.post("/challenges", response_model=ChallengeResponse, status_code=201)
async def create_challenge(
    body: ChallengeCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await service.create_challenge(db, user.id, body)


@router.get("/challenges", response_model=ChallengeListResponse)
async def list_challenges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """All challenges with live progress, soonest ending first."""
    return ChallengeListResponse(challenges=await service.list_challenges(db, user.id))


@router.get("/challenges/active", response_model=ChallengeListResponse)
async def list_active_challenges(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return ChallengeListResponse(challenges=await service.list_active_challenges(db, user.id))


@router.get("/challenges/stats", response_model=ChallengeStatsResponse)
async def get_challenge_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await service.get_challenge_stats(db, user.id)


@router.get("/challenges/{challenge_id}", response_model=ChallengeResponse)
async def get_challenge(
    challenge_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await service.get_challenge(db, user.id, challenge_id)


@router.patch("/challenges/{challenge_id}", response_model=ChallengeResponse)
async def update_challenge(
    challenge_id: str,
    body: ChallengeUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await service.update_challenge(db, user.id, challenge_id, body)


@router.delete("/challenges/{challenge_id}", status_code=204)
async def delete_challenge(
    challenge_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await service.delete_challenge(db, user.id, challenge_id)
    return Response(status_code=204)


@router.get("/missions", response_model=MissionListResponse)
async def list_missions(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Mission catalog evaluated live against all-time sessions."""
    return await service.get_missions(db, user.id)
