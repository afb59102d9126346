"""Ranking API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.auth.dependencies import get_current_user
from pokerlog.database import get_session
from pokerlog.db.models import User
from pokerlog.rankings import service
from pokerlog.rankings.schemas import (
    MyRankingResponse,
    RankingOptInRequest,
    RankingOptInResponse,
    RankingsResponse,
)

router = APIRouter(prefix="/api/v1/users", tags=["Rankings"])


@router.get("/ranking", response_model=RankingsResponse)
async def get_rankings(
    category: str = Query("profit"),
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1, le=100),
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Leaderboard page for a category. Only opted-in players appear."""
    return await service.get_rankings(db, category, page, per_page)


@router.get("/me/ranking", response_model=MyRankingResponse)
async def get_my_ranking(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await service.get_my_ranking(db, user)


@router.post("/me/ranking", response_model=RankingOptInResponse)
async def update_ranking_opt_in(
    body: RankingOptInRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Join or leave the leaderboards, optionally setting a nickname."""
    user = await service.update_ranking_opt_in(db, user, body.opt_in, body.nickname)
    return RankingOptInResponse(opted_in=user.ranking_opt_in, nickname=user.ranking_nickname)
