"""Session CRUD and session analytics endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.analytics import service as analytics
from pokerlog.analytics.schemas import AnalyticsResponse, DailyProfitResponse, StatsResponse
from pokerlog.auth.dependencies import get_current_user
from pokerlog.database import get_session
from pokerlog.db.models import User
from pokerlog.gamification.trophy_service import check_and_award_trophies
from pokerlog.sessions import service
from pokerlog.sessions.schemas import (
    SessionCreate,
    SessionListResponse,
    SessionResponse,
    SessionUpdate,
)

router = APIRouter(prefix="/api/v1/sessions", tags=["Sessions"])


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    body: SessionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Record a session. Returns 409 with ``existing_id`` for a duplicate."""
    response = SessionResponse.model_validate(await service.create_session(db, user.id, body))
    await check_and_award_trophies(db, user.id)
    return response


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    limit: int | None = Query(None, ge=1, le=1000),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    sessions = await service.list_user_sessions(db, user.id, limit=limit)
    return SessionListResponse(
        sessions=[SessionResponse.model_validate(s) for s in sessions],
        total=len(sessions),
    )


# ── Analytics ──


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Dashboard headline numbers and the most recent sessions."""
    stats = await analytics.get_stats(db, user.id)
    stats["recent_sessions"] = [SessionResponse.model_validate(s) for s in stats["recent_sessions"]]
    return StatsResponse(**stats)


@router.get("/weekly", response_model=DailyProfitResponse)
async def get_weekly(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Profit per day for the last 7 days."""
    return DailyProfitResponse(days=await analytics.get_weekly(db, user.id))


@router.get("/monthly", response_model=DailyProfitResponse)
async def get_monthly(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return DailyProfitResponse(days=await analytics.get_monthly(db, user.id, year, month))


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    period: str = Query("all"),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    dimension: str | None = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Totals, breakdowns and trend series for a period."""
    return await analytics.get_analytics(
        db,
        user.id,
        period=period,
        start_date=start_date,
        end_date=end_date,
        dimension=dimension,
    )


# ── Single session ──


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session_by_id(
    session_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await service.get_user_session(db, user.id, session_id)


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    body: SessionUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    response = SessionResponse.model_validate(await service.update_session(db, user.id, session_id, body))
    await check_and_award_trophies(db, user.id)
    return response


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await service.delete_session(db, user.id, session_id)
    return Response(status_code=204)
