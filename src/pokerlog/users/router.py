"""User profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.auth.dependencies import get_current_user
from pokerlog.database import get_session
from pokerlog.db.models import User
from pokerlog.users.schemas import ProfileResponse
from pokerlog.users.service import get_profile

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Get the authenticated user's profile and all-time stats."""
    return await get_profile(db, user)
