"""User lookup, first-sight bootstrap and profile."""

from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.analytics.period import local_today
from pokerlog.analytics.service import summarize
from pokerlog.challenges.service import create_default_challenges
from pokerlog.config import get_settings
from pokerlog.db.models import User
from pokerlog.sessions.service import list_user_sessions

logger = structlog.get_logger()


async def get_user_by_external_uid(db: AsyncSession, external_uid: str) -> User | None:
    result = await db.execute(select(User).where(User.external_uid == external_uid))
    return result.scalar_one_or_none()


async def get_or_create_user(
    db: AsyncSession,
    external_uid: str,
    *,
    email: str | None = None,
    display_name: str | None = None,
    now: datetime | None = None,
) -> User:
    """Find the user for an identity-provider subject, creating it on first sight.

    New users get the default challenges, with windows starting today.
    """
    user = await get_user_by_external_uid(db, external_uid)
    if user is not None:
        return user

    user = User(external_uid=external_uid, email=email, display_name=display_name)
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Another request created the same subject first.
        await db.rollback()
        user = await get_user_by_external_uid(db, external_uid)
        if user is None:
            raise
        return user

    create_default_challenges(db, user.id, local_today(now, get_settings().day_timezone))
    await db.commit()
    await db.refresh(user)

    logger.info("user_created", user_id=user.id, external_uid=external_uid)
    return user


async def get_profile(db: AsyncSession, user: User) -> dict:
    """The caller's record plus all-time session stats."""
    sessions = await list_user_sessions(db, user.id)
    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name,
        "ranking_opt_in": user.ranking_opt_in,
        "ranking_nickname": user.ranking_nickname,
        "created_at": user.created_at,
        "stats": summarize(sessions),
    }
