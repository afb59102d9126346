"""Trophy award service with duplicate prevention."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.analytics.service import summarize
from pokerlog.challenges.service import list_challenges
from pokerlog.db.models import Challenge, RewardType, Trophy
from pokerlog.gamification.reward_service import stage_reward
from pokerlog.gamification.trophies import (
    RARITIES,
    TROPHIES_BY_TYPE,
    eligible_trophies,
    winning_session_streak,
)
from pokerlog.sessions.service import list_user_sessions

logger = logging.getLogger(__name__)


async def trophy_stats(db: AsyncSession, user_id: int, now: datetime | None = None) -> dict:
    """All-time totals, the winning run and the latched challenge count.

    Challenges are evaluated first so a completion reached by the latest
    session is latched (and rewarded) before it is counted.
    """
    await list_challenges(db, user_id, now)
    sessions = await list_user_sessions(db, user_id)
    completed = (
        await db.execute(
            select(func.count())
            .select_from(Challenge)
            .where(Challenge.user_id == user_id, Challenge.completed.is_(True))
        )
    ).scalar_one()
    return {
        **summarize(sessions),
        "winning_streak": winning_session_streak(sessions),
        "completed_challenges": completed,
    }


async def has_trophy(db: AsyncSession, user_id: int, trophy_type: str) -> bool:
    result = await db.execute(
        select(Trophy.id).where(Trophy.user_id == user_id, Trophy.type == trophy_type)
    )
    return result.scalar_one_or_none() is not None


async def award_trophy(db: AsyncSession, user_id: int, trophy_type: str) -> Trophy | None:
    """Award a catalog trophy and its reward.

    Returns the new trophy, or None if it was already earned. The
    ``(user_id, type)`` constraint settles a race between two requests.
    """
    definition = TROPHIES_BY_TYPE.get(trophy_type)
    if definition is None:
        logger.warning("Trophy not found: %s", trophy_type)
        return None

    if await has_trophy(db, user_id, trophy_type):
        return None

    trophy = Trophy(
        user_id=user_id,
        type=trophy_type,
        title=definition["title"],
        description=definition["description"],
        icon=definition["icon"],
        rarity=definition["rarity"],
        reward_points=definition["reward_points"],
        earned_at=datetime.now(timezone.utc),
    )
    db.add(trophy)
    try:
        await db.flush()
        stage_reward(
            db,
            user_id,
            RewardType.TROPHY_EARNED,
            trophy.reward_points,
            reference_id=trophy.id,
            description="Trophy earned",
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return None

    logger.info("Trophy %s awarded to user %s", trophy_type, user_id)
    return trophy


async def check_and_award_trophies(
    db: AsyncSession,
    user_id: int,
    now: datetime | None = None,
) -> list[Trophy]:
    """Award every trophy the user qualifies for and does not hold yet."""
    stats = await trophy_stats(db, user_id, now)
    awarded = []
    for definition in eligible_trophies(stats):
        trophy = await award_trophy(db, user_id, definition["type"])
        if trophy is not None:
            awarded.append(trophy)
    return awarded


async def list_trophies(db: AsyncSession, user_id: int) -> list[Trophy]:
    result = await db.execute(
        select(Trophy).where(Trophy.user_id == user_id).order_by(Trophy.earned_at.desc())
    )
    return list(result.scalars().all())


async def get_trophy_stats(db: AsyncSession, user_id: int) -> dict:
    trophies = await list_trophies(db, user_id)
    by_rarity = {rarity: 0 for rarity in RARITIES}
    for t in trophies:
        by_rarity[t.rarity] += 1
    return {
        "total": len(trophies),
        "by_rarity": by_rarity,
        "total_points_earned": sum(t.reward_points for t in trophies),
    }
