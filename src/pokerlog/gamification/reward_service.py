"""Reward ledger: points produced by completed challenges and earned trophies."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.db.models import Reward, RewardType
from pokerlog.errors import NotFoundError

logger = logging.getLogger(__name__)


def stage_reward(
    db: AsyncSession,
    user_id: int,
    reward_type: RewardType,
    points: int,
    reference_id: str,
    description: str | None = None,
) -> Reward:
    """Add an unclaimed reward to the session. The caller commits.

    ``(user_id, type, reference_id)`` is unique, so committing a second
    reward for the same challenge or trophy raises IntegrityError.
    """
    reward = Reward(
        user_id=user_id,
        type=reward_type.value,
        points=points,
        description=description,
        reference_id=reference_id,
        created_at=datetime.now(timezone.utc),
    )
    db.add(reward)
    return reward


async def list_rewards(db: AsyncSession, user_id: int, pending_only: bool = False) -> list[Reward]:
    """A user's rewards, newest first."""
    stmt = select(Reward).where(Reward.user_id == user_id)
    if pending_only:
        stmt = stmt.where(Reward.is_claimed.is_(False))
    result = await db.execute(stmt.order_by(Reward.created_at.desc()))
    return list(result.scalars().all())


async def claim_reward(db: AsyncSession, user_id: int, reward_id: str) -> Reward:
    """Mark one reward claimed. Claiming twice returns it unchanged."""
    result = await db.execute(
        select(Reward).where(Reward.id == reward_id, Reward.user_id == user_id)
    )
    reward = result.scalar_one_or_none()
    if reward is None:
        msg = f"Reward {reward_id} not found"
        raise NotFoundError(msg)
    if reward.is_claimed:
        return reward

    reward.is_claimed = True
    reward.claimed_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info("Reward %s claimed by user %s (%d points)", reward.id, user_id, reward.points)
    return reward


async def claim_all_pending(db: AsyncSession, user_id: int) -> dict:
    pending = await list_rewards(db, user_id, pending_only=True)
    now = datetime.now(timezone.utc)
    for reward in pending:
        reward.is_claimed = True
        reward.claimed_at = now
    if pending:
        await db.commit()
    return {"claimed": len(pending), "total_points": sum(r.points for r in pending)}


async def get_reward_stats(db: AsyncSession, user_id: int) -> dict:
    rewards = await list_rewards(db, user_id)
    by_type: dict[str, int] = defaultdict(int)
    for r in rewards:
        by_type[r.type] += r.points

    pending = [r for r in rewards if not r.is_claimed]
    return {
        "total_earned": sum(r.points for r in rewards),
        "total_claimed": sum(r.points for r in rewards if r.is_claimed),
        "pending_points": sum(r.points for r in pending),
        "pending_count": len(pending),
        "by_type": dict(by_type),
    }
