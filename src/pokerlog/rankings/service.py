"""Ranking queries over the opted-in population."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.config import get_settings
from pokerlog.db.models import PokerSession, User
from pokerlog.errors import InputValidationError
from pokerlog.gamification.level_thresholds import level_for_xp
from pokerlog.gamification.xp_service import get_total_xp_by_user
from pokerlog.rankings.ranking import (
    RANKING_CATEGORIES,
    build_player,
    locate_player,
    rank_players,
)

logger = structlog.get_logger()


def display_nickname(user: User) -> str:
    """Stored ranking nickname, else a masked display name, else ``Player<id>``."""
    if user.ranking_nickname:
        return user.ranking_nickname
    if user.display_name:
        return f"{user.display_name[:2]}***"
    return f"Player{user.id}"


async def load_population(db: AsyncSession) -> list[dict]:
    """Metrics for every opted-in user, computed from all-time sessions."""
    result = await db.execute(select(User).where(User.ranking_opt_in.is_(True)))
    users = list(result.scalars().all())
    if not users:
        return []

    user_ids = [u.id for u in users]
    sessions_result = await db.execute(
        select(PokerSession).where(PokerSession.user_id.in_(user_ids))
    )
    sessions_by_user: dict[int, list[PokerSession]] = defaultdict(list)
    for s in sessions_result.scalars():
        sessions_by_user[s.user_id].append(s)

    xp_totals = await get_total_xp_by_user(db, user_ids)

    return [
        build_player(
            user_id=u.id,
            nickname=display_nickname(u),
            opted_in_at=u.ranking_opt_in_at,
            level=level_for_xp(xp_totals[u.id]),
            sessions=sessions_by_user[u.id],
        )
        for u in users
    ]


def _check_category(category: str) -> None:
    if category not in RANKING_CATEGORIES:
        msg = f"Unknown ranking category '{category}'. Expected one of: {', '.join(RANKING_CATEGORIES)}"
        raise InputValidationError(msg, field="category")


async def get_rankings(
    db: AsyncSession,
    category: str = "profit",
    page: int = 1,
    per_page: int | None = None,
) -> dict:
    """One page of the leaderboard for ``category``."""
    _check_category(category)
    settings = get_settings()
    per_page = per_page or settings.ranking_page_size

    ranked = rank_players(
        await load_population(db),
        category,
        settings.ranking_win_rate_min_sessions,
    )
    offset = (page - 1) * per_page
    entries = [
        {
            "rank": p["rank"],
            "nickname": p["nickname"],
            "value": p["value"],
            "level": p["level"],
        }
        for p in ranked[offset : offset + per_page]
    ]
    return {
        "category": category,
        "entries": entries,
        "total_participants": len(ranked),
        "page": page,
        "per_page": per_page,
    }


async def get_my_ranking(db: AsyncSession, user: User) -> dict:
    """The caller's rank in every category. Only opted-in users are ranked.

    ``winRate`` is None while the caller has too few sessions to be eligible.
    """
    if not user.ranking_opt_in:
        return {"opted_in": False, "nickname": user.ranking_nickname, "rankings": None}

    settings = get_settings()
    population = await load_population(db)
    rankings = {
        category: locate_player(
            rank_players(population, category, settings.ranking_win_rate_min_sessions),
            user.id,
        )
        for category in RANKING_CATEGORIES
    }
    return {"opted_in": True, "nickname": display_nickname(user), "rankings": rankings}


async def update_ranking_opt_in(
    db: AsyncSession,
    user: User,
    opt_in: bool,
    nickname: str | None = None,
) -> User:
    """Join or leave the leaderboards. Joining stamps the opt-in time used for tie-breaks."""
    user.ranking_opt_in = opt_in
    if opt_in:
        user.ranking_opt_in_at = datetime.now(timezone.utc)
        if nickname:
            user.ranking_nickname = nickname
        elif not user.ranking_nickname:
            user.ranking_nickname = display_nickname(user)
    await db.commit()
    await db.refresh(user)

    logger.info("ranking_opt_in_updated", user_id=user.id, opt_in=opt_in)
    return user
