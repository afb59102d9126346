"""XP grant service with daily caps, idempotency and level-up detection."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date, datetime, timezone

import redis.asyncio as aioredis
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.analytics.period import local_today
from pokerlog.config import Settings, get_settings
from pokerlog.db.models import XPAction, XPLedger
from pokerlog.errors import InputValidationError
from pokerlog.gamification.level_thresholds import LEVEL_THRESHOLDS, compute_level, level_for_xp
from pokerlog.gamification.locks import grant_lock

logger = logging.getLogger(__name__)

XP_ACTIONS: tuple[str, ...] = tuple(action.value for action in XPAction)

# Actions claimable once per calendar day.
_ONCE_PER_DAY = frozenset({XPAction.DAILY_LOGIN.value, XPAction.VIEW_ANALYTICS.value})


def xp_rules(settings: Settings | None = None) -> dict[str, int]:
    """Base XP per action plus the manual record daily ceiling."""
    settings = settings or get_settings()
    return {
        XPAction.DAILY_LOGIN.value: settings.xp_daily_login,
        XPAction.UPLOAD_SCREENSHOT.value: settings.xp_upload_screenshot,
        XPAction.MANUAL_RECORD.value: settings.xp_manual_record,
        XPAction.VIEW_ANALYTICS.value: settings.xp_view_analytics,
        "manualRecordDailyLimit": settings.xp_manual_record_daily_limit,
    }


async def get_total_xp(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.coalesce(func.sum(XPLedger.amount), 0)).where(XPLedger.user_id == user_id)
    )
    return int(result.scalar_one())


async def get_total_xp_by_user(db: AsyncSession, user_ids: list[int]) -> dict[int, int]:
    """Total XP for each of ``user_ids`` (users without grants map to 0)."""
    totals = dict.fromkeys(user_ids, 0)
    if not user_ids:
        return totals
    result = await db.execute(
        select(XPLedger.user_id, func.sum(XPLedger.amount))
        .where(XPLedger.user_id.in_(user_ids))
        .group_by(XPLedger.user_id)
    )
    for user_id, total in result.all():
        totals[user_id] = int(total or 0)
    return totals


async def get_day_totals(db: AsyncSession, user_id: int, day: date) -> dict[str, int]:
    """XP granted per action on one calendar day."""
    result = await db.execute(
        select(XPLedger.action, func.sum(XPLedger.amount))
        .where(XPLedger.user_id == user_id, XPLedger.day == day)
        .group_by(XPLedger.action)
    )
    return {action: int(total or 0) for action, total in result.all()}


def _zero_grant(message: str, total_xp: int | None = None) -> dict:
    return {
        "granted": 0,
        "leveled_up": False,
        "new_level": None,
        "total_xp": total_xp,
        "message": message,
    }


async def award_xp(
    db: AsyncSession,
    user_id: int,
    action: str,
    *,
    occurred_at: datetime | None = None,
    source_id: str | None = None,
    redis: aioredis.Redis | None = None,
) -> dict:
    """Grant XP for one user action, respecting the per-day rules.

    ``dailyLogin`` and ``viewAnalytics`` grant once per calendar day.
    ``manualRecord`` grants up to the remaining daily headroom (possibly a
    partial amount). ``uploadScreenshot`` grants once per ``source_id``.
    A cap hit is a zero grant, never an error.

    Decision, total read and insert run under a per-user lock, so concurrent
    grants of different actions see each other and only one reports a
    level-up. Each ledger row's idempotency key names the cap slot it
    consumed, so a racing duplicate is rejected by the database as well.

    Raises:
        InputValidationError: ``action`` is not a known XP action.
    """
    if action not in XP_ACTIONS:
        msg = f"Unknown XP action '{action}'. Expected one of: {', '.join(XP_ACTIONS)}"
        raise InputValidationError(msg, field="action")

    settings = get_settings()
    rules = xp_rules(settings)
    day = local_today(occurred_at, settings.day_timezone)
    slot_key = f"xp:{user_id}:{action}:{day.isoformat()}"

    async with grant_lock(f"xp:{user_id}", redis, settings.xp_lock_timeout_seconds):
        day_totals = await get_day_totals(db, user_id, day)
        claimed = day_totals.get(action, 0)

        if action in _ONCE_PER_DAY:
            if claimed > 0:
                return _zero_grant("Already claimed today")
            granted = rules[action]
            idempotency_key = slot_key
        elif action == XPAction.MANUAL_RECORD.value:
            headroom = max(rules["manualRecordDailyLimit"] - claimed, 0)
            granted = min(rules[action], headroom)
            if granted == 0:
                return _zero_grant("Daily manual record XP limit reached")
            idempotency_key = f"{slot_key}:{claimed}"
        else:
            granted = rules[action]
            idempotency_key = f"xp:{user_id}:{action}:{source_id or uuid.uuid4().hex}"

        existing = await db.execute(
            select(XPLedger.id).where(XPLedger.idempotency_key == idempotency_key)
        )
        if existing.scalar_one_or_none() is not None:
            return _zero_grant("Already awarded")

        total_before = await get_total_xp(db, user_id)
        db.add(XPLedger(
            user_id=user_id,
            action=action,
            amount=granted,
            day=day,
            source_id=source_id,
            idempotency_key=idempotency_key,
            created_at=datetime.now(timezone.utc),
        ))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent XP grant rejected for user %s (%s)", user_id, idempotency_key)
            return _zero_grant("Already awarded")

    total_after = total_before + granted
    old_level = level_for_xp(total_before)
    new_level = level_for_xp(total_after)
    leveled_up = new_level > old_level

    logger.info("Granted %d XP to user %s for %s", granted, user_id, action)

    if leveled_up:
        await _emit_level_up(redis, user_id, old_level, new_level)

    return {
        "granted": granted,
        "leveled_up": leveled_up,
        "new_level": new_level if leveled_up else None,
        "total_xp": total_after,
        "message": None,
    }


async def _emit_level_up(
    redis: aioredis.Redis | None,
    user_id: int,
    old_level: int,
    new_level: int,
) -> None:
    """Broadcast a level-up event. Failures never affect the grant."""
    if redis is None:
        return
    title = LEVEL_THRESHOLDS[new_level - 1]["title"]
    try:
        await redis.publish(
            "pubsub:level_up",
            json.dumps({
                "user_id": user_id,
                "old_level": old_level,
                "new_level": new_level,
                "title": title,
            }),
        )
    except Exception:
        logger.warning("Failed to publish level_up broadcast", exc_info=True)


async def get_level_info(db: AsyncSession, user_id: int, now: datetime | None = None) -> dict:
    """Level, progress and today's earning state. Read only."""
    settings = get_settings()
    today = local_today(now, settings.day_timezone)

    total_xp = await get_total_xp(db, user_id)
    day_totals = await get_day_totals(db, user_id, today)
    level = compute_level(total_xp)

    return {
        "level": level["level"],
        "level_name": level["title"],
        "next_level": level["next_level"],
        "next_level_name": level["next_title"],
        "total_xp": total_xp,
        "current_xp": level["current_xp"],
        "required_xp": level["required_xp"],
        "progress": level["progress"],
        "today_xp": sum(day_totals.values()),
        "today_manual_xp": day_totals.get(XPAction.MANUAL_RECORD.value, 0),
        "can_earn_login_xp": day_totals.get(XPAction.DAILY_LOGIN.value, 0) == 0,
        "can_earn_analytics_xp": day_totals.get(XPAction.VIEW_ANALYTICS.value, 0) == 0,
        "xp_rules": xp_rules(settings),
    }
