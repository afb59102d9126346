"""Challenge CRUD, latch persistence, stats and the mission view."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.analytics.period import local_today
from pokerlog.challenges.evaluator import evaluate_challenge, evaluate_missions
from pokerlog.challenges.missions import MISSIONS
from pokerlog.challenges.schemas import ChallengeCreate, ChallengeUpdate
from pokerlog.config import get_settings
from pokerlog.db.models import Challenge, ChallengeType, RewardType
from pokerlog.errors import InputValidationError, NotFoundError
from pokerlog.gamification.reward_service import stage_reward
from pokerlog.sessions.service import list_user_sessions

logger = structlog.get_logger()

# Created for every new user, with windows starting on the signup day.
DEFAULT_CHALLENGES: list[dict] = [
    {
        "title": "First Steps",
        "description": "Record 3 sessions in your first week",
        "type": ChallengeType.SESSIONS.value,
        "target_value": 3,
        "reward_points": 100,
        "duration_days": 7,
    },
    {
        "title": "Profit Hunter",
        "description": "Reach 500,000 in profit this month",
        "type": ChallengeType.PROFIT.value,
        "target_value": 500_000,
        "reward_points": 200,
        "duration_months": 1,
    },
    {
        "title": "Grinder",
        "description": "Play 10 hours this month",
        "type": ChallengeType.HOURS.value,
        "target_value": 10,
        "reward_points": 150,
        "duration_months": 1,
    },
]


def add_months(day: date, months: int) -> date:
    """Same day ``months`` later, clamped to the end of a shorter month."""
    month_index = day.month - 1 + months
    year, month = day.year + month_index // 12, month_index % 12 + 1
    return day.replace(year=year, month=month, day=min(day.day, calendar.monthrange(year, month)[1]))


def _window_end(today: date, template: dict) -> date:
    if "duration_months" in template:
        return add_months(today, template["duration_months"])
    return today + timedelta(days=template["duration_days"])


def create_default_challenges(db: AsyncSession, user_id: int, today: date) -> list[Challenge]:
    """Stage the default challenges for a new user. The caller commits."""
    challenges = []
    for template in DEFAULT_CHALLENGES:
        challenge = Challenge(
            user_id=user_id,
            title=template["title"],
            description=template["description"],
            type=template["type"],
            target_value=template["target_value"],
            reward_points=template["reward_points"],
            start_date=today,
            end_date=_window_end(today, template),
        )
        db.add(challenge)
        challenges.append(challenge)
    return challenges


def _to_response(challenge: Challenge, evaluation: dict) -> dict:
    return {
        "id": challenge.id,
        "title": challenge.title,
        "description": challenge.description,
        "type": challenge.type,
        "target_value": challenge.target_value,
        "reward_points": challenge.reward_points,
        "start_date": challenge.start_date,
        "end_date": challenge.end_date,
        "current_value": evaluation["current_value"],
        "progress_pct": evaluation["progress_pct"],
        "status": evaluation["status"],
        "completed_at": challenge.completed_at,
    }


async def _evaluate_all(
    db: AsyncSession,
    user_id: int,
    challenges: list[Challenge],
    now: datetime | None = None,
) -> list[dict]:
    """Evaluate challenges and persist any newly reached completion latch.

    A latch stages the challenge reward in the same commit. If another
    request latched the same challenge first, the reward constraint rejects
    this commit and the already persisted state stands.
    """
    today = local_today(now, get_settings().day_timezone)
    sessions = await list_user_sessions(db, user_id)

    results = []
    latched = False
    for challenge in challenges:
        evaluation = evaluate_challenge(challenge, sessions, today)
        if evaluation["newly_completed"]:
            challenge.completed = True
            challenge.completed_at = datetime.now(timezone.utc)
            latched = True
            stage_reward(
                db,
                user_id,
                RewardType.CHALLENGE_COMPLETE,
                challenge.reward_points,
                reference_id=challenge.id,
                description="Challenge completed",
            )
            logger.info(
                "challenge_completed",
                user_id=user_id,
                challenge_id=challenge.id,
                reward_points=challenge.reward_points,
            )
        results.append(_to_response(challenge, evaluation))

    if latched:
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("challenge_latch_already_recorded", user_id=user_id)
    return results


async def _load_challenges(db: AsyncSession, user_id: int) -> list[Challenge]:
    result = await db.execute(
        select(Challenge)
        .where(Challenge.user_id == user_id)
        .order_by(Challenge.end_date.asc(), Challenge.created_at.asc())
    )
    return list(result.scalars().all())


async def _get_owned(db: AsyncSession, user_id: int, challenge_id: str) -> Challenge:
    result = await db.execute(
        select(Challenge).where(Challenge.id == challenge_id, Challenge.user_id == user_id)
    )
    challenge = result.scalar_one_or_none()
    if challenge is None:
        msg = f"Challenge {challenge_id} not found"
        raise NotFoundError(msg)
    return challenge


def _check_window(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        msg = "end_date must be on or after start_date"
        raise InputValidationError(msg, field="end_date")


async def list_challenges(db: AsyncSession, user_id: int, now: datetime | None = None) -> list[dict]:
    """All of a user's challenges with live progress, soonest ending first."""
    challenges = await _load_challenges(db, user_id)
    return await _evaluate_all(db, user_id, challenges, now)


async def list_active_challenges(db: AsyncSession, user_id: int, now: datetime | None = None) -> list[dict]:
    return [c for c in await list_challenges(db, user_id, now) if c["status"] == "active"]


async def get_challenge(
    db: AsyncSession,
    user_id: int,
    challenge_id: str,
    now: datetime | None = None,
) -> dict:
    challenge = await _get_owned(db, user_id, challenge_id)
    return (await _evaluate_all(db, user_id, [challenge], now))[0]


async def create_challenge(
    db: AsyncSession,
    user_id: int,
    data: ChallengeCreate,
    now: datetime | None = None,
) -> dict:
    _check_window(data.start_date, data.end_date)
    challenge = Challenge(user_id=user_id, **data.model_dump())
    db.add(challenge)
    await db.commit()
    await db.refresh(challenge)
    logger.info("challenge_created", user_id=user_id, challenge_id=challenge.id, type=challenge.type)
    return (await _evaluate_all(db, user_id, [challenge], now))[0]


async def update_challenge(
    db: AsyncSession,
    user_id: int,
    challenge_id: str,
    data: ChallengeUpdate,
    now: datetime | None = None,
) -> dict:
    """Partial update. The completion latch is never cleared by an edit."""
    challenge = await _get_owned(db, user_id, challenge_id)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    _check_window(changes.get("start_date", challenge.start_date), changes.get("end_date", challenge.end_date))

    for field, value in changes.items():
        setattr(challenge, field, value)
    await db.commit()
    await db.refresh(challenge)
    return (await _evaluate_all(db, user_id, [challenge], now))[0]


async def delete_challenge(db: AsyncSession, user_id: int, challenge_id: str) -> None:
    challenge = await _get_owned(db, user_id, challenge_id)
    await db.delete(challenge)
    await db.commit()
    logger.info("challenge_deleted", user_id=user_id, challenge_id=challenge_id)


async def get_challenge_stats(db: AsyncSession, user_id: int, now: datetime | None = None) -> dict:
    """Counts per status, completion rate and reward points earned."""
    challenges = await list_challenges(db, user_id, now)
    counts = {status: 0 for status in ("active", "completed", "expired", "scheduled")}
    for c in challenges:
        counts[c["status"]] += 1

    total = len(challenges)
    return {
        "total": total,
        **counts,
        "completion_rate": round(counts["completed"] / total * 100) if total else 0,
        "total_rewards_earned": sum(c["reward_points"] for c in challenges if c["status"] == "completed"),
    }


async def get_missions(db: AsyncSession, user_id: int) -> dict:
    """Live evaluation of the mission catalog over all-time sessions."""
    sessions = await list_user_sessions(db, user_id)
    return evaluate_missions(MISSIONS, sessions)
