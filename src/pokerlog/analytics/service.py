"""Dashboard and analytics queries over a user's sessions.

Stats are always recomputed from the session rows; nothing here is cached.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.analytics.aggregator import (
    aggregate,
    compute_totals,
    daily_profit_series,
    is_win,
    longest_winning_streak,
    session_profit,
    tail,
    win_rate,
)
from pokerlog.analytics.period import get_week_start, local_today, resolve_period
from pokerlog.config import get_settings
from pokerlog.errors import InputValidationError
from pokerlog.sessions.service import list_user_sessions

logger = structlog.get_logger()


def summarize(sessions: list) -> dict:
    """All-time headline numbers used by the profile and rankings."""
    totals = compute_totals(sessions)
    wins = sum(1 for s in sessions if is_win(s))
    return {
        "total_sessions": totals["sessions"],
        "total_profit": totals["profit"],
        "total_hours": totals["hours"],
        "win_rate": win_rate(wins, totals["sessions"]),
    }


async def get_analytics(
    db: AsyncSession,
    user_id: int,
    period: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    dimension: str | None = None,
    now: datetime | None = None,
) -> dict:
    settings = get_settings()
    bounds = resolve_period(period, start_date, end_date, now=now, tz=settings.day_timezone)
    sessions = await list_user_sessions(db, user_id)
    try:
        result = aggregate(sessions, bounds, dimension)
    except ValueError as e:
        raise InputValidationError(str(e), field="dimension") from e

    totals = result["totals"]
    hours = totals["hours"]
    result["period"] = period or "all"
    result["start"] = bounds.start
    result["end"] = bounds.end
    result["totals"] = {
        **totals,
        "hourly_rate": totals["profit"] / hours if hours > 0 else 0.0,
    }
    result["recent_daily_trend"] = tail(result["daily_trend"], settings.trend_tail_buckets)
    result["recent_monthly_trend"] = tail(result["monthly_trend"], settings.trend_tail_buckets)
    return result


async def get_stats(db: AsyncSession, user_id: int, now: datetime | None = None) -> dict:
    """Dashboard headline: totals, today's and this week's profit, streak, recent sessions."""
    settings = get_settings()
    today = local_today(now, settings.day_timezone)
    week_start = get_week_start(today)

    sessions = await list_user_sessions(db, user_id)
    summary = summarize(sessions)

    return {
        "total_profit": summary["total_profit"],
        "total_sessions": summary["total_sessions"],
        "total_hours": math.floor(summary["total_hours"]),
        "win_rate": summary["win_rate"],
        "today_profit": sum(session_profit(s) for s in sessions if s.date == today),
        "week_profit": sum(session_profit(s) for s in sessions if week_start <= s.date <= today),
        "longest_streak": longest_winning_streak(sessions, today),
        "recent_sessions": sessions[: settings.recent_sessions_limit],
    }


async def get_weekly(db: AsyncSession, user_id: int, now: datetime | None = None) -> list[dict]:
    """Per-day profit for the last 7 days including today, oldest first."""
    today = local_today(now, get_settings().day_timezone)
    sessions = await list_user_sessions(db, user_id)
    return daily_profit_series(sessions, today - timedelta(days=6), today)


async def get_monthly(db: AsyncSession, user_id: int, year: int, month: int) -> list[dict]:
    """Per-day profit and session count for every day of ``year``-``month``."""
    if not 1 <= month <= 12:
        msg = "month must be between 1 and 12"
        raise InputValidationError(msg, field="month")
    last = calendar.monthrange(year, month)[1]
    sessions = await list_user_sessions(db, user_id)
    return daily_profit_series(sessions, date(year, month, 1), date(year, month, last))
