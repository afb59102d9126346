"""Pydantic response models for analytics endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from pokerlog.sessions.schemas import SessionResponse


class Totals(BaseModel):
    sessions: int = 0
    profit: int = 0
    hours: float = 0.0
    hourly_rate: float = 0.0


class GameTypeBreakdown(BaseModel):
    game_type: str
    profit: int
    sessions: int
    win_rate: float


class StakesBreakdown(BaseModel):
    stakes: str
    profit: int
    sessions: int
    win_rate: float
    bb_per_100: float | None = None


class VenueBreakdown(BaseModel):
    venue: str
    profit: int
    sessions: int
    win_rate: float


class DailyBucket(BaseModel):
    date: str
    profit: int
    sessions: int


class MonthlyBucket(BaseModel):
    month: str
    profit: int
    sessions: int


class AnalyticsResponse(BaseModel):
    period: str
    start: datetime | None = None
    end: datetime | None = None
    totals: Totals
    by_game_type: list[GameTypeBreakdown] = []
    by_stakes: list[StakesBreakdown] = []
    by_venue: list[VenueBreakdown] = []
    daily_trend: list[DailyBucket] = []
    monthly_trend: list[MonthlyBucket] = []
    recent_daily_trend: list[DailyBucket] = []
    recent_monthly_trend: list[MonthlyBucket] = []


class StatsResponse(BaseModel):
    total_profit: int
    total_sessions: int
    total_hours: int
    win_rate: float
    today_profit: int
    week_profit: int
    longest_streak: int
    recent_sessions: list[SessionResponse]


class DailyProfitResponse(BaseModel):
    days: list[DailyBucket]
