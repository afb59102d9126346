"""Pydantic models for gamification endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

XPActionLiteral = Literal["dailyLogin", "uploadScreenshot", "manualRecord", "viewAnalytics"]


# --- XP ---


class XPAwardRequest(BaseModel):
    action: XPActionLiteral
    source_id: str | None = Field(default=None, max_length=128)


class XPAwardResponse(BaseModel):
    granted: int
    leveled_up: bool
    new_level: int | None = None
    total_xp: int | None = None
    message: str | None = None


# --- Level ---


class LevelInfoResponse(BaseModel):
    level: int
    level_name: str
    next_level: int | None = None
    next_level_name: str | None = None
    total_xp: int
    current_xp: int
    required_xp: int
    progress: float
    today_xp: int
    today_manual_xp: int
    can_earn_login_xp: bool
    can_earn_analytics_xp: bool
    xp_rules: dict[str, int]


class LevelEntry(BaseModel):
    level: int
    title: str
    xp_required: int
    cumulative: int


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]


# --- Trophies ---


class TrophyResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    type: str
    title: str
    description: str
    icon: str
    rarity: str
    reward_points: int
    earned_at: datetime


class TrophyListResponse(BaseModel):
    trophies: list[TrophyResponse]
    total: int


class TrophyCatalogEntry(BaseModel):
    type: str
    title: str
    description: str
    icon: str
    rarity: str
    reward_points: int


class TrophyStatsResponse(BaseModel):
    total: int
    by_rarity: dict[str, int]
    total_points_earned: int


# --- Rewards ---


class RewardResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    type: str
    points: int
    description: str | None = None
    reference_id: str
    is_claimed: bool
    claimed_at: datetime | None = None
    created_at: datetime


class RewardListResponse(BaseModel):
    rewards: list[RewardResponse]
    total: int


class ClaimAllResponse(BaseModel):
    claimed: int
    total_points: int


class RewardStatsResponse(BaseModel):
    total_earned: int
    total_claimed: int
    pending_points: int
    pending_count: int
    by_type: dict[str, int]
