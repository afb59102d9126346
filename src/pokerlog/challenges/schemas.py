"""Pydantic request/response models for challenge and mission endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field

ChallengeTypeLiteral = Literal["sessions", "profit", "hours", "streak", "venue"]
ChallengeStatusLiteral = Literal["scheduled", "active", "completed", "expired"]


# --- Challenges ---


class ChallengeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=128)
    description: str = ""
    type: ChallengeTypeLiteral
    target_value: int = Field(ge=0)
    reward_points: int = Field(default=0, ge=0)
    start_date: dt.date
    end_date: dt.date


class ChallengeUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=128)
    description: str | None = None
    target_value: int | None = Field(default=None, ge=0)
    reward_points: int | None = Field(default=None, ge=0)
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class ChallengeResponse(BaseModel):
    id: str
    title: str
    description: str
    type: str
    target_value: int
    reward_points: int
    start_date: dt.date
    end_date: dt.date
    current_value: int | float
    progress_pct: float
    status: ChallengeStatusLiteral
    completed_at: dt.datetime | None = None


class ChallengeListResponse(BaseModel):
    challenges: list[ChallengeResponse]


class ChallengeStatsResponse(BaseModel):
    total: int
    active: int
    completed: int
    expired: int
    scheduled: int
    completion_rate: int
    total_rewards_earned: int


# --- Missions ---


class MissionResponse(BaseModel):
    id: str
    category: str
    difficulty: str
    target: int
    xp_reward: int
    current_value: int | float
    progress_pct: float
    status: Literal["available", "in_progress", "completed"]


class MissionListResponse(BaseModel):
    missions: list[MissionResponse]
    completed_count: int
    in_progress_count: int
    earned_xp: int
