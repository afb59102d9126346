"""Pydantic request/response models for session endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

GameTypeLiteral = Literal["cash", "tournament"]
SkillTierLiteral = Literal["fish", "beginner", "intermediate", "advanced", "pro", "master"]


class SessionCreate(BaseModel):
    date: dt.date
    start_time: dt.datetime | None = None
    venue: str = Field(min_length=1, max_length=128)
    game_type: GameTypeLiteral = "cash"
    stakes: str = Field(min_length=1, max_length=64)
    blinds: str | None = Field(default=None, max_length=64)
    duration_minutes: int = Field(default=0, ge=0)
    buy_in: int = Field(ge=0)
    cash_out: int = Field(ge=0)
    hands: int | None = Field(default=None, ge=0)
    skill_tier: SkillTierLiteral | None = None
    notes: str | None = None
    tags: list[str] | None = None
    screenshot_url: str | None = None


class SessionUpdate(BaseModel):
    date: dt.date | None = None
    start_time: dt.datetime | None = None
    venue: str | None = Field(default=None, min_length=1, max_length=128)
    game_type: GameTypeLiteral | None = None
    stakes: str | None = Field(default=None, min_length=1, max_length=64)
    blinds: str | None = Field(default=None, max_length=64)
    duration_minutes: int | None = Field(default=None, ge=0)
    buy_in: int | None = Field(default=None, ge=0)
    cash_out: int | None = Field(default=None, ge=0)
    hands: int | None = Field(default=None, ge=0)
    skill_tier: SkillTierLiteral | None = None
    notes: str | None = None
    tags: list[str] | None = None
    screenshot_url: str | None = None


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: dt.date
    start_time: dt.datetime | None = None
    venue: str
    game_type: str
    stakes: str
    blinds: str | None = None
    duration_minutes: int
    buy_in: int
    cash_out: int
    profit: int
    hands: int | None = None
    skill_tier: str | None = None
    notes: str | None = None
    tags: list[str] | None = None
    screenshot_url: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class SessionListResponse(BaseModel):
    sessions: list[SessionResponse]
    total: int
