"""Pydantic response models for user endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ProfileStats(BaseModel):
    total_sessions: int
    total_profit: int
    total_hours: float
    win_rate: float


class ProfileResponse(BaseModel):
    id: int
    email: str | None = None
    display_name: str | None = None
    ranking_opt_in: bool
    ranking_nickname: str | None = None
    created_at: datetime
    stats: ProfileStats
