"""Pydantic models for ranking endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

RankingCategoryLiteral = Literal["profit", "winRate", "sessions", "level", "missions"]


class RankingEntry(BaseModel):
    rank: int
    nickname: str
    value: int | float
    level: int


class RankingsResponse(BaseModel):
    category: RankingCategoryLiteral
    entries: list[RankingEntry]
    total_participants: int
    page: int
    per_page: int


class MyCategoryRank(BaseModel):
    rank: int
    value: int | float
    total: int
    percentile: float


class MyRankings(BaseModel):
    profit: MyCategoryRank | None = None
    winRate: MyCategoryRank | None = None  # noqa: N815
    sessions: MyCategoryRank | None = None
    level: MyCategoryRank | None = None
    missions: MyCategoryRank | None = None


class MyRankingResponse(BaseModel):
    opted_in: bool
    nickname: str | None = None
    rankings: MyRankings | None = None


class RankingOptInRequest(BaseModel):
    opt_in: bool
    nickname: str | None = Field(default=None, min_length=1, max_length=32)


class RankingOptInResponse(BaseModel):
    opted_in: bool
    nickname: str | None = None
