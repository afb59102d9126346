"""ORM models.

Money columns hold integer currency units. Profit is never stored: it is
always ``cash_out - buy_in`` at read time.
"""

from __future__ import annotations

import datetime as dt
import uuid
from enum import Enum

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokerlog.db.base import Base, BigIntPK, JSONType


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class GameType(str, Enum):
    CASH = "cash"
    TOURNAMENT = "tournament"


class SkillTier(str, Enum):
    FISH = "fish"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PRO = "pro"
    MASTER = "master"


class XPAction(str, Enum):
    DAILY_LOGIN = "dailyLogin"
    UPLOAD_SCREENSHOT = "uploadScreenshot"
    MANUAL_RECORD = "manualRecord"
    VIEW_ANALYTICS = "viewAnalytics"


class ChallengeType(str, Enum):
    SESSIONS = "sessions"
    PROFIT = "profit"
    HOURS = "hours"
    STREAK = "streak"
    VENUE = "venue"


class TrophyType(str, Enum):
    FIRST_SESSION = "first_session"
    SESSIONS_MILESTONE = "sessions_milestone"
    PROFIT_MILESTONE = "profit_milestone"
    HOURS_MILESTONE = "hours_milestone"
    WINNING_STREAK = "winning_streak"
    CHALLENGE_COMPLETE = "challenge_complete"


class TrophyRarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class RewardType(str, Enum):
    CHALLENGE_COMPLETE = "challenge_complete"
    TROPHY_EARNED = "trophy_earned"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """A player. Created on first sight of an identity-provider subject."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    external_uid: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    ranking_opt_in: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ranking_nickname: Mapped[str | None] = mapped_column(String(32), nullable=True)
    ranking_opt_in_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    sessions: Mapped[list[PokerSession]] = relationship(
        "PokerSession", back_populates="user", cascade="all, delete-orphan"
    )
    challenges: Mapped[list[Challenge]] = relationship(
        "Challenge", back_populates="user", cascade="all, delete-orphan"
    )


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class PokerSession(Base):
    """One completed play period for one owner."""

    __tablename__ = "poker_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    venue: Mapped[str] = mapped_column(String(128), nullable=False)
    game_type: Mapped[str] = mapped_column(String(16), nullable=False, default=GameType.CASH.value)
    stakes: Mapped[str] = mapped_column(String(64), nullable=False)
    blinds: Mapped[str | None] = mapped_column(String(64), nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    buy_in: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    cash_out: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    hands: Mapped[int | None] = mapped_column(Integer, nullable=True)
    skill_tier: Mapped[str | None] = mapped_column(String(16), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSONType, nullable=True)
    screenshot_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    user: Mapped[User] = relationship("User", back_populates="sessions")

    @property
    def profit(self) -> int:
        return self.cash_out - self.buy_in


# ---------------------------------------------------------------------------
# Gamification
# ---------------------------------------------------------------------------


class XPLedger(Base):
    """Append-only XP grants.

    ``idempotency_key`` names the cap slot a grant consumed, so a racing
    duplicate for the same slot is rejected by the unique constraint.
    """

    __tablename__ = "xp_ledger"
    __table_args__ = (
        UniqueConstraint("idempotency_key", name="xp_ledger_idempotency_key_key"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    day: Mapped[dt.date] = mapped_column(Date, nullable=False)
    source_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    idempotency_key: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Challenge(Base):
    """A user-scoped, time-boxed goal. ``completed`` latches at first crossing."""

    __tablename__ = "challenges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_value: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reward_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    user: Mapped[User] = relationship("User", back_populates="challenges")


class Trophy(Base):
    """A milestone a user has earned. At most one row per (user, type)."""

    __tablename__ = "trophies"
    __table_args__ = (
        UniqueConstraint("user_id", "type", name="trophies_user_id_type_key"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    icon: Mapped[str] = mapped_column(String(64), nullable=False)
    rarity: Mapped[str] = mapped_column(String(16), nullable=False, default=TrophyRarity.COMMON.value)
    reward_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    earned_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Reward(Base):
    """Claimable points. ``reference_id`` names the challenge or trophy that produced it."""

    __tablename__ = "rewards"
    __table_args__ = (
        UniqueConstraint("user_id", "type", "reference_id", name="rewards_user_type_reference_key"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference_id: Mapped[str] = mapped_column(String(36), nullable=False)
    is_claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    claimed_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
