"""Session store: owner-scoped CRUD with duplicate detection."""

from __future__ import annotations

from datetime import date

import structlog
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from pokerlog.db.models import PokerSession
from pokerlog.errors import ConflictError, NotFoundError
from pokerlog.sessions.schemas import SessionCreate, SessionUpdate

logger = structlog.get_logger()

# Fields that identify the same real-world session.
_IDENTITY_FIELDS = ("date", "venue", "game_type", "stakes")


async def list_user_sessions(
    db: AsyncSession,
    user_id: int,
    limit: int | None = None,
) -> list[PokerSession]:
    """All sessions for one owner, newest first."""
    stmt = (
        select(PokerSession)
        .where(PokerSession.user_id == user_id)
        .order_by(desc(PokerSession.date), desc(PokerSession.created_at))
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_user_session(db: AsyncSession, user_id: int, session_id: str) -> PokerSession:
    """Fetch one session. Sessions owned by someone else are reported as not found."""
    result = await db.execute(
        select(PokerSession).where(
            PokerSession.id == session_id,
            PokerSession.user_id == user_id,
        )
    )
    record = result.scalar_one_or_none()
    if record is None:
        msg = f"Session {session_id} not found"
        raise NotFoundError(msg)
    return record


async def find_duplicate(
    db: AsyncSession,
    user_id: int,
    *,
    day: date,
    venue: str,
    game_type: str,
    stakes: str,
    exclude_id: str | None = None,
) -> PokerSession | None:
    stmt = select(PokerSession).where(
        PokerSession.user_id == user_id,
        PokerSession.date == day,
        PokerSession.venue == venue,
        PokerSession.game_type == game_type,
        PokerSession.stakes == stakes,
    )
    if exclude_id is not None:
        stmt = stmt.where(PokerSession.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.scalar_one_or_none()


async def create_session(db: AsyncSession, user_id: int, data: SessionCreate) -> PokerSession:
    """Insert a session.

    Raises:
        ConflictError: a session with the same date, venue, game type and
            stakes already exists for this owner.
    """
    existing = await find_duplicate(
        db,
        user_id,
        day=data.date,
        venue=data.venue,
        game_type=data.game_type,
        stakes=data.stakes,
    )
    if existing is not None:
        logger.info("session_duplicate_rejected", user_id=user_id, existing_id=existing.id)
        msg = "A session with the same date, venue, game type and stakes already exists"
        raise ConflictError(msg, existing_id=existing.id)

    record = PokerSession(user_id=user_id, **data.model_dump())
    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info("session_created", user_id=user_id, session_id=record.id, profit=record.profit)
    return record


async def update_session(
    db: AsyncSession,
    user_id: int,
    session_id: str,
    data: SessionUpdate,
) -> PokerSession:
    """Apply a partial update. Only fields present in the payload change."""
    record = await get_user_session(db, user_id, session_id)
    changes = data.model_dump(exclude_unset=True)
    # Explicit nulls are ignored for required columns.
    for field in ("date", "venue", "game_type", "stakes", "duration_minutes", "buy_in", "cash_out"):
        if field in changes and changes[field] is None:
            del changes[field]

    if any(field in changes for field in _IDENTITY_FIELDS):
        existing = await find_duplicate(
            db,
            user_id,
            day=changes.get("date", record.date),
            venue=changes.get("venue", record.venue),
            game_type=changes.get("game_type", record.game_type),
            stakes=changes.get("stakes", record.stakes),
            exclude_id=record.id,
        )
        if existing is not None:
            msg = "A session with the same date, venue, game type and stakes already exists"
            raise ConflictError(msg, existing_id=existing.id)

    for field, value in changes.items():
        setattr(record, field, value)
    await db.commit()
    await db.refresh(record)

    logger.info("session_updated", user_id=user_id, session_id=record.id, fields=sorted(changes))
    return record


async def delete_session(db: AsyncSession, user_id: int, session_id: str) -> None:
    record = await get_user_session(db, user_id, session_id)
    await db.delete(record)
    await db.commit()
    logger.info("session_deleted", user_id=user_id, session_id=session_id)
