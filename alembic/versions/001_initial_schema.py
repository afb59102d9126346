"""Initial schema.

Creates users, poker_sessions, xp_ledger and challenges.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            external_uid VARCHAR(128) UNIQUE NOT NULL,
            email VARCHAR(320),
            display_name VARCHAR(64),
            ranking_opt_in BOOLEAN NOT NULL DEFAULT false,
            ranking_nickname VARCHAR(32),
            ranking_opt_in_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_users_ranking_opt_in
        ON users(ranking_opt_in) WHERE ranking_opt_in
    """)

    # --- Poker Sessions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS poker_sessions (
            id VARCHAR(36) PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            date DATE NOT NULL,
            start_time TIMESTAMPTZ,
            venue VARCHAR(128) NOT NULL,
            game_type VARCHAR(16) NOT NULL DEFAULT 'cash',
            stakes VARCHAR(64) NOT NULL,
            blinds VARCHAR(64),
            duration_minutes INTEGER NOT NULL DEFAULT 0 CHECK (duration_minutes >= 0),
            buy_in BIGINT NOT NULL DEFAULT 0 CHECK (buy_in >= 0),
            cash_out BIGINT NOT NULL DEFAULT 0 CHECK (cash_out >= 0),
            hands INTEGER,
            skill_tier VARCHAR(16),
            notes TEXT,
            tags JSONB,
            screenshot_url TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_poker_sessions_user_id
        ON poker_sessions(user_id)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_poker_sessions_identity
        ON poker_sessions(user_id, date, venue, game_type, stakes)
    """)

    # --- XP Ledger ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS xp_ledger (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            action VARCHAR(32) NOT NULL,
            amount INTEGER NOT NULL,
            day DATE NOT NULL,
            source_id VARCHAR(128),
            idempotency_key VARCHAR(256) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT xp_ledger_idempotency_key_key UNIQUE (idempotency_key)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_xp_ledger_user_id
        ON xp_ledger(user_id)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_xp_ledger_user_day
        ON xp_ledger(user_id, day, action)
    """)

    # --- Challenges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS challenges (
            id VARCHAR(36) PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(128) NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            type VARCHAR(16) NOT NULL,
            target_value BIGINT NOT NULL,
            reward_points INTEGER NOT NULL DEFAULT 0,
            start_date DATE NOT NULL,
            end_date DATE NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT false,
            completed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_challenges_user_id
        ON challenges(user_id)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS challenges CASCADE")
    op.execute("DROP TABLE IF EXISTS xp_ledger CASCADE")
    op.execute("DROP TABLE IF EXISTS poker_sessions CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
