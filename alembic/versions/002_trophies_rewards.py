"""Trophies and rewards.

Revision ID: 002_trophies_rewards
Revises: 001_initial_schema
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002_trophies_rewards"
down_revision: str | None = "001_initial_schema"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Trophies ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS trophies (
            id VARCHAR(36) PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(32) NOT NULL,
            title VARCHAR(64) NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            icon VARCHAR(64) NOT NULL,
            rarity VARCHAR(16) NOT NULL DEFAULT 'common',
            reward_points INTEGER NOT NULL DEFAULT 0,
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT trophies_user_id_type_key UNIQUE (user_id, type)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_trophies_user_id
        ON trophies(user_id)
    """)

    # --- Rewards ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS rewards (
            id VARCHAR(36) PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(32) NOT NULL,
            points INTEGER NOT NULL,
            description TEXT,
            reference_id VARCHAR(36) NOT NULL,
            is_claimed BOOLEAN NOT NULL DEFAULT false,
            claimed_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT rewards_user_type_reference_key UNIQUE (user_id, type, reference_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_rewards_user_id
        ON rewards(user_id)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_rewards_pending
        ON rewards(user_id, created_at) WHERE NOT is_claimed
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS rewards CASCADE")
    op.execute("DROP TABLE IF EXISTS trophies CASCADE")
