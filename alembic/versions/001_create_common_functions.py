"""001: create common functions and the host game's characters table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    # Owned by the host game; the economy only reads it
    op.execute("""
        CREATE TABLE IF NOT EXISTS game_characters (
            id                  VARCHAR(64)     PRIMARY KEY,
            level               INT             NOT NULL DEFAULT 1,
            character_class     VARCHAR(20)     NOT NULL DEFAULT 'NOVICE',
            gold                BIGINT          NOT NULL DEFAULT 0,
            luck                INT             NOT NULL DEFAULT 50,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS game_characters CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
