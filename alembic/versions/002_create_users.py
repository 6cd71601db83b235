"""002: create users table

Revision ID: 002
Revises: 001
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              VARCHAR(64)     PRIMARY KEY,
            name            VARCHAR(255),
            email           VARCHAR(255),
            phone           VARCHAR(32),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'Buyer/seller profiles; identity is issued externally';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
