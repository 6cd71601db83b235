"""006: create order_status_history table

Revision ID: 006
Revises: 005
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE order_status_history (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        VARCHAR(64)     NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            seq             INT             NOT NULL,
            status          VARCHAR(20)     NOT NULL,
            timestamp_ms    BIGINT          NOT NULL,
            location        VARCHAR(255),
            description     VARCHAR(1000),
            CONSTRAINT uq_order_status_history_seq UNIQUE (order_id, seq),
            CONSTRAINT ck_order_status_history_seq CHECK (seq >= 0)
        );
    """)
    op.execute("COMMENT ON TABLE order_status_history IS 'Append-only status timeline per order';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_status_history CASCADE;")
