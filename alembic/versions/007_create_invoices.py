"""007: create invoices and invoice_sequences tables

Revision ID: 007
Revises: 006
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE invoice_sequences (
            day             DATE            PRIMARY KEY,
            last_value      INT             NOT NULL,
            CONSTRAINT ck_invoice_sequences_positive CHECK (last_value >= 1)
        );
    """)
    op.execute("""
        CREATE TABLE invoices (
            id                  VARCHAR(64)     PRIMARY KEY,
            order_id            VARCHAR(64)     NOT NULL REFERENCES orders (id),
            buyer_id            VARCHAR(64)     NOT NULL,
            store_id            VARCHAR(64)     NOT NULL,
            invoice_number      VARCHAR(32)     NOT NULL,
            issue_date          TIMESTAMPTZ     NOT NULL,
            store_details       JSONB           NOT NULL,
            customer_details    JSONB           NOT NULL,
            items               JSONB           NOT NULL,
            subtotal            NUMERIC(12, 2)  NOT NULL,
            store_charges       NUMERIC(12, 2)  NOT NULL,
            gst_amount          NUMERIC(12, 2)  NOT NULL,
            cod_charges         NUMERIC(12, 2)  NOT NULL,
            total_amount        NUMERIC(12, 2)  NOT NULL,
            payment_method      VARCHAR(10)     NOT NULL,
            payment_reference   VARCHAR(255),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_invoices_order_id         UNIQUE (order_id),
            CONSTRAINT uq_invoices_invoice_number   UNIQUE (invoice_number)
        );
    """)
    op.execute("CREATE INDEX idx_invoices_buyer ON invoices (buyer_id, issue_date DESC);")
    op.execute("CREATE INDEX idx_invoices_store ON invoices (store_id, issue_date DESC);")
    op.execute("COMMENT ON TABLE invoices IS 'Immutable invoice snapshots, one per order';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS invoices CASCADE;")
    op.execute("DROP TABLE IF EXISTS invoice_sequences CASCADE;")
