"""005: create orders table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                      VARCHAR(64)     PRIMARY KEY,
            buyer_id                VARCHAR(64)     NOT NULL,
            store_id                VARCHAR(64)     NOT NULL,
            product_id              VARCHAR(64)     NOT NULL,
            quantity                INT             NOT NULL,
            unit_price_at_order     NUMERIC(12, 2)  NOT NULL,
            shipping_address        JSONB           NOT NULL,
            payment_method          VARCHAR(10)     NOT NULL,
            payment_reference       VARCHAR(255),
            subtotal                NUMERIC(12, 2)  NOT NULL,
            store_charges           NUMERIC(12, 2)  NOT NULL DEFAULT 0,
            gst_amount              NUMERIC(12, 2)  NOT NULL DEFAULT 0,
            cod_charges             NUMERIC(12, 2)  NOT NULL DEFAULT 0,
            final_total             NUMERIC(12, 2)  NOT NULL,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'placed',
            tracking_id             VARCHAR(255),
            courier_name            VARCHAR(255),
            estimated_delivery_time VARCHAR(255),
            cancellation_reason     VARCHAR(1000),
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_quantity       CHECK (quantity > 0),
            CONSTRAINT ck_orders_payment_method CHECK (payment_method IN ('COD', 'ONLINE')),
            CONSTRAINT ck_orders_status         CHECK (
                status IN ('placed', 'processing', 'shipped', 'delivered', 'cancelled', 'refunded')
            ),
            CONSTRAINT ck_orders_total          CHECK (
                final_total = subtotal + store_charges + gst_amount + cod_charges
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_buyer ON orders (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_store ON orders (store_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE orders IS 'Single-product orders; pricing frozen at placement';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
