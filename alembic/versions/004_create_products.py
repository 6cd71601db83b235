"""004: create products table

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id              VARCHAR(64)     PRIMARY KEY,
            store_id        VARCHAR(64)     NOT NULL REFERENCES stores (id),
            product_name    VARCHAR(255)    NOT NULL,
            price           NUMERIC(12, 2)  NOT NULL,
            stock_quantity  INT             NOT NULL DEFAULT 0,
            is_published    BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_gte_0  CHECK (price >= 0),
            CONSTRAINT ck_products_stock_gte_0  CHECK (stock_quantity >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_products_store ON products (store_id);")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE products IS 'Catalog items; stock only ever decremented by checkout';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
