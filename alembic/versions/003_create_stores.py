"""003: create stores table

Revision ID: 003
Revises: 002
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE stores (
            id                          VARCHAR(64)     PRIMARY KEY,
            owner_id                    VARCHAR(64)     NOT NULL REFERENCES users (id),
            store_name                  VARCHAR(255)    NOT NULL,
            owner_name                  VARCHAR(255)    NOT NULL,
            owner_email                 VARCHAR(255)    NOT NULL,
            owner_phone                 VARCHAR(32)     NOT NULL,
            business_address_street     VARCHAR(255)    NOT NULL,
            business_address_area       VARCHAR(255)    NOT NULL,
            business_address_pincode    VARCHAR(6)      NOT NULL,
            business_address_state      VARCHAR(100)    NOT NULL,
            business_address_country    VARCHAR(100)    NOT NULL,
            business_address_landmark   VARCHAR(255),
            store_charges               NUMERIC(12, 2),
            gst_applicable              BOOLEAN         NOT NULL DEFAULT FALSE,
            gst_percentage              NUMERIC(5, 2),
            cod_available               BOOLEAN         NOT NULL DEFAULT FALSE,
            cod_charges                 NUMERIC(12, 2),
            gst_number                  VARCHAR(32),
            invoice_terms               VARCHAR(1000),
            invoice_signature_id        VARCHAR(255),
            CONSTRAINT ck_stores_pincode        CHECK (business_address_pincode ~ '^[0-9]{6}$'),
            CONSTRAINT ck_stores_charges_gte_0  CHECK (store_charges IS NULL OR store_charges >= 0),
            CONSTRAINT ck_stores_cod_gte_0      CHECK (cod_charges IS NULL OR cod_charges >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_stores_owner ON stores (owner_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stores CASCADE;")
