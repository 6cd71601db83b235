# src/mk_catalog/infrastructure/db_models.py
"""SQLAlchemy ORM mappings for the catalog tables (users, stores, products).

Tables are created by Alembic migrations 002-004; these classes are used
for read queries only. Stock mutations go through raw SQL.
"""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.mk_common.database import Base


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class StoreORM(Base):
    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    store_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_email: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    business_address_street: Mapped[str] = mapped_column(String(255), nullable=False)
    business_address_area: Mapped[str] = mapped_column(String(255), nullable=False)
    business_address_pincode: Mapped[str] = mapped_column(String(6), nullable=False)
    business_address_state: Mapped[str] = mapped_column(String(100), nullable=False)
    business_address_country: Mapped[str] = mapped_column(String(100), nullable=False)
    business_address_landmark: Mapped[str | None] = mapped_column(String(255), nullable=True)
    store_charges: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    gst_applicable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    gst_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    cod_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cod_charges: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    gst_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    invoice_terms: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    invoice_signature_id: Mapped[str | None] = mapped_column(String(255), nullable=True)


class ProductORM(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    store_id: Mapped[str] = mapped_column(ForeignKey("stores.id"), nullable=False)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
