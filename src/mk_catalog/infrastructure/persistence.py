"""CatalogRepository: read access via ORM select(), stock mutation via raw SQL.

decrement_stock is a single conditional UPDATE ... RETURNING, so concurrent
checkouts for the same product can never drive stock negative. A result of
0 rows means the stock check failed and nothing was written.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_catalog.domain.models import (
    BusinessAddress,
    Product,
    Store,
    StoreFeeConfig,
    UserProfile,
)
from src.mk_catalog.infrastructure.db_models import ProductORM, StoreORM, UserORM

_DECREMENT_STOCK_SQL = text("""
    UPDATE products
    SET stock_quantity = stock_quantity - :amount,
        updated_at = NOW()
    WHERE id = :product_id AND stock_quantity >= :amount
    RETURNING stock_quantity
""")


def _orm_to_store(row: StoreORM) -> Store:
    return Store(
        id=row.id,
        owner_id=row.owner_id,
        store_name=row.store_name,
        owner_name=row.owner_name,
        owner_email=row.owner_email,
        owner_phone=row.owner_phone,
        business_address=BusinessAddress(
            street=row.business_address_street,
            area=row.business_address_area,
            pincode=row.business_address_pincode,
            state=row.business_address_state,
            country=row.business_address_country,
            landmark=row.business_address_landmark,
        ),
        fee_config=StoreFeeConfig(
            store_charges=row.store_charges,
            gst_applicable=row.gst_applicable,
            gst_percentage=row.gst_percentage,
            cod_available=row.cod_available,
            cod_charges=row.cod_charges,
        ),
        gst_number=row.gst_number,
        invoice_terms=row.invoice_terms,
        invoice_signature_id=row.invoice_signature_id,
    )


def _orm_to_product(row: ProductORM) -> Product:
    return Product(
        id=row.id,
        store_id=row.store_id,
        product_name=row.product_name,
        price=row.price,
        stock_quantity=row.stock_quantity,
        is_published=row.is_published,
    )


class CatalogRepository:
    """Concrete implementation of CatalogRepositoryProtocol."""

    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None:
        result = await db.execute(select(ProductORM).where(ProductORM.id == product_id))
        row = result.scalar_one_or_none()
        return _orm_to_product(row) if row else None

    async def get_store(self, db: AsyncSession, store_id: str) -> Store | None:
        result = await db.execute(select(StoreORM).where(StoreORM.id == store_id))
        row = result.scalar_one_or_none()
        return _orm_to_store(row) if row else None

    async def get_user_profile(self, db: AsyncSession, user_id: str) -> UserProfile | None:
        result = await db.execute(select(UserORM).where(UserORM.id == user_id))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return UserProfile(id=row.id, name=row.name, email=row.email, phone=row.phone)

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, amount: int
    ) -> int | None:
        result = await db.execute(
            _DECREMENT_STOCK_SQL, {"product_id": product_id, "amount": amount}
        )
        row = result.fetchone()
        return row.stock_quantity if row else None
