# src/mk_catalog/domain/repository.py
"""CatalogRepository Protocol: the Catalog Accessor collaborator.

Unit tests inject an in-memory fake that conforms to this Protocol.
"""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_catalog.domain.models import Product, Store, UserProfile


class CatalogRepositoryProtocol(Protocol):
    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None: ...

    async def get_store(self, db: AsyncSession, store_id: str) -> Store | None: ...

    async def get_user_profile(self, db: AsyncSession, user_id: str) -> UserProfile | None: ...

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, amount: int
    ) -> int | None:
        """Atomically decrement stock if at least `amount` is available.

        Returns the remaining stock, or None when stock was insufficient
        (nothing is changed in that case).
        """
        ...
