# src/mk_order/domain/repository.py
"""OrderRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_order.domain.models import Order, OrderView, StatusHistoryEntry


class OrderRepositoryProtocol(Protocol):
    async def save(self, order: Order, db: AsyncSession) -> None:
        """Insert the order row and every entry of its status_history."""
        ...

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None: ...

    async def get_by_id_for_update(self, order_id: str, db: AsyncSession) -> Order | None:
        """Load and row-lock the order for the rest of the transaction."""
        ...

    async def update_lifecycle(
        self, order: Order, entry: StatusHistoryEntry, db: AsyncSession
    ) -> None:
        """Persist mutable lifecycle fields and append one history entry."""
        ...

    async def list_for_buyer(self, buyer_id: str, db: AsyncSession) -> list[OrderView]: ...

    async def list_for_store(self, store_id: str, db: AsyncSession) -> list[OrderView]: ...
