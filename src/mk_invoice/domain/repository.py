# src/mk_invoice/domain/repository.py
"""Invoice persistence and object-storage Protocols."""
from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_invoice.domain.models import Invoice


class InvoiceRepositoryProtocol(Protocol):
    async def next_sequence(self, day: date, db: AsyncSession) -> int:
        """Atomically increment and return the invoice counter for `day`."""
        ...

    async def insert_if_absent(self, invoice: Invoice, db: AsyncSession) -> bool:
        """Insert unless the order already has an invoice; True if inserted."""
        ...

    async def get_by_id(self, invoice_id: str, db: AsyncSession) -> Invoice | None: ...

    async def get_by_order_id(self, order_id: str, db: AsyncSession) -> Invoice | None: ...

    async def list_by_buyer(self, buyer_id: str, db: AsyncSession) -> list[Invoice]: ...

    async def list_by_store(self, store_id: str, db: AsyncSession) -> list[Invoice]: ...


class ObjectStorageProtocol(Protocol):
    def resolve_url(self, storage_id: str) -> str | None: ...
