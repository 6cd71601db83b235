# src/mk_invoice/application/service.py
"""InvoiceApplicationService: idempotent invoice generation and lookups.

generate_invoice returns the existing invoice for an order when there is
one. Otherwise it allocates the next per-day sequence number and inserts
a snapshot; if a concurrent request inserted first, that invoice wins and
is returned (the allocated number is left unused).
Orders are only read here, never written.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.mk_catalog.domain.models import Store
from src.mk_catalog.domain.repository import CatalogRepositoryProtocol
from src.mk_catalog.infrastructure.persistence import CatalogRepository
from src.mk_common.datetime_utils import utc_now
from src.mk_common.errors import (
    InternalError,
    InvoiceNotFoundError,
    OrderNotFoundError,
    ProductNotFoundError,
    StoreNotFoundError,
    UnauthorizedError,
)
from src.mk_common.id_generator import generate_id
from src.mk_invoice.application.schemas import InvoiceListResponse, InvoiceResponse
from src.mk_invoice.domain.models import (
    CustomerSnapshot,
    Invoice,
    InvoiceLineItem,
    StoreSnapshot,
)
from src.mk_invoice.domain.numbering import format_invoice_number
from src.mk_invoice.domain.repository import InvoiceRepositoryProtocol, ObjectStorageProtocol
from src.mk_invoice.infrastructure.persistence import InvoiceRepository
from src.mk_invoice.infrastructure.storage import UrlPrefixObjectStorage
from src.mk_order.domain.models import Order
from src.mk_order.domain.repository import OrderRepositoryProtocol
from src.mk_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


class InvoiceApplicationService:
    def __init__(
        self,
        repo: InvoiceRepositoryProtocol | None = None,
        orders: OrderRepositoryProtocol | None = None,
        catalog: CatalogRepositoryProtocol | None = None,
        storage: ObjectStorageProtocol | None = None,
    ) -> None:
        self._repo: InvoiceRepositoryProtocol = repo or InvoiceRepository()
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()
        self._catalog: CatalogRepositoryProtocol = catalog or CatalogRepository()
        self._storage: ObjectStorageProtocol = storage or UrlPrefixObjectStorage(
            settings.OBJECT_STORAGE_BASE_URL
        )

    def _to_response(self, invoice: Invoice) -> InvoiceResponse:
        signature_url = (
            self._storage.resolve_url(invoice.store.signature_id)
            if invoice.store.signature_id
            else None
        )
        return InvoiceResponse.from_domain(invoice, signature_url)

    async def _snapshot(self, db: AsyncSession, order: Order, store: Store) -> Invoice:
        product = await self._catalog.get_product(db, order.product_id)
        if product is None:
            raise ProductNotFoundError(order.product_id)
        customer = await self._catalog.get_user_profile(db, order.buyer_id)

        issue_date = utc_now()
        sequence = await self._repo.next_sequence(issue_date.date(), db)
        return Invoice(
            id=generate_id("inv_"),
            order_id=order.id,
            buyer_id=order.buyer_id,
            store_id=order.store_id,
            invoice_number=format_invoice_number(issue_date.date(), sequence),
            issue_date=issue_date,
            store=StoreSnapshot(
                store_name=store.store_name,
                owner_name=store.owner_name,
                owner_email=store.owner_email,
                owner_phone=store.owner_phone,
                business_address=store.business_address,
                gst_number=store.gst_number,
                invoice_terms=store.invoice_terms or settings.INVOICE_DEFAULT_TERMS,
                signature_id=store.invoice_signature_id,
            ),
            customer=CustomerSnapshot(
                name=customer.name if customer else None,
                email=customer.email if customer else None,
                phone=customer.phone if customer else None,
                shipping_address=order.shipping_address,
            ),
            items=[
                InvoiceLineItem(
                    product_id=product.id,
                    product_name=product.product_name,
                    quantity=order.quantity,
                    unit_price=order.unit_price_at_order,
                    total_price=order.subtotal,
                )
            ],
            subtotal=order.subtotal,
            store_charges=order.store_charges,
            gst_amount=order.gst_amount,
            cod_charges=order.cod_charges,
            total_amount=order.final_total,
            payment_method=order.payment_method,
            payment_reference=order.payment_reference,
        )

    async def generate_invoice(
        self, db: AsyncSession, order_id: str, caller_id: str
    ) -> InvoiceResponse:
        try:
            order = await self._orders.get_by_id(order_id, db)
            if order is None:
                raise OrderNotFoundError(order_id)
            store = await self._catalog.get_store(db, order.store_id)
            if store is None:
                raise StoreNotFoundError(order.store_id)
            if caller_id not in (order.buyer_id, store.owner_id):
                raise UnauthorizedError("not a party to this order")

            existing = await self._repo.get_by_order_id(order.id, db)
            if existing is not None:
                logger.info("Invoice idempotency hit: order=%s", order.id)
                return self._to_response(existing)

            invoice = await self._snapshot(db, order, store)
            inserted = await self._repo.insert_if_absent(invoice, db)
            if not inserted:
                winner = await self._repo.get_by_order_id(order.id, db)
                if winner is None:
                    raise InternalError(f"Invoice for order {order.id} vanished after conflict")
                invoice = winner
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        if inserted:
            logger.info("Invoice issued: %s order=%s", invoice.invoice_number, order.id)
        return self._to_response(invoice)

    async def get_invoice(
        self, db: AsyncSession, invoice_id: str, caller_id: str
    ) -> InvoiceResponse:
        invoice = await self._repo.get_by_id(invoice_id, db)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        if caller_id != invoice.buyer_id:
            store = await self._catalog.get_store(db, invoice.store_id)
            if store is None or store.owner_id != caller_id:
                raise UnauthorizedError("not a party to this invoice")
        return self._to_response(invoice)

    async def list_my_invoices(
        self, db: AsyncSession, caller_id: str | None
    ) -> InvoiceListResponse:
        if caller_id is None:
            return InvoiceListResponse(items=[])
        invoices = await self._repo.list_by_buyer(caller_id, db)
        return InvoiceListResponse(items=[self._to_response(i) for i in invoices])

    async def list_store_invoices(
        self, db: AsyncSession, store_id: str, caller_id: str
    ) -> InvoiceListResponse:
        store = await self._catalog.get_store(db, store_id)
        if store is None:
            raise StoreNotFoundError(store_id)
        if store.owner_id != caller_id:
            raise UnauthorizedError("only the store owner can view these invoices")
        invoices = await self._repo.list_by_store(store_id, db)
        return InvoiceListResponse(items=[self._to_response(i) for i in invoices])
