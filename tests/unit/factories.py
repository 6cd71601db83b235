"""Builders and in-memory fakes shared by the service tests."""
from dataclasses import replace
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from src.mk_catalog.domain.models import (
    BusinessAddress,
    Product,
    Store,
    StoreFeeConfig,
    UserProfile,
)
from src.mk_invoice.domain.models import Invoice
from src.mk_order.domain.models import Order, OrderView, ShippingAddress, StatusHistoryEntry

OWNER_ID = "user-owner"
BUYER_ID = "user-buyer"


def make_address(**kwargs: Any) -> ShippingAddress:
    defaults = dict(
        type="home", street="12 MG Road", area="Indiranagar", pincode="560038",
        city="Bengaluru", state="Karnataka", country="India", landmark=None,
    )
    defaults.update(kwargs)
    return ShippingAddress(**defaults)


def make_store(**kwargs: Any) -> Store:
    defaults = dict(
        id="store-1",
        owner_id=OWNER_ID,
        store_name="Chai Corner",
        owner_name="Asha Rao",
        owner_email="asha@example.com",
        owner_phone="9999999999",
        business_address=BusinessAddress(
            street="5 Residency Rd", area="Shanthala Nagar", pincode="560025",
            state="Karnataka", country="India",
        ),
        fee_config=StoreFeeConfig(
            store_charges=Decimal("50"),
            gst_applicable=True,
            gst_percentage=Decimal("18"),
            cod_available=True,
            cod_charges=Decimal("15"),
        ),
        gst_number="29ABCDE1234F1Z5",
    )
    defaults.update(kwargs)
    return Store(**defaults)


def make_product(**kwargs: Any) -> Product:
    defaults = dict(
        id="prod-1", store_id="store-1", product_name="Masala Chai 250g",
        price=Decimal("500.00"), stock_quantity=10,
    )
    defaults.update(kwargs)
    return Product(**defaults)


def make_order(**kwargs: Any) -> Order:
    defaults = dict(
        id="ord_1",
        buyer_id=BUYER_ID,
        store_id="store-1",
        product_id="prod-1",
        quantity=3,
        unit_price_at_order=Decimal("500.00"),
        shipping_address=make_address(),
        payment_method="COD",
        subtotal=Decimal("1500.00"),
        store_charges=Decimal("50.00"),
        gst_amount=Decimal("270.00"),
        cod_charges=Decimal("15.00"),
        final_total=Decimal("1835.00"),
        status_history=[
            StatusHistoryEntry(
                status="placed", timestamp=1_700_000_000_000,
                description="Order has been placed successfully",
            )
        ],
        created_at=datetime(2026, 3, 1, 10, 0, tzinfo=UTC),
    )
    defaults.update(kwargs)
    return Order(**defaults)


def mock_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


class FakeCatalog:
    """In-memory catalog with the same conditional-decrement contract as SQL."""

    def __init__(
        self,
        products: list[Product] | None = None,
        stores: list[Store] | None = None,
        users: list[UserProfile] | None = None,
    ) -> None:
        self.products = {p.id: p for p in (products or [])}
        self.stores = {s.id: s for s in (stores or [])}
        self.users = {u.id: u for u in (users or [])}

    async def get_product(self, db: Any, product_id: str) -> Product | None:
        p = self.products.get(product_id)
        # Callers get a copy, like a fresh SELECT
        return replace(p) if p else None

    async def get_store(self, db: Any, store_id: str) -> Store | None:
        return self.stores.get(store_id)

    async def get_user_profile(self, db: Any, user_id: str) -> UserProfile | None:
        return self.users.get(user_id)

    async def decrement_stock(self, db: Any, product_id: str, amount: int) -> int | None:
        p = self.products.get(product_id)
        if p is None or p.stock_quantity < amount:
            return None
        p.stock_quantity -= amount
        return p.stock_quantity


class FakeOrderRepo:
    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}

    async def save(self, order: Order, db: Any) -> None:
        self.orders[order.id] = order

    async def get_by_id(self, order_id: str, db: Any) -> Order | None:
        return self.orders.get(order_id)

    async def get_by_id_for_update(self, order_id: str, db: Any) -> Order | None:
        return self.orders.get(order_id)

    async def update_lifecycle(self, order: Order, entry: StatusHistoryEntry, db: Any) -> None:
        self.orders[order.id] = order

    async def list_for_buyer(self, buyer_id: str, db: Any) -> list[OrderView]:
        return [
            OrderView(order=o, product_name="Masala Chai 250g", store_name="Chai Corner")
            for o in self.orders.values()
            if o.buyer_id == buyer_id
        ]

    async def list_for_store(self, store_id: str, db: Any) -> list[OrderView]:
        return [
            OrderView(order=o, product_name="Masala Chai 250g", customer_name="Ravi")
            for o in self.orders.values()
            if o.store_id == store_id
        ]


class FakeInvoiceRepo:
    def __init__(self) -> None:
        self.invoices: dict[str, Invoice] = {}
        self.sequences: dict[date, int] = {}

    async def next_sequence(self, day: date, db: Any) -> int:
        self.sequences[day] = self.sequences.get(day, 0) + 1
        return self.sequences[day]

    async def insert_if_absent(self, invoice: Invoice, db: Any) -> bool:
        if any(i.order_id == invoice.order_id for i in self.invoices.values()):
            return False
        self.invoices[invoice.id] = invoice
        return True

    async def get_by_id(self, invoice_id: str, db: Any) -> Invoice | None:
        return self.invoices.get(invoice_id)

    async def get_by_order_id(self, order_id: str, db: Any) -> Invoice | None:
        return next((i for i in self.invoices.values() if i.order_id == order_id), None)

    async def list_by_buyer(self, buyer_id: str, db: Any) -> list[Invoice]:
        return [i for i in self.invoices.values() if i.buyer_id == buyer_id]

    async def list_by_store(self, store_id: str, db: Any) -> list[Invoice]:
        return [i for i in self.invoices.values() if i.store_id == store_id]
