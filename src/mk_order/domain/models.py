"""Order domain model: pure dataclasses, no SQLAlchemy dependency.

Fields fixed at creation (quantity, unit_price_at_order, shipping_address,
payment data and the whole price breakdown) are never rewritten.
status_history only grows; its first entry is written with the order.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.mk_common.enums import OrderStatus


@dataclass(frozen=True)
class ShippingAddress:
    """Snapshot of the buyer's address at checkout, not a live reference."""

    type: str
    street: str
    area: str
    pincode: str
    city: str
    state: str
    country: str
    landmark: str | None = None


@dataclass(frozen=True)
class StatusHistoryEntry:
    status: str
    timestamp: int  # epoch ms
    location: str | None = None
    description: str | None = None


@dataclass
class Order:
    id: str
    buyer_id: str
    store_id: str
    product_id: str
    quantity: int
    unit_price_at_order: Decimal
    shipping_address: ShippingAddress
    payment_method: str  # COD / ONLINE
    # Price breakdown
    subtotal: Decimal
    store_charges: Decimal
    gst_amount: Decimal
    cod_charges: Decimal
    final_total: Decimal
    payment_reference: str | None = None
    # Lifecycle (store owner only)
    status: str = OrderStatus.PLACED.value
    tracking_id: str | None = None
    courier_name: str | None = None
    estimated_delivery_time: str | None = None
    cancellation_reason: str | None = None
    status_history: list[StatusHistoryEntry] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return bool(self.payment_reference)


@dataclass
class OrderView:
    """Order enriched with display names for a read projection.

    Buyer view: counterparty = store. Store view: counterparty = customer.
    """

    order: Order
    product_name: str
    store_name: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
