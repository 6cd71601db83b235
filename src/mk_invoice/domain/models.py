"""Invoice domain model: a frozen snapshot taken at first generation.

Store, customer and product details are copied, not referenced, so later
profile or catalog edits never alter an issued invoice.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.mk_catalog.domain.models import BusinessAddress
from src.mk_common.enums import PaymentStatus
from src.mk_order.domain.models import ShippingAddress


@dataclass(frozen=True)
class StoreSnapshot:
    store_name: str
    owner_name: str
    owner_email: str
    owner_phone: str
    business_address: BusinessAddress
    gst_number: str | None
    invoice_terms: str
    signature_id: str | None = None


@dataclass(frozen=True)
class CustomerSnapshot:
    name: str | None
    email: str | None
    phone: str | None
    shipping_address: ShippingAddress


@dataclass(frozen=True)
class InvoiceLineItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass
class Invoice:
    id: str
    order_id: str
    buyer_id: str
    store_id: str
    invoice_number: str  # INV-YYYYMMDD-NNNN
    issue_date: datetime
    store: StoreSnapshot
    customer: CustomerSnapshot
    items: list[InvoiceLineItem]
    subtotal: Decimal
    store_charges: Decimal
    gst_amount: Decimal
    cod_charges: Decimal
    total_amount: Decimal
    payment_method: str
    payment_reference: str | None = None

    @property
    def payment_status(self) -> PaymentStatus:
        return PaymentStatus.PAID if self.payment_reference else PaymentStatus.PENDING
