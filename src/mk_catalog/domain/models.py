"""Catalog domain models: pure dataclasses, no SQLAlchemy dependency.

Read-only views of the catalog owned by the store/product CRUD service.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class StoreFeeConfig:
    store_charges: Decimal | None = None  # flat fee per order
    gst_applicable: bool = False
    gst_percentage: Decimal | None = None  # None → 18 when applicable
    cod_available: bool = False
    cod_charges: Decimal | None = None  # applied only for COD


@dataclass(frozen=True)
class BusinessAddress:
    street: str
    area: str
    pincode: str
    state: str
    country: str
    landmark: str | None = None


@dataclass
class Store:
    id: str
    owner_id: str
    store_name: str
    owner_name: str
    owner_email: str
    owner_phone: str
    business_address: BusinessAddress
    fee_config: StoreFeeConfig = field(default_factory=StoreFeeConfig)
    gst_number: str | None = None
    invoice_terms: str | None = None
    invoice_signature_id: str | None = None


@dataclass
class Product:
    id: str
    store_id: str
    product_name: str
    price: Decimal
    stock_quantity: int
    is_published: bool = True


@dataclass(frozen=True)
class UserProfile:
    id: str
    name: str | None
    email: str | None
    phone: str | None
