# src/mk_order/application/schemas.py
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    RootModel,
    Tag,
    field_validator,
    model_validator,
)

from src.mk_common.datetime_utils import to_epoch_ms
from src.mk_common.enums import PaymentMethod
from src.mk_order.domain.models import Order, OrderView, ShippingAddress
from src.mk_pricing.domain.models import PriceBreakdown


def _normalize_payment_method(v: object) -> object:
    # Checkout forms send "cod" / "online"
    return v.upper() if isinstance(v, str) else v


class ShippingAddressIn(BaseModel):
    type: str
    street: str
    area: str
    pincode: str = Field(pattern=r"^[0-9]{6}$")
    city: str
    state: str
    country: str
    landmark: str | None = None

    def to_domain(self) -> ShippingAddress:
        return ShippingAddress(**self.model_dump())


class PricePreviewRequest(BaseModel):
    product_id: str
    quantity: int
    payment_method: PaymentMethod

    @field_validator("payment_method", mode="before")
    @classmethod
    def upper_method(cls, v: object) -> object:
        return _normalize_payment_method(v)


class PlaceOrderRequest(BaseModel):
    product_id: str
    quantity: int
    shipping_address: ShippingAddressIn
    payment_method: PaymentMethod
    payment_reference: str | None = None

    @field_validator("payment_method", mode="before")
    @classmethod
    def upper_method(cls, v: object) -> object:
        return _normalize_payment_method(v)

    @model_validator(mode="after")
    def reference_only_for_online(self) -> "PlaceOrderRequest":
        if self.payment_reference and self.payment_method != PaymentMethod.ONLINE:
            raise ValueError("payment_reference is only accepted for ONLINE payment")
        return self


# ---------------------------------------------------------------------------
# Status transitions: one closed field set per target status
# ---------------------------------------------------------------------------


class _TransitionBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    location: str | None = None
    description: str | None = None


class ProcessTransition(_TransitionBase):
    status: Literal["processing"]
    estimated_delivery_time: str | None = None


class ShipTransition(_TransitionBase):
    status: Literal["shipped"]
    tracking_id: str | None = None
    courier_name: str | None = None
    estimated_delivery_time: str | None = None


class DeliverTransition(_TransitionBase):
    status: Literal["delivered"]


class CancelTransition(_TransitionBase):
    status: Literal["cancelled"]
    cancellation_reason: str | None = None


class RefundTransition(_TransitionBase):
    status: Literal["refunded"]


class UnlistedTransition(_TransitionBase):
    """Any other target ('placed', unknown strings); the state machine rejects it."""

    model_config = ConfigDict(extra="ignore")

    status: str


_PATCHABLE_TARGETS = frozenset({"processing", "shipped", "delivered", "cancelled", "refunded"})


def _transition_tag(value: Any) -> str:
    status = value.get("status") if isinstance(value, dict) else getattr(value, "status", None)
    if isinstance(status, str) and status in _PATCHABLE_TARGETS:
        return status
    return "unlisted"


class UpdateOrderStatusRequest(
    RootModel[
        Annotated[
            Union[
                Annotated[ProcessTransition, Tag("processing")],
                Annotated[ShipTransition, Tag("shipped")],
                Annotated[DeliverTransition, Tag("delivered")],
                Annotated[CancelTransition, Tag("cancelled")],
                Annotated[RefundTransition, Tag("refunded")],
                Annotated[UnlistedTransition, Tag("unlisted")],
            ],
            Discriminator(_transition_tag),
        ]
    ]
):
    pass


TransitionRequest = Union[
    ProcessTransition,
    ShipTransition,
    DeliverTransition,
    CancelTransition,
    RefundTransition,
    UnlistedTransition,
]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class PriceBreakdownResponse(BaseModel):
    subtotal: Decimal
    store_charges: Decimal
    gst_amount: Decimal
    cod_charges: Decimal
    final_total: Decimal

    @classmethod
    def from_domain(cls, b: PriceBreakdown) -> "PriceBreakdownResponse":
        return cls(
            subtotal=b.subtotal,
            store_charges=b.store_charges,
            gst_amount=b.gst_amount,
            cod_charges=b.cod_charges,
            final_total=b.final_total,
        )


class PlaceOrderResponse(BaseModel):
    order_id: str
    status: str
    pricing: PriceBreakdownResponse


class ShippingAddressOut(BaseModel):
    type: str
    street: str
    area: str
    pincode: str
    city: str
    state: str
    country: str
    landmark: str | None = None


class StatusHistoryItem(BaseModel):
    status: str
    timestamp: int  # epoch ms
    location: str | None = None
    description: str | None = None


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    store_id: str
    product_id: str
    quantity: int
    unit_price_at_order: Decimal
    shipping_address: ShippingAddressOut
    payment_method: str
    payment_reference: str | None = None
    subtotal: Decimal
    store_charges: Decimal
    gst_amount: Decimal
    cod_charges: Decimal
    final_total: Decimal
    status: str
    tracking_id: str | None = None
    courier_name: str | None = None
    estimated_delivery_time: str | None = None
    cancellation_reason: str | None = None
    status_history: list[StatusHistoryItem]
    created_at: int | None = None  # epoch ms
    # Enrichment (read projections only)
    product_name: str | None = None
    store_name: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        a = order.shipping_address
        return cls(
            id=order.id,
            buyer_id=order.buyer_id,
            store_id=order.store_id,
            product_id=order.product_id,
            quantity=order.quantity,
            unit_price_at_order=order.unit_price_at_order,
            shipping_address=ShippingAddressOut(
                type=a.type, street=a.street, area=a.area, pincode=a.pincode,
                city=a.city, state=a.state, country=a.country, landmark=a.landmark,
            ),
            payment_method=order.payment_method,
            payment_reference=order.payment_reference,
            subtotal=order.subtotal,
            store_charges=order.store_charges,
            gst_amount=order.gst_amount,
            cod_charges=order.cod_charges,
            final_total=order.final_total,
            status=order.status,
            tracking_id=order.tracking_id,
            courier_name=order.courier_name,
            estimated_delivery_time=order.estimated_delivery_time,
            cancellation_reason=order.cancellation_reason,
            status_history=[
                StatusHistoryItem(
                    status=e.status,
                    timestamp=e.timestamp,
                    location=e.location,
                    description=e.description,
                )
                for e in order.status_history
            ],
            created_at=to_epoch_ms(order.created_at) if order.created_at else None,
        )

    @classmethod
    def from_view(cls, view: OrderView) -> "OrderResponse":
        resp = cls.from_domain(view.order)
        resp.product_name = view.product_name
        resp.store_name = view.store_name
        resp.customer_name = view.customer_name
        resp.customer_email = view.customer_email
        return resp


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
