# src/mk_order/application/service.py
"""OrderApplicationService: order creation, status lifecycle, read projections.

place_order and update_order_status own their transaction: they commit on
success and roll back on any error, so a failed checkout leaves neither an
order row nor a stock decrement behind. Read methods never commit.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_catalog.domain.models import Product, Store
from src.mk_catalog.domain.repository import CatalogRepositoryProtocol
from src.mk_catalog.infrastructure.persistence import CatalogRepository
from src.mk_common.datetime_utils import now_ms, utc_now
from src.mk_common.enums import PaymentMethod
from src.mk_common.errors import (
    CodNotAvailableError,
    OrderNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
    StoreNotFoundError,
    UnauthorizedError,
)
from src.mk_common.id_generator import generate_id
from src.mk_order.application.schemas import (
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PriceBreakdownResponse,
    TransitionRequest,
)
from src.mk_order.domain.models import Order, OrderView
from src.mk_order.domain.repository import OrderRepositoryProtocol
from src.mk_order.domain.state_machine import (
    StatusTransition,
    apply_transition,
    initial_history_entry,
)
from src.mk_order.infrastructure.persistence import OrderRepository
from src.mk_pricing.domain.calculator import calculate_price
from src.mk_pricing.domain.models import PriceBreakdown

logger = logging.getLogger(__name__)


def transition_from_request(req: TransitionRequest) -> StatusTransition:
    return StatusTransition(
        new_status=req.status,
        patch=req.model_dump(exclude={"status", "location", "description"}, exclude_none=True),
        location=req.location,
        description=req.description,
    )


class OrderApplicationService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        catalog: CatalogRepositoryProtocol | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._catalog: CatalogRepositoryProtocol = catalog or CatalogRepository()

    async def _price(
        self,
        db: AsyncSession,
        product_id: str,
        quantity: int,
        payment_method: PaymentMethod,
    ) -> tuple[Product, Store, PriceBreakdown]:
        product = await self._catalog.get_product(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        store = await self._catalog.get_store(db, product.store_id)
        if store is None:
            raise StoreNotFoundError(product.store_id)
        if payment_method == PaymentMethod.COD and not store.fee_config.cod_available:
            raise CodNotAvailableError(store.id)
        breakdown = calculate_price(product.price, quantity, store.fee_config, payment_method)
        return product, store, breakdown

    async def calculate_price_preview(
        self,
        db: AsyncSession,
        product_id: str,
        quantity: int,
        payment_method: PaymentMethod,
    ) -> PriceBreakdownResponse:
        _, _, breakdown = await self._price(db, product_id, quantity, payment_method)
        return PriceBreakdownResponse.from_domain(breakdown)

    async def place_order(
        self, db: AsyncSession, buyer_id: str, req: PlaceOrderRequest
    ) -> PlaceOrderResponse:
        try:
            product, store, breakdown = await self._price(
                db, req.product_id, req.quantity, req.payment_method
            )
            if product.stock_quantity < req.quantity:
                raise OutOfStockError(product.id, req.quantity, product.stock_quantity)
            remaining = await self._catalog.decrement_stock(db, product.id, req.quantity)
            if remaining is None:
                # Lost the race to a concurrent checkout
                raise OutOfStockError(product.id, req.quantity)

            order = Order(
                id=generate_id("ord_"),
                buyer_id=buyer_id,
                store_id=store.id,
                product_id=product.id,
                quantity=req.quantity,
                unit_price_at_order=product.price,
                shipping_address=req.shipping_address.to_domain(),
                payment_method=req.payment_method.value,
                payment_reference=req.payment_reference,
                subtotal=breakdown.subtotal,
                store_charges=breakdown.store_charges,
                gst_amount=breakdown.gst_amount,
                cod_charges=breakdown.cod_charges,
                final_total=breakdown.final_total,
                status_history=[initial_history_entry(now_ms())],
                created_at=utc_now(),
            )
            await self._repo.save(order, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order placed: id=%s product=%s qty=%d total=%s remaining_stock=%d",
            order.id, product.id, order.quantity, order.final_total, remaining,
        )
        return PlaceOrderResponse(
            order_id=order.id,
            status=order.status,
            pricing=PriceBreakdownResponse.from_domain(breakdown),
        )

    async def update_order_status(
        self,
        db: AsyncSession,
        order_id: str,
        caller_id: str,
        transition: StatusTransition,
    ) -> OrderResponse:
        try:
            # Row lock serializes concurrent transitions on the same order
            order = await self._repo.get_by_id_for_update(order_id, db)
            if order is None:
                raise OrderNotFoundError(order_id)
            store = await self._catalog.get_store(db, order.store_id)
            if store is None or store.owner_id != caller_id:
                raise UnauthorizedError("only the store owner can update this order")
            previous = order.status
            entry = apply_transition(order, transition, now_ms())
            await self._repo.update_lifecycle(order, entry, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Order %s status %s -> %s", order.id, previous, order.status)
        return OrderResponse.from_domain(order)

    async def get_order_detail(
        self, db: AsyncSession, order_id: str, caller_id: str
    ) -> OrderResponse:
        order = await self._repo.get_by_id(order_id, db)
        if order is None:
            raise OrderNotFoundError(order_id)
        store = await self._catalog.get_store(db, order.store_id)
        owner_id = store.owner_id if store else None
        if caller_id not in (order.buyer_id, owner_id):
            raise UnauthorizedError("not a party to this order")

        product = await self._catalog.get_product(db, order.product_id)
        customer = await self._catalog.get_user_profile(db, order.buyer_id)
        return OrderResponse.from_view(
            OrderView(
                order=order,
                product_name=product.product_name if product else "Unknown Product",
                store_name=store.store_name if store else "Unknown Store",
                customer_name=(customer.name if customer else None) or "Unknown Customer",
                customer_email=(customer.email if customer else None) or "",
            )
        )

    async def list_orders_for_buyer(
        self, db: AsyncSession, caller_id: str | None
    ) -> OrderListResponse:
        if caller_id is None:
            return OrderListResponse(items=[])
        views = await self._repo.list_for_buyer(caller_id, db)
        return OrderListResponse(items=[OrderResponse.from_view(v) for v in views])

    async def list_orders_for_store(
        self, db: AsyncSession, store_id: str, caller_id: str | None
    ) -> OrderListResponse:
        if caller_id is None:
            return OrderListResponse(items=[])
        store = await self._catalog.get_store(db, store_id)
        if store is None:
            raise StoreNotFoundError(store_id)
        if store.owner_id != caller_id:
            raise UnauthorizedError("only the store owner can view these orders")
        views = await self._repo.list_for_store(store_id, db)
        return OrderListResponse(items=[OrderResponse.from_view(v) for v in views])
