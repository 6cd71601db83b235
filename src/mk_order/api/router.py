# src/mk_order/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_common.database import get_db_session
from src.mk_gateway.auth.dependencies import get_current_user_id, get_optional_user_id
from src.mk_order.application.schemas import (
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PriceBreakdownResponse,
    PricePreviewRequest,
    UpdateOrderStatusRequest,
)
from src.mk_order.application.service import OrderApplicationService, transition_from_request

router = APIRouter(tags=["orders"])


def get_order_service() -> OrderApplicationService:
    return OrderApplicationService()


@router.post("/orders/preview", response_model=PriceBreakdownResponse)
async def calculate_price_preview(
    req: PricePreviewRequest,
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> PriceBreakdownResponse:
    return await svc.calculate_price_preview(db, req.product_id, req.quantity, req.payment_method)


@router.post("/orders", response_model=PlaceOrderResponse, status_code=201)
async def place_order(
    req: PlaceOrderRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> PlaceOrderResponse:
    return await svc.place_order(db, user_id, req)


@router.get("/orders", response_model=OrderListResponse)
async def list_my_orders(
    user_id: Annotated[str | None, Depends(get_optional_user_id)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrderListResponse:
    return await svc.list_orders_for_buyer(db, user_id)


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrderResponse:
    return await svc.get_order_detail(db, order_id, user_id)


@router.post("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    req: UpdateOrderStatusRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrderResponse:
    return await svc.update_order_status(db, order_id, user_id, transition_from_request(req.root))


@router.get("/stores/{store_id}/orders", response_model=OrderListResponse)
async def list_store_orders(
    store_id: str,
    user_id: Annotated[str | None, Depends(get_optional_user_id)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrderListResponse:
    return await svc.list_orders_for_store(db, store_id, user_id)
