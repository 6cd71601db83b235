# src/mk_delivery/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from config.settings import settings
from src.mk_common.redis_client import get_redis
from src.mk_delivery.application.schemas import DeliveryEstimateResponse
from src.mk_delivery.application.service import DeliveryApplicationService
from src.mk_delivery.infrastructure.cache import CachedDeliveryOracle
from src.mk_delivery.infrastructure.oracle_client import HttpDeliveryOracle

router = APIRouter(prefix="/delivery", tags=["delivery"])


async def get_delivery_service() -> DeliveryApplicationService:
    oracle = CachedDeliveryOracle(
        inner=HttpDeliveryOracle(
            base_url=settings.DELIVERY_API_URL,
            api_key=settings.DELIVERY_API_KEY,
            timeout_seconds=settings.DELIVERY_TIMEOUT_SECONDS,
        ),
        redis=await get_redis(),
        ttl_seconds=settings.DELIVERY_CACHE_TTL_SECONDS,
    )
    return DeliveryApplicationService(oracle=oracle)


@router.get("/serviceability", response_model=DeliveryEstimateResponse)
async def check_serviceability(
    svc: Annotated[DeliveryApplicationService, Depends(get_delivery_service)],
    pincode: str = Query(..., description="Destination pincode (6 digits)"),
    origin_pincode: str | None = Query(None, description="Store pincode, enables fallback"),
) -> DeliveryEstimateResponse:
    return await svc.check_delivery_serviceability(pincode, origin_pincode)
