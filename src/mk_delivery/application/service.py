"""DeliveryApplicationService: composes the estimator with the fallback policy.

Policy: when the oracle path is Unavailable and an origin pincode is known,
answer with the deterministic fallback estimate; otherwise return the
estimator's outcome unchanged (NotServiceable is never overridden).
"""

import logging
from datetime import date

from config.settings import settings
from src.mk_common.datetime_utils import utc_now
from src.mk_delivery.application.schemas import DeliveryEstimateResponse
from src.mk_delivery.domain.estimator import DeliveryEstimator, fallback_estimate
from src.mk_delivery.domain.models import DeliveryEstimate, Unavailable
from src.mk_delivery.domain.oracle import DeliveryOracleProtocol
from src.mk_delivery.infrastructure.oracle_client import HttpDeliveryOracle

logger = logging.getLogger(__name__)


class DeliveryApplicationService:
    def __init__(self, oracle: DeliveryOracleProtocol | None = None) -> None:
        self._holidays = frozenset(settings.DELIVERY_HOLIDAYS)
        self._courier = settings.DELIVERY_COURIER_NAME
        self._estimator = DeliveryEstimator(
            oracle=oracle
            or HttpDeliveryOracle(
                base_url=settings.DELIVERY_API_URL,
                api_key=settings.DELIVERY_API_KEY,
                timeout_seconds=settings.DELIVERY_TIMEOUT_SECONDS,
            ),
            courier_partner=self._courier,
            default_days=settings.DELIVERY_DEFAULT_DAYS,
            holidays=self._holidays,
        )

    async def estimate(
        self,
        destination_pincode: str,
        origin_pincode: str | None = None,
        today: date | None = None,
    ) -> DeliveryEstimate:
        today = today or utc_now().date()
        result = await self._estimator.check_serviceability(
            destination_pincode, today, origin_pincode
        )
        if isinstance(result, Unavailable) and origin_pincode is not None:
            logger.info(
                "Using fallback delivery estimate %s -> %s", origin_pincode, destination_pincode
            )
            return fallback_estimate(
                origin_pincode, destination_pincode, today, self._holidays, self._courier
            )
        return result

    async def check_delivery_serviceability(
        self,
        destination_pincode: str,
        origin_pincode: str | None = None,
    ) -> DeliveryEstimateResponse:
        estimate = await self.estimate(destination_pincode, origin_pincode)
        return DeliveryEstimateResponse.from_domain(estimate)
