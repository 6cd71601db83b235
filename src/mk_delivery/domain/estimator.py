"""Delivery estimator: oracle lookup with a deterministic fallback rule.

Fallback day count, from the first two digits (postal region) of the
origin and destination pincodes:

    distance = |origin[:2] - dest[:2]|
    0 → 1 day, ≤5 → 2 days, ≤15 → 3 days, else 5 days
    + 1 day per Sunday and per holiday inside the delivery window
    capped at 7 days

The estimated date is today + days, pushed past Sunday (no deliveries).
No retries are made here; the caller decides whether to fall back.
"""

import logging
import re
from datetime import date, timedelta

from src.mk_common.enums import EstimateSource
from src.mk_common.errors import InvalidPincodeError
from src.mk_delivery.domain.models import (
    DeliveryEstimate,
    NotServiceable,
    Serviceable,
    Unavailable,
)
from src.mk_delivery.domain.oracle import DeliveryOracleError, DeliveryOracleProtocol

logger = logging.getLogger(__name__)

MAX_ESTIMATED_DAYS = 7
NON_DELIVERY_WEEKDAY = 6  # Sunday (date.weekday())

_PINCODE_RE = re.compile(r"[0-9]{6}")

NOT_SERVICEABLE_MESSAGE = "Delivery is not available to this pincode yet."
UNAVAILABLE_MESSAGE = "Unable to check delivery right now. Please try again later."


def validate_pincode(pincode: str) -> str:
    if not isinstance(pincode, str) or not _PINCODE_RE.fullmatch(pincode):
        raise InvalidPincodeError(str(pincode))
    return pincode


def base_days_for_distance(origin_pincode: str, destination_pincode: str) -> int:
    distance = abs(int(origin_pincode[:2]) - int(destination_pincode[:2]))
    if distance == 0:
        return 1
    if distance <= 5:
        return 2
    if distance <= 15:
        return 3
    return 5


def padded_days(base_days: int, today: date, holidays: frozenset[str]) -> int:
    """Add one day per Sunday/holiday in (today, today + base_days], capped at 7."""
    padding = 0
    for offset in range(1, base_days + 1):
        day = today + timedelta(days=offset)
        if day.weekday() == NON_DELIVERY_WEEKDAY or day.strftime("%m-%d") in holidays:
            padding += 1
    return min(base_days + padding, MAX_ESTIMATED_DAYS)


def estimated_delivery_date(today: date, days: int) -> date:
    target = today + timedelta(days=days)
    if target.weekday() == NON_DELIVERY_WEEKDAY:
        target += timedelta(days=1)
    return target


def fallback_estimate(
    origin_pincode: str,
    destination_pincode: str,
    today: date,
    holidays: frozenset[str],
    courier_partner: str,
) -> Serviceable:
    """Deterministic estimate used when the oracle path is unavailable."""
    validate_pincode(origin_pincode)
    validate_pincode(destination_pincode)
    days = padded_days(
        base_days_for_distance(origin_pincode, destination_pincode), today, holidays
    )
    return Serviceable(
        estimated_days=days,
        estimated_date=estimated_delivery_date(today, days),
        courier_partner=courier_partner,
        cash_on_delivery=False,
        district=None,
        state=None,
        source=EstimateSource.FALLBACK,
    )


class DeliveryEstimator:
    def __init__(
        self,
        oracle: DeliveryOracleProtocol,
        courier_partner: str,
        default_days: int,
        holidays: frozenset[str] = frozenset(),
    ) -> None:
        self._oracle = oracle
        self._courier_partner = courier_partner
        self._default_days = default_days
        self._holidays = holidays

    async def check_serviceability(
        self,
        destination_pincode: str,
        today: date,
        origin_pincode: str | None = None,
    ) -> DeliveryEstimate:
        validate_pincode(destination_pincode)
        if origin_pincode is not None:
            validate_pincode(origin_pincode)

        try:
            match = await self._oracle.lookup(destination_pincode)
        except DeliveryOracleError as exc:
            logger.warning("Delivery oracle unavailable for %s: %s", destination_pincode, exc)
            return Unavailable(message=UNAVAILABLE_MESSAGE)

        if match is None:
            return NotServiceable(message=NOT_SERVICEABLE_MESSAGE)

        if origin_pincode is not None:
            days = padded_days(
                base_days_for_distance(origin_pincode, destination_pincode),
                today,
                self._holidays,
            )
        else:
            days = min(self._default_days, MAX_ESTIMATED_DAYS)

        return Serviceable(
            estimated_days=days,
            estimated_date=estimated_delivery_date(today, days),
            courier_partner=self._courier_partner,
            cash_on_delivery=match.cash_on_delivery,
            district=match.district,
            state=match.state,
            source=EstimateSource.ORACLE,
        )
