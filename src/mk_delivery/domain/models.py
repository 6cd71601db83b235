"""Delivery estimate: a tagged union, never an exception.

    Serviceable | NotServiceable | Unavailable

NotServiceable: the oracle answered and has no route to the pincode.
Unavailable:    the oracle could not be asked (timeout, non-2xx, no API key).
Callers must handle all three; both non-serviceable branches carry a
user-facing message.
"""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar

from src.mk_common.enums import EstimateOutcome, EstimateSource


@dataclass(frozen=True)
class OracleMatch:
    """A postal-code record returned by the delivery oracle."""

    pincode: str
    cash_on_delivery: bool
    district: str | None
    state: str | None


@dataclass(frozen=True)
class Serviceable:
    outcome: ClassVar[EstimateOutcome] = EstimateOutcome.SERVICEABLE
    serviceable: ClassVar[bool] = True

    estimated_days: int
    estimated_date: date
    courier_partner: str
    cash_on_delivery: bool
    district: str | None
    state: str | None
    source: EstimateSource


@dataclass(frozen=True)
class NotServiceable:
    outcome: ClassVar[EstimateOutcome] = EstimateOutcome.NOT_SERVICEABLE
    serviceable: ClassVar[bool] = False

    message: str


@dataclass(frozen=True)
class Unavailable:
    outcome: ClassVar[EstimateOutcome] = EstimateOutcome.UNAVAILABLE
    serviceable: ClassVar[bool] = False

    message: str


DeliveryEstimate = Serviceable | NotServiceable | Unavailable
