# src/mk_delivery/application/schemas.py
from datetime import date

from pydantic import BaseModel

from src.mk_delivery.domain.models import DeliveryEstimate, Serviceable


class DeliveryEstimateResponse(BaseModel):
    outcome: str  # SERVICEABLE / NOT_SERVICEABLE / UNAVAILABLE
    serviceable: bool
    estimated_days: int | None = None
    estimated_date: date | None = None
    courier_partner: str | None = None
    cash_on_delivery: bool = False
    district: str | None = None
    state: str | None = None
    source: str | None = None  # ORACLE / FALLBACK
    message: str | None = None

    @classmethod
    def from_domain(cls, estimate: DeliveryEstimate) -> "DeliveryEstimateResponse":
        if isinstance(estimate, Serviceable):
            return cls(
                outcome=estimate.outcome.value,
                serviceable=True,
                estimated_days=estimate.estimated_days,
                estimated_date=estimate.estimated_date,
                courier_partner=estimate.courier_partner,
                cash_on_delivery=estimate.cash_on_delivery,
                district=estimate.district,
                state=estimate.state,
                source=estimate.source.value,
            )
        return cls(
            outcome=estimate.outcome.value,
            serviceable=False,
            message=estimate.message,
        )
