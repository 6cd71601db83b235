"""Price breakdown value object."""
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    store_charges: Decimal
    gst_amount: Decimal
    cod_charges: Decimal
    final_total: Decimal
