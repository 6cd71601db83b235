"""Pricing calculator: (unit price, quantity, store fees, payment method) → breakdown.

Pure function, shared by the checkout preview and by order creation so the
two always agree exactly for identical inputs.

    subtotal     = unit_price × quantity
    store_charges= flat per-order fee (not per unit)
    gst_amount   = subtotal × gst% / 100       (only when the store opts in)
    cod_charges  = store COD fee                (only for COD)
    final_total  = subtotal + store_charges + gst_amount + cod_charges

GST is levied on the subtotal only; store and COD charges are not taxed.
"""

from decimal import Decimal

from src.mk_catalog.domain.models import StoreFeeConfig
from src.mk_common.enums import PaymentMethod
from src.mk_common.errors import InvalidPriceError, InvalidQuantityError
from src.mk_common.money import ZERO, to_money
from src.mk_pricing.domain.models import PriceBreakdown

DEFAULT_GST_PERCENTAGE = Decimal("18")


def calculate_price(
    unit_price: Decimal,
    quantity: int,
    fee_config: StoreFeeConfig,
    payment_method: PaymentMethod | str,
) -> PriceBreakdown:
    # bool is an int subclass; True must not pass as quantity 1
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity)
    if unit_price < 0:
        raise InvalidPriceError(unit_price)

    subtotal = to_money(Decimal(unit_price) * quantity)
    store_charges = to_money(fee_config.store_charges)

    gst_amount = ZERO
    if fee_config.gst_applicable:
        pct = (
            fee_config.gst_percentage
            if fee_config.gst_percentage is not None
            else DEFAULT_GST_PERCENTAGE
        )
        gst_amount = to_money(subtotal * Decimal(pct) / 100)

    cod_charges = ZERO
    if PaymentMethod(payment_method) == PaymentMethod.COD:
        cod_charges = to_money(fee_config.cod_charges)

    return PriceBreakdown(
        subtotal=subtotal,
        store_charges=store_charges,
        gst_amount=gst_amount,
        cod_charges=cod_charges,
        final_total=subtotal + store_charges + gst_amount + cod_charges,
    )
