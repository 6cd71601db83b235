"""Unit tests for the pricing calculator."""
from decimal import Decimal

import pytest

from src.mk_catalog.domain.models import StoreFeeConfig
from src.mk_common.enums import PaymentMethod
from src.mk_common.errors import InvalidPriceError, InvalidQuantityError
from src.mk_pricing.domain.calculator import calculate_price

_FEES = StoreFeeConfig(
    store_charges=Decimal("20"),
    gst_applicable=True,
    gst_percentage=Decimal("18"),
    cod_available=True,
    cod_charges=Decimal("15"),
)


class TestExampleScenarios:
    def test_cod_order(self) -> None:
        b = calculate_price(Decimal("500"), 3, _FEES, PaymentMethod.COD)
        assert b.subtotal == Decimal("1500.00")
        assert b.gst_amount == Decimal("270.00")
        assert b.store_charges == Decimal("20.00")
        assert b.cod_charges == Decimal("15.00")
        assert b.final_total == Decimal("1805.00")

    def test_online_order_has_no_cod_fee(self) -> None:
        b = calculate_price(Decimal("500"), 3, _FEES, PaymentMethod.ONLINE)
        assert b.cod_charges == Decimal("0.00")
        assert b.final_total == Decimal("1790.00")

    def test_accepts_plain_string_method(self) -> None:
        b = calculate_price(Decimal("500"), 3, _FEES, "COD")
        assert b.final_total == Decimal("1805.00")


class TestFees:
    def test_gst_not_applicable(self) -> None:
        fees = StoreFeeConfig(store_charges=Decimal("20"), gst_applicable=False)
        b = calculate_price(Decimal("100"), 2, fees, PaymentMethod.ONLINE)
        assert b.gst_amount == Decimal("0.00")
        assert b.final_total == Decimal("220.00")

    def test_gst_defaults_to_18_when_unset(self) -> None:
        fees = StoreFeeConfig(gst_applicable=True, gst_percentage=None)
        b = calculate_price(Decimal("100"), 1, fees, PaymentMethod.ONLINE)
        assert b.gst_amount == Decimal("18.00")

    def test_zero_percent_gst_is_respected(self) -> None:
        fees = StoreFeeConfig(gst_applicable=True, gst_percentage=Decimal("0"))
        b = calculate_price(Decimal("100"), 1, fees, PaymentMethod.ONLINE)
        assert b.gst_amount == Decimal("0.00")

    def test_gst_is_not_levied_on_fees(self) -> None:
        fees = StoreFeeConfig(
            store_charges=Decimal("100"), gst_applicable=True,
            gst_percentage=Decimal("10"), cod_charges=Decimal("100"),
        )
        b = calculate_price(Decimal("10"), 1, fees, PaymentMethod.COD)
        assert b.gst_amount == Decimal("1.00")

    def test_missing_fees_count_as_zero(self) -> None:
        b = calculate_price(Decimal("99.99"), 1, StoreFeeConfig(), PaymentMethod.COD)
        assert b.store_charges == Decimal("0.00")
        assert b.cod_charges == Decimal("0.00")
        assert b.final_total == Decimal("99.99")

    def test_store_charges_are_per_order_not_per_unit(self) -> None:
        fees = StoreFeeConfig(store_charges=Decimal("20"))
        b = calculate_price(Decimal("10"), 5, fees, PaymentMethod.ONLINE)
        assert b.store_charges == Decimal("20.00")


class TestRounding:
    def test_gst_rounds_half_up(self) -> None:
        # 0.25 * 18% = 0.045 → 0.05
        fees = StoreFeeConfig(gst_applicable=True, gst_percentage=Decimal("18"))
        b = calculate_price(Decimal("0.25"), 1, fees, PaymentMethod.ONLINE)
        assert b.gst_amount == Decimal("0.05")

    def test_final_total_equals_sum_of_components(self) -> None:
        fees = StoreFeeConfig(
            store_charges=Decimal("12.345"), gst_applicable=True,
            gst_percentage=Decimal("12.5"), cod_charges=Decimal("7.775"),
        )
        b = calculate_price(Decimal("33.33"), 7, fees, PaymentMethod.COD)
        assert b.final_total == b.subtotal + b.store_charges + b.gst_amount + b.cod_charges
        for amount in (b.subtotal, b.store_charges, b.gst_amount, b.cod_charges, b.final_total):
            assert amount == amount.quantize(Decimal("0.01"))

    def test_free_product_is_allowed(self) -> None:
        b = calculate_price(Decimal("0"), 1, StoreFeeConfig(), PaymentMethod.ONLINE)
        assert b.final_total == Decimal("0.00")


class TestValidation:
    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantity(self, qty: int) -> None:
        with pytest.raises(InvalidQuantityError) as exc_info:
            calculate_price(Decimal("10"), qty, _FEES, PaymentMethod.ONLINE)
        assert exc_info.value.code == 3001

    @pytest.mark.parametrize("qty", [1.5, "2", True])
    def test_non_integer_quantity(self, qty: object) -> None:
        with pytest.raises(InvalidQuantityError):
            calculate_price(Decimal("10"), qty, _FEES, PaymentMethod.ONLINE)  # type: ignore[arg-type]

    def test_negative_price(self) -> None:
        with pytest.raises(InvalidPriceError) as exc_info:
            calculate_price(Decimal("-0.01"), 1, _FEES, PaymentMethod.ONLINE)
        assert exc_info.value.code == 3002

    def test_unknown_payment_method(self) -> None:
        with pytest.raises(ValueError):
            calculate_price(Decimal("10"), 1, _FEES, "UPI")
