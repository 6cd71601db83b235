"""Unit tests for the order status state machine."""
import pytest

from factories import make_order
from src.mk_common.errors import FieldNotAllowedError, InvalidTransitionError
from src.mk_order.domain.state_machine import (
    INITIAL_HISTORY_DESCRIPTION,
    StatusTransition,
    apply_transition,
    can_transition,
    initial_history_entry,
)


class TestCanTransition:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("placed", "processing"),
            ("placed", "cancelled"),
            ("processing", "shipped"),
            ("processing", "cancelled"),
            ("processing", "refunded"),
            ("shipped", "delivered"),
            ("shipped", "refunded"),
            ("delivered", "refunded"),
            ("cancelled", "refunded"),
        ],
    )
    def test_allowed(self, current: str, target: str) -> None:
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            ("placed", "shipped"),
            ("placed", "delivered"),
            ("placed", "refunded"),
            ("shipped", "cancelled"),
            ("delivered", "cancelled"),
            ("delivered", "placed"),
            ("cancelled", "processing"),
            ("refunded", "placed"),
            ("placed", "placed"),
        ],
    )
    def test_rejected(self, current: str, target: str) -> None:
        assert not can_transition(current, target)

    def test_unknown_status(self) -> None:
        assert not can_transition("placed", "lost")
        assert not can_transition("lost", "placed")

    def test_refunded_is_terminal(self) -> None:
        for target in ("placed", "processing", "shipped", "delivered", "cancelled", "refunded"):
            assert not can_transition("refunded", target)


class TestApplyTransition:
    def test_appends_entry_and_patches(self) -> None:
        order = make_order(status="processing")
        entry = apply_transition(
            order,
            StatusTransition(
                new_status="shipped",
                patch={"tracking_id": "TRK1", "courier_name": "Delhivery"},
                location="Bengaluru hub",
            ),
            1_700_000_100_000,
        )
        assert order.status == "shipped"
        assert order.tracking_id == "TRK1"
        assert order.courier_name == "Delhivery"
        assert order.status_history[-1] is entry
        assert entry.timestamp == 1_700_000_100_000
        assert entry.location == "Bengaluru hub"
        assert entry.description == "Order status updated to shipped"
        assert len(order.status_history) == 2

    def test_custom_description_kept(self) -> None:
        order = make_order()
        entry = apply_transition(
            order, StatusTransition(new_status="processing", description="Packed"), 1
        )
        assert entry.description == "Packed"

    def test_invalid_transition_leaves_order_untouched(self) -> None:
        order = make_order(status="delivered")
        with pytest.raises(InvalidTransitionError) as exc_info:
            apply_transition(order, StatusTransition(new_status="cancelled"), 1)
        assert exc_info.value.code == 4002
        assert order.status == "delivered"
        assert len(order.status_history) == 1

    def test_field_outside_closed_set_rejected(self) -> None:
        order = make_order()
        with pytest.raises(FieldNotAllowedError) as exc_info:
            apply_transition(
                order,
                StatusTransition(new_status="cancelled", patch={"tracking_id": "X"}),
                1,
            )
        assert "tracking_id" in exc_info.value.message
        assert order.status == "placed"
        assert order.tracking_id is None
        assert len(order.status_history) == 1

    def test_price_fields_cannot_be_patched(self) -> None:
        order = make_order(status="shipped")
        with pytest.raises(FieldNotAllowedError):
            apply_transition(
                order,
                StatusTransition(new_status="delivered", patch={"final_total": "0"}),
                1,
            )

    def test_none_patch_values_ignored(self) -> None:
        order = make_order()
        apply_transition(
            order,
            StatusTransition(new_status="cancelled", patch={"cancellation_reason": None}),
            1,
        )
        assert order.status == "cancelled"
        assert order.cancellation_reason is None

    def test_history_grows_by_one_per_transition(self) -> None:
        order = make_order()
        for i, status in enumerate(["processing", "shipped", "delivered", "refunded"], start=2):
            apply_transition(order, StatusTransition(new_status=status), i)
            assert len(order.status_history) == i
        assert [e.status for e in order.status_history] == [
            "placed", "processing", "shipped", "delivered", "refunded",
        ]


def test_initial_history_entry() -> None:
    entry = initial_history_entry(42)
    assert entry.status == "placed"
    assert entry.timestamp == 42
    assert entry.description == INITIAL_HISTORY_DESCRIPTION
