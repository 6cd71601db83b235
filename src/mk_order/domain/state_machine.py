"""Order status state machine.

    placed → processing → shipped → delivered
    placed | processing → cancelled
    processing | shipped | delivered | cancelled → refunded

Each target status accepts a closed set of patchable order fields; any other
field in a transition is rejected rather than silently applied.
"""

from dataclasses import dataclass, field

from src.mk_common.enums import OrderStatus
from src.mk_common.errors import FieldNotAllowedError, InvalidTransitionError
from src.mk_order.domain.models import Order, StatusHistoryEntry

VALID_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PLACED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.REFUNDED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.REFUNDED: frozenset(),
}

PATCHABLE_FIELDS: dict[OrderStatus, frozenset[str]] = {
    OrderStatus.PROCESSING: frozenset({"estimated_delivery_time"}),
    OrderStatus.SHIPPED: frozenset({"tracking_id", "courier_name", "estimated_delivery_time"}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset({"cancellation_reason"}),
    OrderStatus.REFUNDED: frozenset(),
}

INITIAL_HISTORY_DESCRIPTION = "Order has been placed successfully"


@dataclass(frozen=True)
class StatusTransition:
    new_status: str
    patch: dict[str, str] = field(default_factory=dict)
    location: str | None = None
    description: str | None = None


def _parse_status(value: str) -> OrderStatus | None:
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def can_transition(current: str, target: str) -> bool:
    cur, tgt = _parse_status(current), _parse_status(target)
    if cur is None or tgt is None:
        return False
    return tgt in VALID_TRANSITIONS[cur]


def initial_history_entry(timestamp_ms: int) -> StatusHistoryEntry:
    return StatusHistoryEntry(
        status=OrderStatus.PLACED.value,
        timestamp=timestamp_ms,
        description=INITIAL_HISTORY_DESCRIPTION,
    )


def apply_transition(
    order: Order, transition: StatusTransition, timestamp_ms: int
) -> StatusHistoryEntry:
    """Validate and apply a transition in place; return the appended history entry.

    Raises InvalidTransitionError / FieldNotAllowedError without touching the order.
    """
    if not can_transition(order.status, transition.new_status):
        raise InvalidTransitionError(order.status, transition.new_status)

    target = OrderStatus(transition.new_status)
    patch = {k: v for k, v in transition.patch.items() if v is not None}
    disallowed = set(patch) - PATCHABLE_FIELDS[target]
    if disallowed:
        raise FieldNotAllowedError(target.value, list(disallowed))

    entry = StatusHistoryEntry(
        status=target.value,
        timestamp=timestamp_ms,
        location=transition.location,
        description=transition.description or f"Order status updated to {target.value}",
    )
    order.status = target.value
    for name, value in patch.items():
        setattr(order, name, value)
    order.status_history.append(entry)
    return entry
