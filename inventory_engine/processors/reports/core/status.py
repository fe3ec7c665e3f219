"""
Status — lifecycle states for sales orders and expected returns.

Both lifecycles are small acyclic tables. `allowed_transitions()` is total
over each enum: terminal states map to an empty set, so UI code only ever
asks "which buttons for this state?" and never branches on status strings.

Sales order flow:
    pending -> dispatch -> expected -> delivered -> returned
    pending / dispatch  -> cancelled
    expected            -> returned (refused on delivery)
    expected_return     -> delivered (customer kept it) | returned

Expected-return flow:
    pending -> in_transit -> received
    pending / in_transit -> cancelled
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum


class InvalidTransitionError(ValueError):
    """Raised when a status change is not allowed from the current state."""


class SalesStatus(str, Enum):
    PENDING = "pending"
    DISPATCH = "dispatch"
    EXPECTED = "expected"
    DELIVERED = "delivered"
    EXPECTED_RETURN = "expected_return"
    RETURNED = "returned"
    CANCELLED = "cancelled"


class ReturnStatus(str, Enum):
    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    RECEIVED = "received"
    CANCELLED = "cancelled"


_SALES_TRANSITIONS: dict[SalesStatus, frozenset[SalesStatus]] = {
    SalesStatus.PENDING: frozenset({SalesStatus.DISPATCH, SalesStatus.CANCELLED}),
    SalesStatus.DISPATCH: frozenset({SalesStatus.EXPECTED, SalesStatus.CANCELLED}),
    SalesStatus.EXPECTED: frozenset({SalesStatus.DELIVERED, SalesStatus.RETURNED}),
    SalesStatus.DELIVERED: frozenset({SalesStatus.RETURNED}),
    SalesStatus.EXPECTED_RETURN: frozenset({SalesStatus.DELIVERED, SalesStatus.RETURNED}),
    SalesStatus.RETURNED: frozenset(),
    SalesStatus.CANCELLED: frozenset(),
}

_RETURN_TRANSITIONS: dict[ReturnStatus, frozenset[ReturnStatus]] = {
    ReturnStatus.PENDING: frozenset({ReturnStatus.IN_TRANSIT, ReturnStatus.CANCELLED}),
    ReturnStatus.IN_TRANSIT: frozenset({ReturnStatus.RECEIVED, ReturnStatus.CANCELLED}),
    ReturnStatus.RECEIVED: frozenset(),
    ReturnStatus.CANCELLED: frozenset(),
}

# Button captions, keyed by the state the button moves to
SALES_ACTION_LABELS: dict[SalesStatus, str] = {
    SalesStatus.DISPATCH: "Dispatch",
    SalesStatus.EXPECTED: "Out for Delivery",
    SalesStatus.DELIVERED: "Mark Delivered",
    SalesStatus.RETURNED: "Return",
    SalesStatus.CANCELLED: "Cancel",
}

RETURN_ACTION_LABELS: dict[ReturnStatus, str] = {
    ReturnStatus.IN_TRANSIT: "Mark In Transit",
    ReturnStatus.RECEIVED: "Mark Received",
    ReturnStatus.CANCELLED: "Cancel",
}

# Orders that never count towards revenue
NON_REVENUE_STATUSES = frozenset({
    SalesStatus.CANCELLED.value,
    SalesStatus.RETURNED.value,
    SalesStatus.EXPECTED_RETURN.value,
})

# Orders that count towards the return rate
RETURN_STATUSES = frozenset({
    SalesStatus.RETURNED.value,
    SalesStatus.EXPECTED_RETURN.value,
})


def _coerce(state, enum_cls):
    if isinstance(state, enum_cls):
        return state
    try:
        return enum_cls(str(state))
    except ValueError:
        raise InvalidTransitionError(f"Unknown {enum_cls.__name__} '{state}'") from None


def allowed_transitions(state: SalesStatus | ReturnStatus) -> frozenset:
    """Return the set of states reachable in one step from *state*."""
    if isinstance(state, ReturnStatus):
        return _RETURN_TRANSITIONS[state]
    if isinstance(state, SalesStatus):
        return _SALES_TRANSITIONS[state]
    raise TypeError(f"Expected SalesStatus or ReturnStatus, got {type(state).__name__}")


def sales_actions(status: str) -> list[tuple[SalesStatus, str]]:
    """
    (target, label) pairs for a sales order's current status string.

    Unknown statuses (legacy values such as 'shipped') get no actions.
    """
    try:
        current = SalesStatus(status)
    except ValueError:
        return []
    targets = sorted(allowed_transitions(current), key=lambda s: list(SalesStatus).index(s))
    return [(t, SALES_ACTION_LABELS[t]) for t in targets]


def return_actions(status: str) -> list[tuple[ReturnStatus, str]]:
    """(target, label) pairs for an expected return's current status string."""
    try:
        current = ReturnStatus(status)
    except ValueError:
        return []
    targets = sorted(allowed_transitions(current), key=lambda s: list(ReturnStatus).index(s))
    return [(t, RETURN_ACTION_LABELS[t]) for t in targets]


def check_transition(current, target) -> None:
    """Raise InvalidTransitionError unless current -> target is allowed."""
    enum_cls = type(current) if isinstance(current, (SalesStatus, ReturnStatus)) else None
    if enum_cls is None:
        enum_cls = ReturnStatus if isinstance(target, ReturnStatus) else SalesStatus
    current = _coerce(current, enum_cls)
    target = _coerce(target, enum_cls)
    if target not in allowed_transitions(current):
        raise InvalidTransitionError(
            f"Cannot move from '{current.value}' to '{target.value}'"
        )


def status_update_payload(current, target, now: datetime | None = None) -> dict:
    """
    Validate a transition and build the PATCH body for it.

    A return moving to 'received' carries the actual return timestamp,
    every other transition sends actualReturnDate=None (returns) or only
    the status (sales orders).
    """
    check_transition(current, target)
    if isinstance(target, ReturnStatus) or isinstance(current, ReturnStatus):
        target = _coerce(target, ReturnStatus)
        received_at = None
        if target is ReturnStatus.RECEIVED:
            received_at = (now or datetime.now(timezone.utc)).isoformat()
        return {"status": target.value, "actualReturnDate": received_at}
    return {"status": _coerce(target, SalesStatus).value}


def is_revenue_eligible(status) -> bool:
    """True unless the order is cancelled, returned or awaiting a return."""
    value = status.value if isinstance(status, Enum) else status
    return value not in NON_REVENUE_STATUSES
