"""Sales and return lifecycles."""

from datetime import datetime, timezone

import pytest

from inventory_engine.processors.reports.core.status import (
    InvalidTransitionError,
    ReturnStatus,
    SalesStatus,
    allowed_transitions,
    check_transition,
    is_revenue_eligible,
    return_actions,
    sales_actions,
    status_update_payload,
)


class TestAllowedTransitions:
    """Transition tables are total and acyclic."""

    def test_expected_allows_delivered_and_return(self):
        assert allowed_transitions(SalesStatus.EXPECTED) == {SalesStatus.DELIVERED, SalesStatus.RETURNED}

    @pytest.mark.parametrize("state", [ReturnStatus.RECEIVED, ReturnStatus.CANCELLED])
    def test_terminal_return_states(self, state):
        assert allowed_transitions(state) == frozenset()

    @pytest.mark.parametrize("state", [SalesStatus.RETURNED, SalesStatus.CANCELLED])
    def test_terminal_sales_states(self, state):
        assert allowed_transitions(state) == frozenset()

    def test_total_over_both_enums(self):
        for state in list(SalesStatus) + list(ReturnStatus):
            assert isinstance(allowed_transitions(state), frozenset)

    def test_no_cycles(self):
        for enum_cls in (SalesStatus, ReturnStatus):
            for start in enum_cls:
                seen, frontier = set(), set(allowed_transitions(start))
                while frontier:
                    state = frontier.pop()
                    assert state != start
                    if state not in seen:
                        seen.add(state)
                        frontier |= allowed_transitions(state)

    def test_rejects_plain_strings(self):
        with pytest.raises(TypeError):
            allowed_transitions("pending")


class TestActions:
    """Button lists per status."""

    def test_pending_sale(self):
        assert sales_actions("pending") == [
            (SalesStatus.DISPATCH, "Dispatch"),
            (SalesStatus.CANCELLED, "Cancel"),
        ]

    def test_expected_sale(self):
        labels = [label for _, label in sales_actions("expected")]
        assert labels == ["Mark Delivered", "Return"]

    def test_unknown_status_has_no_actions(self):
        assert sales_actions("shipped") == []
        assert return_actions("lost") == []

    def test_in_transit_return(self):
        assert return_actions("in_transit") == [
            (ReturnStatus.RECEIVED, "Mark Received"),
            (ReturnStatus.CANCELLED, "Cancel"),
        ]


class TestStatusUpdatePayload:
    """PATCH bodies and transition checks."""

    def test_sales_payload(self):
        assert status_update_payload("pending", SalesStatus.DISPATCH) == {"status": "dispatch"}

    def test_received_return_carries_timestamp(self):
        now = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        payload = status_update_payload("in_transit", ReturnStatus.RECEIVED, now=now)
        assert payload == {"status": "received", "actualReturnDate": "2024-05-01T10:00:00+00:00"}

    def test_other_return_transitions_clear_timestamp(self):
        payload = status_update_payload(ReturnStatus.PENDING, ReturnStatus.IN_TRANSIT)
        assert payload == {"status": "in_transit", "actualReturnDate": None}

    def test_invalid_transition_raises(self):
        with pytest.raises(InvalidTransitionError):
            status_update_payload("delivered", SalesStatus.PENDING)
        with pytest.raises(InvalidTransitionError):
            check_transition(ReturnStatus.RECEIVED, ReturnStatus.CANCELLED)

    def test_unknown_status_raises(self):
        with pytest.raises(InvalidTransitionError):
            check_transition("teleported", SalesStatus.DELIVERED)


class TestRevenueEligibility:
    @pytest.mark.parametrize("status", ["cancelled", "returned", "expected_return", SalesStatus.RETURNED])
    def test_excluded(self, status):
        assert not is_revenue_eligible(status)

    @pytest.mark.parametrize("status", ["pending", "dispatch", "expected", "delivered", None])
    def test_included(self, status):
        assert is_revenue_eligible(status)
