"""
Tests for the order status transition table and state machine.
"""

import pytest

from kirana.core.errors import InvalidTransitionError
from kirana.services.orders.enums import (
    ORDER_STATUS_TRANSITIONS,
    OrderStatus,
    get_allowed_order_transitions,
    validate_order_status_transition,
)
from kirana.services.orders.state_machine import transition_order_status

ALLOWED = {
    (OrderStatus.PENDING, OrderStatus.PREPARING),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY),
    (OrderStatus.PREPARING, OrderStatus.CANCELLED),
    (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED),
    (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED),
}


# ============================================================================
# Transition table
# ============================================================================


class TestTransitionTable:
    @pytest.mark.parametrize("current", list(OrderStatus))
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_table_matches_allowed_pairs(self, current, target):
        assert validate_order_status_transition(current, target) == (
            (current, target) in ALLOWED
        )

    def test_every_status_has_an_entry(self):
        assert set(ORDER_STATUS_TRANSITIONS) == set(OrderStatus)

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_statuses_have_no_exits(self, status):
        assert status.is_terminal
        assert get_allowed_order_transitions(status) == set()

    def test_allowed_transitions_returns_copy(self):
        allowed = get_allowed_order_transitions(OrderStatus.PENDING)
        allowed.add(OrderStatus.DELIVERED)

        assert OrderStatus.DELIVERED not in ORDER_STATUS_TRANSITIONS[OrderStatus.PENDING]

    def test_can_cancel_only_before_final(self):
        assert OrderStatus.PENDING.can_cancel
        assert OrderStatus.OUT_FOR_DELIVERY.can_cancel
        assert not OrderStatus.DELIVERED.can_cancel
        assert not OrderStatus.CANCELLED.can_cancel


# ============================================================================
# Status parsing
# ============================================================================


class TestStatusParsing:
    @pytest.mark.parametrize(
        "raw",
        ["Out for Delivery", "out for delivery", "OUT_FOR_DELIVERY", " Out For Delivery "],
    )
    def test_from_string_accepts_display_and_member_names(self, raw):
        assert OrderStatus.from_string(raw) == OrderStatus.OUT_FOR_DELIVERY

    def test_from_string_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid order status"):
            OrderStatus.from_string("Shipped")


# ============================================================================
# transition_order_status
# ============================================================================


class TestTransitionOrderStatus:
    def test_pending_to_preparing(self):
        assert (
            transition_order_status(OrderStatus.PENDING, OrderStatus.PREPARING)
            == OrderStatus.PREPARING
        )

    def test_accepts_display_string(self):
        assert (
            transition_order_status(OrderStatus.PREPARING, "Out for Delivery")
            == OrderStatus.OUT_FOR_DELIVERY
        )

    def test_skipping_a_step_is_rejected(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            transition_order_status(OrderStatus.PREPARING, OrderStatus.DELIVERED)

        error = exc_info.value
        assert error.current_status == OrderStatus.PREPARING
        assert error.target_status == OrderStatus.DELIVERED
        assert error.context["allowed_transitions"] == ["Cancelled", "Out for Delivery"]
        assert "Preparing" in error.message

    def test_moving_backwards_is_rejected(self):
        with pytest.raises(InvalidTransitionError):
            transition_order_status(OrderStatus.OUT_FOR_DELIVERY, OrderStatus.PENDING)

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_terminal_orders_never_change(self, terminal, target):
        with pytest.raises(InvalidTransitionError, match="already"):
            transition_order_status(terminal, target)

    def test_same_status_is_rejected(self):
        with pytest.raises(InvalidTransitionError):
            transition_order_status(OrderStatus.PENDING, OrderStatus.PENDING)

    def test_unknown_target_raises_value_error(self):
        with pytest.raises(ValueError):
            transition_order_status(OrderStatus.PENDING, "Teleported")
