import pytest
from protean.exceptions import ValidationError
from urbanmart.delivery.assignment import (
    REASSIGNMENT_LOCKED_MESSAGE,
    DeliveryAssignment,
    DeliveryStatus,
)
from urbanmart.delivery.events import DeliveryAssigned, DeliveryRequested, DeliveryStatusChanged
from urbanmart.utils.errors import InvalidTransitionError


def _assigned():
    return DeliveryAssignment.assign(order_id="order-1", merchant_id="merchant-1", delivery_user_id="courier-1")


def _requested():
    return DeliveryAssignment.request(order_id="order-1", merchant_id="merchant-1", delivery_organization_id="org-1")


class TestCreation:
    def test_assign(self):
        assignment = _assigned()
        assert assignment.status == DeliveryStatus.ASSIGNED.value
        assert assignment.assigned_at is not None
        assert assignment.is_assigned_to("courier-1")
        assert isinstance(assignment._events[-1], DeliveryAssigned)

    def test_request_has_no_courier(self):
        assignment = _requested()
        assert assignment.status == DeliveryStatus.REQUESTED.value
        assert assignment.delivery_user_id is None
        assert not assignment.is_assigned_to("courier-1")
        assert isinstance(assignment._events[-1], DeliveryRequested)

    def test_defaults(self):
        assignment = _assigned()
        assert assignment.delivery_fee == 0.0
        assert assignment.payment_type == "PREPAID"
        assert assignment.is_active


class TestProgress:
    def test_pickup_then_complete(self):
        assignment = _assigned()
        assignment.mark_in_transit(instructions="Ring twice")
        assert assignment.picked_up_at is not None
        assert assignment.instructions == "Ring twice"

        assignment.mark_completed()
        assert assignment.completed_at is not None
        assert not assignment.is_active
        assert isinstance(assignment._events[-1], DeliveryStatusChanged)

    def test_cannot_complete_before_pickup(self):
        with pytest.raises(InvalidTransitionError):
            _assigned().mark_completed()

    def test_completed_is_terminal(self):
        assignment = _assigned()
        assignment.mark_in_transit()
        assignment.mark_completed()
        with pytest.raises(InvalidTransitionError):
            assignment.cancel()

    def test_cancel_from_assigned(self):
        assignment = _assigned()
        assignment.cancel()
        assert assignment.status == "CANCELLED"


class TestRequests:
    def test_accept(self):
        assignment = _requested()
        assignment.accept_request()
        assert assignment.status == "ASSIGNED"
        assert assignment.assigned_at is not None

    def test_decline(self):
        assignment = _requested()
        assignment.decline_request()
        assert assignment.status == "CANCELLED"

    def test_accept_twice(self):
        assignment = _requested()
        assignment.accept_request()
        with pytest.raises(InvalidTransitionError):
            assignment.accept_request()


class TestReassignment:
    def test_assign_courier_to_request(self):
        assignment = _requested()
        assert assignment.assign_courier("courier-2", order_status="CONFIRMED") is True
        assert assignment.status == "ASSIGNED"
        assert assignment.is_assigned_to("courier-2")

    def test_reassign_assigned(self):
        assignment = _assigned()
        assert assignment.assign_courier("courier-2", order_status="CONFIRMED") is False
        assert assignment.is_assigned_to("courier-2")

    def test_reassign_after_pickup_rejected(self):
        assignment = _assigned()
        assignment.mark_in_transit()
        with pytest.raises(ValidationError) as exc:
            assignment.assign_courier("courier-2", order_status="SHIPPED")
        assert exc.value.messages["assignment"] == [REASSIGNMENT_LOCKED_MESSAGE]
        assert assignment.is_assigned_to("courier-1")

    def test_reassign_when_order_already_delivered(self):
        with pytest.raises(ValidationError):
            _assigned().ensure_reassignable("DELIVERED")

    def test_reassign_cancelled(self):
        assignment = _assigned()
        assignment.cancel()
        with pytest.raises(InvalidTransitionError):
            assignment.assign_courier("courier-2", order_status="CONFIRMED")
