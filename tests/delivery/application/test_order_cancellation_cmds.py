import pytest
from protean import current_domain
from urbanmart.delivery.assignment import DeliveryAssignment
from urbanmart.delivery.progress import UpdateDeliveryStatus
from urbanmart.delivery.queries import delivery_stats
from urbanmart.ordering.order import Order
from urbanmart.ordering.status import UpdateOrderStatus
from urbanmart.utils.errors import InvalidTransitionError


def _update(market, order_id, status, actor=None):
    actor = actor or market.merchant
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, actor_id=actor.id, actor_role=actor.role),
        asynchronous=False,
    )


def _assignment(assignment_id):
    return current_domain.repository_for(DeliveryAssignment).get(assignment_id)


class TestCancellingAnOrder:
    def test_cancels_assigned_delivery(self, marketplace, place_order, assign_delivery):
        order_id = place_order(marketplace)
        assignment_id = assign_delivery(marketplace, order_id)

        _update(marketplace, order_id, "CANCELLED")

        assert current_domain.repository_for(Order).get(order_id).status == "CANCELLED"
        assert _assignment(assignment_id).status == "CANCELLED"
        assert delivery_stats(marketplace.courier.id)["pending"] == 0

    def test_cancels_open_organization_request(self, marketplace, place_order, organization, request_delivery):
        order_id = place_order(marketplace)
        assignment_id = request_delivery(marketplace, order_id, organization)

        _update(marketplace, order_id, "CANCELLED", actor=marketplace.admin)

        assert _assignment(assignment_id).status == "CANCELLED"

    def test_courier_can_no_longer_pick_up(self, marketplace, place_order, assign_delivery):
        order_id = place_order(marketplace)
        assignment_id = assign_delivery(marketplace, order_id)
        _update(marketplace, order_id, "CANCELLED")

        with pytest.raises(InvalidTransitionError):
            current_domain.process(
                UpdateDeliveryStatus(
                    assignment_id=assignment_id,
                    delivery_user_id=marketplace.courier.id,
                    status="IN_TRANSIT",
                ),
                asynchronous=False,
            )
        assert current_domain.repository_for(Order).get(order_id).status == "CANCELLED"

    def test_already_cancelled_delivery_is_skipped(self, marketplace, place_order, assign_delivery):
        order_id = place_order(marketplace)
        first = assign_delivery(marketplace, order_id)
        current_domain.process(
            UpdateDeliveryStatus(assignment_id=first, delivery_user_id=marketplace.courier.id, status="CANCELLED"),
            asynchronous=False,
        )
        second = assign_delivery(marketplace, order_id)

        _update(marketplace, order_id, "CANCELLED")

        assert _assignment(first).status == "CANCELLED"
        assert _assignment(second).status == "CANCELLED"


class TestRefundingAnOrder:
    def test_refund_after_manual_delivery_cancels_waiting_courier(self, marketplace, place_order, assign_delivery):
        order_id = place_order(marketplace)
        assignment_id = assign_delivery(marketplace, order_id)
        for status in ("SHIPPED", "DELIVERED", "REFUNDED"):
            _update(marketplace, order_id, status)

        assert _assignment(assignment_id).status == "CANCELLED"
