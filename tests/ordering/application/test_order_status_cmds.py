import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from urbanmart.ordering.order import Order
from urbanmart.ordering.queries import (
    all_orders,
    customer_order,
    customer_orders,
    merchant_orders,
    order_status_history,
)
from urbanmart.ordering.status import UpdateOrderStatus
from urbanmart.utils.errors import InvalidTransitionError, PermissionDeniedError


def _update(order_id, status, actor, **kwargs):
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, actor_id=actor.id, actor_role=actor.role, **kwargs),
        asynchronous=False,
    )


class TestUpdateOrderStatus:
    def test_merchant_confirms_own_order(self, marketplace, place_order):
        order_id = place_order(marketplace)
        _update(order_id, "CONFIRMED", marketplace.merchant)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "CONFIRMED"
        assert str(order.status_history[-1].updated_by) == str(marketplace.merchant.id)

    def test_shipping_with_tracking_number(self, marketplace, place_order):
        order_id = place_order(marketplace)
        _update(order_id, "PROCESSING", marketplace.merchant)
        _update(order_id, "SHIPPED", marketplace.merchant, tracking_number="TRK-42", notes="Out the door")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.tracking_number == "TRK-42"
        assert order.shipped_at is not None
        assert order.status_history[-1].notes == "Out the door"

    def test_other_merchant_denied(self, marketplace, place_order, create_user):
        order_id = place_order(marketplace)
        other = create_user(role="MERCHANT")
        with pytest.raises(PermissionDeniedError):
            _update(order_id, "CONFIRMED", other)

    def test_admin_may_update_any_order(self, marketplace, place_order):
        order_id = place_order(marketplace)
        _update(order_id, "CANCELLED", marketplace.admin)
        assert current_domain.repository_for(Order).get(order_id).status == "CANCELLED"

    def test_invalid_transition(self, marketplace, place_order):
        order_id = place_order(marketplace)
        with pytest.raises(InvalidTransitionError):
            _update(order_id, "DELIVERED", marketplace.merchant)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "PENDING"
        assert len(order.status_history) == 1

    def test_unknown_order(self, marketplace):
        with pytest.raises(ObjectNotFoundError):
            _update("missing", "CONFIRMED", marketplace.admin)


class TestOrderQueries:
    def test_customer_sees_own_orders(self, marketplace, place_order, create_user):
        place_order(marketplace)
        assert len(customer_orders(marketplace.customer.id)) == 1
        assert customer_orders(create_user().id) == []

    def test_customer_order_includes_history(self, marketplace, place_order):
        order_id = place_order(marketplace)
        data = customer_order(order_id, marketplace.customer.id)
        assert data["status_history"][0]["status"] == "PENDING"

    def test_customer_order_of_someone_else_is_not_found(self, marketplace, place_order, create_user):
        order_id = place_order(marketplace)
        with pytest.raises(ObjectNotFoundError):
            customer_order(order_id, create_user().id)

    def test_status_filter(self, marketplace, place_order):
        order_id = place_order(marketplace)
        _update(order_id, "CONFIRMED", marketplace.merchant)

        assert len(merchant_orders(marketplace.merchant.id, status="CONFIRMED")) == 1
        assert merchant_orders(marketplace.merchant.id, status="PENDING") == []
        assert len(all_orders()) == 1

    def test_history_newest_first(self, marketplace, place_order):
        order_id = place_order(marketplace)
        _update(order_id, "CONFIRMED", marketplace.merchant)
        _update(order_id, "PROCESSING", marketplace.merchant)

        rows = order_status_history(order_id, marketplace.customer.id, marketplace.customer.role)
        assert [r["status"] for r in rows] == ["PROCESSING", "CONFIRMED", "PENDING"]

    def test_history_hidden_from_strangers(self, marketplace, place_order):
        order_id = place_order(marketplace)
        with pytest.raises(ObjectNotFoundError):
            order_status_history(order_id, marketplace.courier.id, marketplace.courier.role)

    def test_admin_reads_any_history(self, marketplace, place_order):
        order_id = place_order(marketplace)
        rows = order_status_history(order_id, marketplace.admin.id, marketplace.admin.role)
        assert len(rows) == 1
