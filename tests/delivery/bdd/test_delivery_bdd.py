"""BDD tests for the courier-driven delivery workflow."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from urbanmart.delivery.assignment import DeliveryAssignment
from urbanmart.delivery.dispatch import ReassignDelivery
from urbanmart.delivery.progress import UpdateDeliveryStatus
from urbanmart.ordering.order import Order

scenarios("features/delivery_workflow.feature")


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a placed order", target_fixture="order_id")
def _(marketplace, place_order):
    return place_order(marketplace)


@given("the merchant assigns it to the courier", target_fixture="assignment_id")
def _(marketplace, order_id, assign_delivery):
    return assign_delivery(marketplace, order_id)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the courier reports "{status}"'))
def _(marketplace, assignment_id, status):
    current_domain.process(
        UpdateDeliveryStatus(assignment_id=assignment_id, delivery_user_id=marketplace.courier.id, status=status),
        asynchronous=False,
    )


@when("the merchant tries to hand the delivery to another courier")
def _(marketplace, assignment_id, create_user, error):
    backup = create_user(role="DELIVERY")
    try:
        current_domain.process(
            ReassignDelivery(
                merchant_id=marketplace.merchant.id,
                assignment_id=assignment_id,
                delivery_user_id=backup.id,
            ),
            asynchronous=False,
        )
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse('the assignment status is "{status}"'))
def _(assignment_id, status):
    assert current_domain.repository_for(DeliveryAssignment).get(assignment_id).status == status


@then(parsers.cfparse("the order has {count:d} history rows"))
def _(order_id, count):
    assert len(current_domain.repository_for(Order).get(order_id).status_history) == count


@then("the order has a shipped timestamp")
def _(order_id):
    assert current_domain.repository_for(Order).get(order_id).shipped_at is not None


@then(parsers.cfparse('the hand-over fails with "{message}"'))
def _(error, message):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert message in str(error["exc"])


@then("the assignment still belongs to the courier")
def _(marketplace, assignment_id):
    assignment = current_domain.repository_for(DeliveryAssignment).get(assignment_id)
    assert assignment.is_assigned_to(marketplace.courier.id)
