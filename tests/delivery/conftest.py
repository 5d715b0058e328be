import pytest
from protean import current_domain
from urbanmart.delivery.dispatch import AssignDelivery, RequestDelivery
from urbanmart.delivery.hiring import CreateDeliveryOrganization


@pytest.fixture()
def organization(marketplace):
    """The marketplace courier owns "Fast Couriers"."""
    return current_domain.process(
        CreateDeliveryOrganization(owner_id=marketplace.courier.id, name="Fast Couriers"),
        asynchronous=False,
    )


@pytest.fixture()
def assign_delivery():
    def _assign(market, order_id, courier=None, **kwargs):
        return current_domain.process(
            AssignDelivery(
                merchant_id=market.merchant.id,
                order_id=order_id,
                delivery_user_id=(courier or market.courier).id,
                **kwargs,
            ),
            asynchronous=False,
        )

    return _assign


@pytest.fixture()
def request_delivery():
    def _request(market, order_id, organization_id, **kwargs):
        return current_domain.process(
            RequestDelivery(
                merchant_id=market.merchant.id,
                order_id=order_id,
                organization_id=organization_id,
                **kwargs,
            ),
            asynchronous=False,
        )

    return _request
