import os
from pathlib import Path
from types import SimpleNamespace

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _urbanmart_domain(request):
    """Initialize the domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    # Import the API package before init(), as app.py does, so domain
    # traversal does not load a router module ahead of its package.
    import urbanmart.api  # noqa: F401
    from urbanmart.domain import urbanmart

    urbanmart.init()
    return urbanmart


@pytest.fixture(scope="session", autouse=True)
def setup_db(_urbanmart_domain):
    from urbanmart.utils.db import drop_db, setup_db

    setup_db(_urbanmart_domain)

    yield

    drop_db(_urbanmart_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_urbanmart_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _urbanmart_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Builders shared by application, integration and BDD tests
# ---------------------------------------------------------------------------
@pytest.fixture()
def create_user():
    """Register a user through the command layer and return the aggregate."""
    from protean import current_domain
    from urbanmart.identity.registration import RegisterUser
    from urbanmart.identity.user import User

    counter = {"n": 0}

    def _create(role="CUSTOMER", email=None, first_name="Test", last_name="User"):
        counter["n"] += 1
        email = email or f"{role.lower()}{counter['n']}@urbanmart.test"
        user_id = current_domain.process(
            RegisterUser(email=email, first_name=first_name, last_name=last_name, role=role),
            asynchronous=False,
        )
        return current_domain.repository_for(User).get(user_id)

    return _create


@pytest.fixture()
def add_address():
    from protean import current_domain
    from urbanmart.identity.addresses import AddAddress

    def _add(user_id, address1="12 Market Street", city="Springfield"):
        return current_domain.process(
            AddAddress(
                user_id=user_id,
                address1=address1,
                city=city,
                state="IL",
                postal_code="62701",
                country="US",
            ),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def create_product():
    from protean import current_domain
    from urbanmart.catalogue.management import CreateProduct
    from urbanmart.catalogue.product import Product

    def _create(merchant_id, name="Widget", price=10.0, stock_quantity=10, min_stock_level=5):
        product_id = current_domain.process(
            CreateProduct(
                merchant_id=merchant_id,
                name=name,
                price=price,
                stock_quantity=stock_quantity,
                min_stock_level=min_stock_level,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Product).get(product_id)

    return _create


@pytest.fixture()
def marketplace(create_user, add_address, create_product):
    """A merchant with a store and two products, a customer with an address, and a courier.

    Product A costs 30.00 and product B 25.00, so one of each comes to the
    55.00 free-shipping basket.
    """
    from protean import current_domain
    from urbanmart.catalogue.management import OpenStore

    merchant = create_user(role="MERCHANT", first_name="Maya")
    current_domain.process(OpenStore(merchant_id=merchant.id, name="Corner Shop"), asynchronous=False)

    product_a = create_product(merchant.id, name="Product A", price=30.0, stock_quantity=10)
    product_b = create_product(merchant.id, name="Product B", price=25.0, stock_quantity=5)

    customer = create_user(role="CUSTOMER", first_name="Cam")
    address_id = add_address(customer.id)

    courier = create_user(role="DELIVERY", first_name="Dev")
    admin = create_user(role="ADMIN", first_name="Ada")

    return SimpleNamespace(
        merchant=merchant,
        product_a=product_a,
        product_b=product_b,
        customer=customer,
        address_id=address_id,
        courier=courier,
        admin=admin,
    )


@pytest.fixture()
def fill_cart():
    from protean import current_domain
    from urbanmart.ordering.cart_items import AddToCart

    def _fill(user_id, *lines):
        for product, quantity in lines:
            current_domain.process(
                AddToCart(user_id=user_id, product_id=product.id, quantity=quantity),
                asynchronous=False,
            )

    return _fill


@pytest.fixture()
def place_order(fill_cart):
    """Fill the customer's cart with one A and one B and check out. Returns the order id."""
    from protean import current_domain
    from urbanmart.ordering.checkout import PlaceOrder

    def _place(market, lines=None):
        fill_cart(market.customer.id, *(lines or [(market.product_a, 1), (market.product_b, 1)]))
        return current_domain.process(
            PlaceOrder(
                customer_id=market.customer.id,
                shipping_address_id=market.address_id,
                billing_address_id=market.address_id,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def auth_header():
    from urbanmart.api.auth import issue_token

    def _header(user, expires_in=None):
        return {"Authorization": f"Bearer {issue_token(user, expires_in=expires_in)}"}

    return _header


@pytest.fixture()
def client():
    from app import create_app
    from fastapi.testclient import TestClient

    return TestClient(create_app())
