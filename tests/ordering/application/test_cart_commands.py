import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from urbanmart.catalogue.management import DeactivateProduct
from urbanmart.ordering.cart_items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem, load_cart
from urbanmart.ordering.cart_view import cart_count, cart_summary


def _add(user_id, product_id, quantity=1):
    return current_domain.process(
        AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


class TestAddToCart:
    def test_cart_created_lazily(self, marketplace):
        customer_id = marketplace.customer.id
        assert load_cart(customer_id) is None

        _add(customer_id, marketplace.product_a.id)

        cart = load_cart(customer_id)
        assert len(cart.items) == 1

    def test_same_product_merges(self, marketplace):
        customer_id = marketplace.customer.id
        first = _add(customer_id, marketplace.product_a.id, 1)
        second = _add(customer_id, marketplace.product_a.id, 2)

        assert first == second
        assert load_cart(customer_id).items[0].quantity == 3

    def test_inactive_product_rejected(self, marketplace):
        current_domain.process(
            DeactivateProduct(merchant_id=marketplace.merchant.id, product_id=marketplace.product_a.id),
            asynchronous=False,
        )
        with pytest.raises(ObjectNotFoundError) as exc:
            _add(marketplace.customer.id, marketplace.product_a.id)
        assert exc.value.messages["product_id"] == ["Product not found or inactive"]

    def test_unknown_product_rejected(self, marketplace):
        with pytest.raises(ObjectNotFoundError):
            _add(marketplace.customer.id, "no-such-product")


class TestUpdateCartItem:
    def test_update_quantity(self, marketplace):
        customer_id = marketplace.customer.id
        item_id = _add(customer_id, marketplace.product_a.id)

        current_domain.process(UpdateCartItem(user_id=customer_id, item_id=item_id, quantity=4), asynchronous=False)

        assert load_cart(customer_id).find_item(item_id).quantity == 4

    def test_quantity_above_stock_rejected(self, marketplace):
        customer_id = marketplace.customer.id
        item_id = _add(customer_id, marketplace.product_b.id)

        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                UpdateCartItem(user_id=customer_id, item_id=item_id, quantity=6),
                asynchronous=False,
            )
        assert exc.value.messages["quantity"] == ["Requested quantity exceeds available stock"]
        assert load_cart(customer_id).find_item(item_id).quantity == 1

    def test_unknown_item(self, marketplace):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateCartItem(user_id=marketplace.customer.id, item_id="missing", quantity=1),
                asynchronous=False,
            )


class TestRemoveAndClear:
    def test_remove_item(self, marketplace):
        customer_id = marketplace.customer.id
        item_id = _add(customer_id, marketplace.product_a.id)
        current_domain.process(RemoveFromCart(user_id=customer_id, item_id=item_id), asynchronous=False)
        assert load_cart(customer_id).is_empty

    def test_clear_cart(self, marketplace):
        customer_id = marketplace.customer.id
        _add(customer_id, marketplace.product_a.id)
        _add(customer_id, marketplace.product_b.id)
        current_domain.process(ClearCart(user_id=customer_id), asynchronous=False)
        assert load_cart(customer_id).is_empty

    def test_clear_without_cart_is_a_no_op(self, marketplace):
        current_domain.process(ClearCart(user_id=marketplace.customer.id), asynchronous=False)
        assert load_cart(marketplace.customer.id) is None


class TestCartSummary:
    def test_summary_uses_live_prices(self, marketplace):
        customer_id = marketplace.customer.id
        _add(customer_id, marketplace.product_a.id, 1)
        _add(customer_id, marketplace.product_b.id, 1)

        view = cart_summary(customer_id)

        assert view["summary"] == {
            "subtotal": 55.0,
            "tax": 4.4,
            "shipping": 0.0,
            "total": 59.4,
            "item_count": 2,
        }
        totals = sorted(item["item_total"] for item in view["items"])
        assert totals == [25.0, 30.0]

    def test_empty_summary(self, marketplace):
        view = cart_summary(marketplace.customer.id)
        assert view["items"] == []
        assert view["summary"]["item_count"] == 0
        assert view["summary"]["shipping"] == 9.99


class TestCartCount:
    def test_counts_lines_not_units(self, marketplace):
        customer_id = marketplace.customer.id
        assert cart_count(customer_id) == 0

        _add(customer_id, marketplace.product_a.id, quantity=3)
        _add(customer_id, marketplace.product_b.id)

        assert cart_count(customer_id) == 2
