"""Cart item management: commands and handler.

The cart is created lazily the first time a user adds something to it.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from urbanmart.catalogue.product import Product
from urbanmart.domain import logger, urbanmart
from urbanmart.ordering.cart import Cart
from urbanmart.utils.lookup import get_or_raise


@urbanmart.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@urbanmart.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@urbanmart.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@urbanmart.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def load_cart(user_id, create=False):
    repo = current_domain.repository_for(Cart)
    try:
        return repo.get(str(user_id))
    except ObjectNotFoundError:
        if create:
            return Cart.for_user(user_id)
        return None


def _cart_item_or_raise(cart, item_id):
    item = cart.find_item(item_id) if cart is not None else None
    if item is None:
        raise ObjectNotFoundError({"item_id": ["Cart item not found"]})
    return item


@urbanmart.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = get_or_raise(Product, command.product_id, "Product not found or inactive")
        if not product.is_active:
            raise ObjectNotFoundError({"product_id": ["Product not found or inactive"]})

        cart = load_cart(command.user_id, create=True)
        item = cart.add_item(product_id=product.id, quantity=command.quantity)
        current_domain.repository_for(Cart).add(cart)

        logger.debug("cart_item_added", user_id=str(command.user_id), product_id=str(product.id))
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = load_cart(command.user_id)
        item = _cart_item_or_raise(cart, command.item_id)

        product = get_or_raise(Product, item.product_id, "Product not found")
        if not product.is_active:
            raise ValidationError({"product_id": ["Product is no longer available"]})
        if not product.has_stock_for(command.quantity):
            raise ValidationError({"quantity": ["Requested quantity exceeds available stock"]})

        cart.update_item_quantity(command.item_id, command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.user_id)
        _cart_item_or_raise(cart, command.item_id)

        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.user_id)
        if cart is None or cart.is_empty:
            return
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
