"""PlaceOrder: turn a user's cart into an order.

Everything is validated before the first write. The handler then creates the
order and its pending payment, takes the stock, updates the merchant-customer totals and empties the
cart, all within the handler's Unit of Work: either every write lands or none
does.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from urbanmart.catalogue.product import Product
from urbanmart.customers.merchant_customer import MerchantCustomer, merchant_customer_id
from urbanmart.domain import logger, urbanmart
from urbanmart.identity.user import User
from urbanmart.ordering.cart import Cart
from urbanmart.ordering.cart_items import load_cart
from urbanmart.ordering.order import Order, PaymentMethod, ShippingAddress
from urbanmart.ordering.pricing import line_total, price_lines
from urbanmart.payments.ledger import record_payment
from urbanmart.utils.lookup import find_one, get_or_raise


@urbanmart.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_address_id = Identifier(required=True)
    billing_address_id = Identifier(required=True)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CARD.value)
    notes = Text()


def _snapshot(address):
    return ShippingAddress(
        address1=address.address1,
        address2=address.address2,
        city=address.city,
        state=address.state,
        postal_code=address.postal_code,
        country=address.country,
    )


@urbanmart.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = load_cart(command.customer_id)
        if cart is None or cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        user = get_or_raise(User, command.customer_id, "User not found")
        shipping_address = user.find_address(command.shipping_address_id)
        billing_address = user.find_address(command.billing_address_id)
        if shipping_address is None or billing_address is None:
            raise ValidationError({"address": ["Invalid address"]})

        lines = []
        for item in cart.items:
            product = get_or_raise(Product, item.product_id, "Product not found")
            if not product.is_active:
                raise ValidationError({"product_id": [f"{product.name} is no longer available"]})
            if not product.has_stock_for(item.quantity):
                raise ValidationError({"stock_quantity": [f"Insufficient stock for {product.name}"]})
            lines.append((product, item.quantity))

        # Merchant and store come from the first line's product
        first_product = lines[0][0]
        pricing = price_lines((product.price, quantity) for product, quantity in lines)

        order = Order.place(
            customer_id=command.customer_id,
            merchant_id=first_product.merchant_id,
            store_id=first_product.store_id,
            items=[
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "quantity": quantity,
                    "price": product.price,
                    "total": line_total(product.price, quantity),
                }
                for product, quantity in lines
            ],
            pricing=pricing,
            shipping_address_id=shipping_address.id,
            billing_address_id=billing_address.id,
            shipping_address=_snapshot(shipping_address),
            payment_method=command.payment_method,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        record_payment(order)

        product_repo = current_domain.repository_for(Product)
        for product, quantity in lines:
            product.decrement_stock(quantity)
            product_repo.add(product)

        self._record_merchant_customer(order)

        cart.clear()
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            merchant_id=str(order.merchant_id),
            total=order.pricing.total,
        )
        return str(order.id)

    def _record_merchant_customer(self, order):
        repo = current_domain.repository_for(MerchantCustomer)
        relationship = find_one(MerchantCustomer, id=merchant_customer_id(order.merchant_id, order.customer_id))
        if relationship is None:
            relationship = MerchantCustomer.start(
                merchant_id=order.merchant_id,
                customer_id=order.customer_id,
                store_id=order.store_id,
            )
        relationship.record_order(order.pricing.total, placed_at=order.created_at)
        repo.add(relationship)
