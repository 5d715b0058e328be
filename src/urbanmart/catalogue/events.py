"""Domain events for merchant stores and products."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from urbanmart.domain import urbanmart


@urbanmart.event(part_of="MerchantStore")
class StoreOpened:
    __version__ = 1

    store_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    name = String(required=True)


@urbanmart.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id = Identifier(required=True)
    store_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)


@urbanmart.event(part_of="Product")
class StockAdjusted:
    """Stock moved by ``delta`` units (negative when sold)."""

    __version__ = 1

    product_id = Identifier(required=True)
    delta = Integer(required=True)
    stock_quantity = Integer(required=True)


@urbanmart.event(part_of="MerchantStore")
class StoreVerificationChanged:
    __version__ = 1

    store_id = Identifier(required=True)
    is_verified = Boolean(required=True)
