"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from urbanmart.domain import urbanmart


@urbanmart.event(part_of="Order")
class OrderPlaced:
    """A customer checked out their cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    total = Float(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@urbanmart.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along its status workflow."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    updated_by = Identifier()
    changed_at = DateTime(required=True)
