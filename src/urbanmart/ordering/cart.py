"""Cart aggregate (CQRS): one per user, holding product lines until checkout.

The cart's identity is the owning user's id, so a user can never end up with
two carts, and each product appears on at most one line.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from urbanmart.domain import urbanmart


@urbanmart.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@urbanmart.aggregate
class Cart:
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(i.product_id) for i in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    @classmethod
    def for_user(cls, user_id):
        now = datetime.now(UTC)
        return cls(id=str(user_id), created_at=now, updated_at=now)

    @property
    def user_id(self):
        return str(self.id)

    @property
    def is_empty(self):
        return not self.items

    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def add_item(self, product_id, quantity):
        """Add a product line, or increase the quantity of an existing one."""
        existing = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(product_id=product_id, quantity=quantity, added_at=now)
            self.add_items(item)

        self.updated_at = now
        return item

    def update_item_quantity(self, item_id, quantity):
        item = self.find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Cart item not found"]})
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

    def remove_item(self, item_id):
        item = self.find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Cart item not found"]})
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

    def clear(self):
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
