"""Wishlist aggregate (CQRS): products a user saved for later, one per user.

Like the cart, the wishlist's identity is the owning user's id.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier

from urbanmart.domain import urbanmart


@urbanmart.entity(part_of="Wishlist")
class WishlistEntry:
    product_id = Identifier(required=True)
    added_at = DateTime()


@urbanmart.aggregate
class Wishlist:
    entries = HasMany(WishlistEntry)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def for_user(cls, user_id):
        now = datetime.now(UTC)
        return cls(id=str(user_id), created_at=now, updated_at=now)

    def find_entry(self, product_id):
        return next((e for e in self.entries if str(e.product_id) == str(product_id)), None)

    def save(self, product_id):
        """Add ``product_id``; saving a product twice keeps the first entry."""
        entry = self.find_entry(product_id)
        if entry is None:
            entry = WishlistEntry(product_id=product_id, added_at=datetime.now(UTC))
            self.add_entries(entry)
            self.updated_at = entry.added_at
        return entry

    def discard(self, product_id):
        entry = self.find_entry(product_id)
        if entry is not None:
            self.remove_entries(entry)
            self.updated_at = datetime.now(UTC)
        return entry is not None
