"""Wishlist commands and the wishlist read."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from urbanmart.catalogue.product import Product
from urbanmart.domain import logger, urbanmart
from urbanmart.ordering.wishlist import Wishlist
from urbanmart.utils.lookup import find_one, get_or_raise


@urbanmart.command(part_of="Wishlist")
class AddToWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@urbanmart.command(part_of="Wishlist")
class RemoveFromWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


def load_wishlist(user_id):
    try:
        return current_domain.repository_for(Wishlist).get(str(user_id))
    except ObjectNotFoundError:
        return None


@urbanmart.command_handler(part_of=Wishlist)
class WishlistHandler:
    @handle(AddToWishlist)
    def add(self, command):
        product = get_or_raise(Product, command.product_id, "Product not found or inactive")
        if not product.is_active:
            raise ObjectNotFoundError({"product_id": ["Product not found or inactive"]})

        wishlist = load_wishlist(command.user_id)
        if wishlist is None:
            wishlist = Wishlist.for_user(command.user_id)
        entry = wishlist.save(product.id)
        current_domain.repository_for(Wishlist).add(wishlist)
        logger.debug("wishlist_product_saved", user_id=str(command.user_id), product_id=str(product.id))
        return str(entry.id)

    @handle(RemoveFromWishlist)
    def remove(self, command):
        wishlist = load_wishlist(command.user_id)
        if wishlist is None or not wishlist.discard(command.product_id):
            return
        current_domain.repository_for(Wishlist).add(wishlist)


def wishlist_products(user_id) -> list[dict]:
    wishlist = load_wishlist(user_id)
    items = []
    for entry in wishlist.entries if wishlist is not None else []:
        product = find_one(Product, id=str(entry.product_id))
        if product is None:
            continue
        items.append(
            {
                "id": str(entry.id),
                "product_id": str(product.id),
                "added_at": entry.added_at.isoformat() if entry.added_at else None,
                "product": product.to_dict(),
            }
        )
    return items
