"""Read-side view of a user's cart, priced with live product data."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from urbanmart.catalogue.product import Product
from urbanmart.ordering.cart_items import load_cart
from urbanmart.ordering.pricing import line_total, price_lines


def cart_summary(user_id) -> dict:
    cart = load_cart(user_id)
    product_repo = current_domain.repository_for(Product)

    items = []
    for item in cart.items if cart is not None else []:
        try:
            product = product_repo.get(item.product_id)
        except ObjectNotFoundError:
            continue
        items.append(
            {
                "id": str(item.id),
                "product_id": str(product.id),
                "product_name": product.name,
                "price": product.price,
                "quantity": item.quantity,
                "stock_quantity": product.stock_quantity,
                "is_active": product.is_active,
                "item_total": line_total(product.price, item.quantity),
            }
        )

    summary = price_lines((i["price"], i["quantity"]) for i in items)
    summary["item_count"] = sum(i["quantity"] for i in items)

    return {"items": items, "summary": summary}


def cart_count(user_id) -> int:
    """Number of lines in the user's cart."""
    cart = load_cart(user_id)
    return len(cart.items) if cart is not None else 0
