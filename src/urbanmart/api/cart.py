"""Cart endpoints. Every authenticated user has exactly one cart."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.api.auth import get_current_user
from urbanmart.api.responses import ok
from urbanmart.api.schemas import AddToCartRequest, UpdateCartItemRequest
from urbanmart.identity.user import User
from urbanmart.ordering.cart_items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from urbanmart.ordering.cart_view import cart_count, cart_summary

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("")
async def get_cart(user: User = Depends(get_current_user)):
    return ok(cart_summary(user.id), "Cart retrieved successfully")


@router.post("")
async def add_to_cart(body: AddToCartRequest, user: User = Depends(get_current_user)):
    command = AddToCart(user_id=user.id, product_id=body.product_id, quantity=body.quantity)
    item_id = current_domain.process(command, asynchronous=False)
    return ok({"item_id": item_id, **cart_summary(user.id)}, "Item added to cart")


@router.put("/{item_id}")
async def update_cart_item(item_id: str, body: UpdateCartItemRequest, user: User = Depends(get_current_user)):
    command = UpdateCartItem(user_id=user.id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return ok(cart_summary(user.id), "Cart item updated")


@router.get("/count")
async def get_cart_count(user: User = Depends(get_current_user)):
    return ok({"count": cart_count(user.id)}, "Cart count retrieved successfully")


@router.delete("/{item_id}")
async def remove_cart_item(item_id: str, user: User = Depends(get_current_user)):
    current_domain.process(RemoveFromCart(user_id=user.id, item_id=item_id), asynchronous=False)
    return ok(cart_summary(user.id), "Item removed from cart")


@router.delete("")
async def clear_cart(user: User = Depends(get_current_user)):
    current_domain.process(ClearCart(user_id=user.id), asynchronous=False)
    return ok(None, "Cart cleared")
