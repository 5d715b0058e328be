"""Wishlist endpoints."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.api.auth import get_current_user
from urbanmart.api.responses import ok
from urbanmart.api.schemas import WishlistRequest
from urbanmart.identity.user import User
from urbanmart.ordering.wishlist_items import AddToWishlist, RemoveFromWishlist, wishlist_products

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("")
async def get_wishlist(user: User = Depends(get_current_user)):
    return ok(wishlist_products(user.id), "Wishlist retrieved successfully")


@router.post("", status_code=201)
async def add_to_wishlist(body: WishlistRequest, user: User = Depends(get_current_user)):
    entry_id = current_domain.process(
        AddToWishlist(user_id=user.id, product_id=body.product_id),
        asynchronous=False,
    )
    return ok({"id": entry_id, "product_id": body.product_id}, "Added to wishlist")


@router.delete("/{product_id}")
async def remove_from_wishlist(product_id: str, user: User = Depends(get_current_user)):
    current_domain.process(RemoveFromWishlist(user_id=user.id, product_id=product_id), asynchronous=False)
    return ok(None, "Removed from wishlist")
