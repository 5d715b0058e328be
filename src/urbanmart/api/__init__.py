"""UrbanMart HTTP API package."""

from urbanmart.api.admin import router as admin_router
from urbanmart.api.cart import router as cart_router
from urbanmart.api.delivery import router as delivery_router
from urbanmart.api.delivery_org import router as delivery_org_router
from urbanmart.api.merchant import router as merchant_router
from urbanmart.api.orders import router as order_router
from urbanmart.api.reports import router as report_router
from urbanmart.api.users import router as user_router
from urbanmart.api.wishlist import router as wishlist_router

routers = [
    user_router,
    cart_router,
    wishlist_router,
    order_router,
    merchant_router,
    delivery_router,
    delivery_org_router,
    report_router,
    admin_router,
]

__all__ = [
    "admin_router",
    "cart_router",
    "delivery_org_router",
    "delivery_router",
    "merchant_router",
    "order_router",
    "report_router",
    "routers",
    "user_router",
    "wishlist_router",
]
