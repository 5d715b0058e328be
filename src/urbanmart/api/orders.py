"""Order endpoints: checkout, customer reads, admin status changes and history."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.api.auth import get_current_user, require_admin, require_customer
from urbanmart.api.responses import ok
from urbanmart.api.schemas import PlaceOrderRequest, UpdateOrderStatusRequest
from urbanmart.identity.user import User
from urbanmart.ordering import queries
from urbanmart.ordering.checkout import PlaceOrder
from urbanmart.ordering.order import Order
from urbanmart.ordering.status import UpdateOrderStatus

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("/admin/all")
async def list_all_orders(status: str | None = None, user: User = Depends(require_admin)):
    return ok(queries.all_orders(status), "Orders retrieved successfully")


@router.get("")
async def list_my_orders(status: str | None = None, user: User = Depends(get_current_user)):
    return ok(queries.customer_orders(user.id, status), "Orders retrieved successfully")


@router.get("/{order_id}")
async def get_my_order(order_id: str, user: User = Depends(get_current_user)):
    return ok(queries.customer_order(order_id, user.id), "Order retrieved successfully")


@router.post("", status_code=201)
async def place_order(body: PlaceOrderRequest, user: User = Depends(require_customer)):
    command = PlaceOrder(
        customer_id=user.id,
        shipping_address_id=body.shipping_address_id,
        billing_address_id=body.billing_address_id,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return ok(order.to_dict(), "Order created successfully")


@router.patch("/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, user: User = Depends(require_admin)):
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        actor_id=user.id,
        actor_role=user.role,
        tracking_number=body.tracking_number,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return ok(order.to_dict(), "Order status updated successfully")


@router.get("/{order_id}/status-history")
async def get_status_history(order_id: str, user: User = Depends(get_current_user)):
    history = queries.order_status_history(order_id, actor_id=user.id, actor_role=user.role)
    return ok(history, "Status history retrieved successfully")
