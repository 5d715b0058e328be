"""Delivery endpoints for couriers and for merchants dispatching orders."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.api.auth import require_delivery, require_merchant
from urbanmart.api.responses import ok
from urbanmart.api.schemas import AssignDeliveryRequest, DeliveryStatusRequest, ReassignDeliveryRequest
from urbanmart.delivery import queries
from urbanmart.delivery.assignment import DeliveryAssignment
from urbanmart.delivery.dispatch import AssignDelivery, ReassignDelivery
from urbanmart.delivery.progress import UpdateDeliveryStatus
from urbanmart.identity.user import User

router = APIRouter(prefix="/api/delivery", tags=["delivery"])


def _assignment(assignment_id):
    return current_domain.repository_for(DeliveryAssignment).get(assignment_id).to_dict()


@router.get("/orders")
async def list_delivery_orders(status: str | None = None, user: User = Depends(require_delivery)):
    return ok(queries.delivery_orders(user.id, status), "Orders retrieved successfully")


@router.get("/stats")
async def get_delivery_stats(user: User = Depends(require_delivery)):
    return ok(queries.delivery_stats(user.id), "Statistics retrieved successfully")


@router.get("/available")
async def list_available_delivery_persons(user: User = Depends(require_merchant)):
    return ok(queries.available_delivery_persons(), "Available delivery persons retrieved")


@router.post("/assign", status_code=201)
async def assign_delivery(body: AssignDeliveryRequest, user: User = Depends(require_merchant)):
    assignment_id = current_domain.process(
        AssignDelivery(
            merchant_id=user.id,
            order_id=body.order_id,
            delivery_user_id=body.delivery_user_id,
            delivery_fee=body.delivery_fee,
            payment_type=body.payment_type,
            estimated_time=body.estimated_time,
            instructions=body.instructions,
        ),
        asynchronous=False,
    )
    return ok(_assignment(assignment_id), "Order assigned to delivery person successfully")


@router.patch("/assignments/{assignment_id}/reassign")
async def reassign_delivery(assignment_id: str, body: ReassignDeliveryRequest, user: User = Depends(require_merchant)):
    current_domain.process(
        ReassignDelivery(
            merchant_id=user.id,
            assignment_id=assignment_id,
            delivery_user_id=body.delivery_user_id,
        ),
        asynchronous=False,
    )
    return ok(_assignment(assignment_id), "Delivery re-assigned successfully")


@router.patch("/orders/{assignment_id}/status")
async def update_delivery_status(
    assignment_id: str, body: DeliveryStatusRequest, user: User = Depends(require_delivery)
):
    current_domain.process(
        UpdateDeliveryStatus(
            assignment_id=assignment_id,
            delivery_user_id=user.id,
            status=body.status,
            instructions=body.instructions,
        ),
        asynchronous=False,
    )
    return ok(_assignment(assignment_id), "Status updated successfully")
