"""Delivery dispatch: handing orders to couriers and organizations.

Each command touches the assignment and, where the order moves, the order and
its history row. The handler's Unit of Work commits them together.
"""

from protean import handle
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from urbanmart.delivery.assignment import (
    ACTIVE_STATUSES,
    DeliveryAssignment,
    DeliveryPaymentType,
    DeliveryStatus,
)
from urbanmart.delivery.organization import DeliveryOrganization
from urbanmart.domain import logger, urbanmart
from urbanmart.identity.user import User, UserRole
from urbanmart.ordering.order import Order
from urbanmart.utils.errors import PermissionDeniedError
from urbanmart.utils.lookup import find_all, find_one, get_or_raise


@urbanmart.command(part_of="DeliveryAssignment")
class AssignDelivery:
    merchant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivery_user_id = Identifier(required=True)
    delivery_fee = Float(default=0.0, min_value=0.0)
    payment_type = String(choices=DeliveryPaymentType, default=DeliveryPaymentType.PREPAID.value)
    estimated_time = Integer(min_value=0)
    instructions = Text()


@urbanmart.command(part_of="DeliveryAssignment")
class RequestDelivery:
    merchant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    organization_id = Identifier(required=True)
    delivery_fee = Float(default=0.0, min_value=0.0)
    payment_type = String(choices=DeliveryPaymentType, default=DeliveryPaymentType.PREPAID.value)
    estimated_time = Integer(min_value=0)
    instructions = Text()


@urbanmart.command(part_of="DeliveryAssignment")
class RespondToDeliveryRequest:
    """The owning organization accepts (ASSIGNED) or declines (CANCELLED) a request."""

    owner_id = Identifier(required=True)
    assignment_id = Identifier(required=True)
    status = String(required=True, choices=DeliveryStatus)


@urbanmart.command(part_of="DeliveryAssignment")
class AssignDeliveryMember:
    owner_id = Identifier(required=True)
    assignment_id = Identifier(required=True)
    member_id = Identifier(required=True)


@urbanmart.command(part_of="DeliveryAssignment")
class ReassignDelivery:
    merchant_id = Identifier(required=True)
    assignment_id = Identifier(required=True)
    delivery_user_id = Identifier(required=True)


def _merchant_order(merchant_id, order_id):
    order = get_or_raise(Order, order_id, "Order not found or access denied")
    if str(order.merchant_id) != str(merchant_id):
        raise ObjectNotFoundError({"order": ["Order not found or access denied"]})
    return order


def _ensure_dispatchable(order):
    if not order.is_open_for_dispatch:
        raise InvalidOperationError({"order": [f"Order in {order.status} status cannot be dispatched"]})

    for assignment in find_all(DeliveryAssignment, order_id=str(order.id)):
        if assignment.status in ACTIVE_STATUSES:
            raise InvalidOperationError({"order": ["Order already has an active delivery assignment"]})


def _active_courier(user_id):
    courier = find_one(User, id=str(user_id))
    if courier is None or courier.role != UserRole.DELIVERY.value or not courier.is_active:
        raise ObjectNotFoundError({"delivery_user_id": ["Delivery person not found"]})
    return courier


def _owned_organization(owner_id):
    org = find_one(DeliveryOrganization, owner_id=str(owner_id))
    if org is None:
        raise PermissionDeniedError("Not authorized")
    return org


def _delivery_details(command):
    return {
        "delivery_fee": command.delivery_fee,
        "payment_type": command.payment_type,
        "estimated_time": command.estimated_time,
        "instructions": command.instructions,
    }


def _delivery_address(order):
    return order.shipping_address.address1 if order.shipping_address else None


@urbanmart.command_handler(part_of=DeliveryAssignment)
class DeliveryDispatchHandler:
    @handle(AssignDelivery)
    def assign_delivery(self, command):
        order = _merchant_order(command.merchant_id, command.order_id)
        _ensure_dispatchable(order)
        courier = _active_courier(command.delivery_user_id)

        assignment = DeliveryAssignment.assign(
            order_id=order.id,
            merchant_id=command.merchant_id,
            delivery_user_id=courier.id,
            delivery_organization_id=courier.delivery_org_id,
            delivery_address=_delivery_address(order),
            **_delivery_details(command),
        )
        order.attach_courier(courier.id)
        order.confirm_for_delivery(
            command.merchant_id,
            notes=command.instructions or "Order confirmed and assigned to delivery person",
        )

        current_domain.repository_for(DeliveryAssignment).add(assignment)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "delivery_assigned",
            assignment_id=str(assignment.id),
            order_id=str(order.id),
            delivery_user_id=str(courier.id),
        )
        return str(assignment.id)

    @handle(RequestDelivery)
    def request_delivery(self, command):
        order = _merchant_order(command.merchant_id, command.order_id)
        _ensure_dispatchable(order)

        org = get_or_raise(DeliveryOrganization, command.organization_id, "Organization not found")
        if not org.is_active:
            raise ObjectNotFoundError({"organization": ["Organization not found"]})

        assignment = DeliveryAssignment.request(
            order_id=order.id,
            merchant_id=command.merchant_id,
            delivery_organization_id=org.id,
            delivery_address=_delivery_address(order),
            **_delivery_details(command),
        )
        current_domain.repository_for(DeliveryAssignment).add(assignment)

        logger.info(
            "delivery_requested",
            assignment_id=str(assignment.id),
            order_id=str(order.id),
            organization_id=str(org.id),
        )
        return str(assignment.id)

    @handle(RespondToDeliveryRequest)
    def respond_to_request(self, command):
        org = _owned_organization(command.owner_id)
        assignment = find_one(DeliveryAssignment, id=str(command.assignment_id))
        if (
            assignment is None
            or str(assignment.delivery_organization_id) != str(org.id)
            or assignment.status != DeliveryStatus.REQUESTED.value
        ):
            raise ObjectNotFoundError({"assignment": ["Request not found"]})

        if command.status == DeliveryStatus.ASSIGNED.value:
            order = get_or_raise(Order, assignment.order_id, "Order not found")
            assignment.accept_request()
            order.confirm_for_delivery(command.owner_id, notes="Delivery request accepted by organization")
            current_domain.repository_for(Order).add(order)
        elif command.status == DeliveryStatus.CANCELLED.value:
            assignment.decline_request()
        else:
            raise ValidationError({"status": ["Status must be ASSIGNED or CANCELLED"]})

        current_domain.repository_for(DeliveryAssignment).add(assignment)
        logger.info("delivery_request_answered", assignment_id=str(assignment.id), status=assignment.status)
        return assignment.status

    @handle(AssignDeliveryMember)
    def assign_member(self, command):
        org = _owned_organization(command.owner_id)

        member = find_one(User, id=str(command.member_id))
        if member is None or str(member.delivery_org_id) != str(org.id) or not member.is_active:
            raise ObjectNotFoundError({"member_id": ["Member not found in organization"]})

        assignment = find_one(DeliveryAssignment, id=str(command.assignment_id))
        if assignment is None or str(assignment.delivery_organization_id) != str(org.id):
            raise ObjectNotFoundError({"assignment": ["Assignment not found"]})

        self._hand_over(assignment, member, actor_id=command.owner_id)
        logger.info("delivery_member_assigned", assignment_id=str(assignment.id), member_id=str(member.id))
        return str(assignment.id)

    @handle(ReassignDelivery)
    def reassign_delivery(self, command):
        assignment = find_one(DeliveryAssignment, id=str(command.assignment_id))
        if assignment is None or str(assignment.merchant_id) != str(command.merchant_id):
            raise ObjectNotFoundError({"assignment": ["Assignment not found"]})

        order = get_or_raise(Order, assignment.order_id, "Order not found")
        assignment.ensure_reassignable(order.status)
        courier = _active_courier(command.delivery_user_id)

        self._hand_over(assignment, courier, actor_id=command.merchant_id, order=order)
        logger.info("delivery_reassigned", assignment_id=str(assignment.id), delivery_user_id=str(courier.id))
        return str(assignment.id)

    def _hand_over(self, assignment, courier, actor_id, order=None):
        if order is None:
            order = get_or_raise(Order, assignment.order_id, "Order not found")

        newly_assigned = assignment.assign_courier(courier.id, order.status)
        order.attach_courier(courier.id)
        if newly_assigned:
            order.confirm_for_delivery(actor_id)

        current_domain.repository_for(DeliveryAssignment).add(assignment)
        current_domain.repository_for(Order).add(order)
