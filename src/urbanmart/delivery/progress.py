"""UpdateDeliveryStatus: the courier reports pick-up, completion or cancellation.

Pick-up ships the order and completion delivers it; in both cases the
assignment, the order and the new history row are committed together. An
order a merchant already moved that far by hand keeps its status.
"""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from urbanmart.delivery.assignment import DeliveryAssignment, DeliveryStatus
from urbanmart.domain import logger, urbanmart
from urbanmart.ordering.order import Order
from urbanmart.payments.ledger import sync_with_order
from urbanmart.utils.errors import InvalidTransitionError, PermissionDeniedError
from urbanmart.utils.lookup import get_or_raise


@urbanmart.command(part_of="DeliveryAssignment")
class UpdateDeliveryStatus:
    assignment_id = Identifier(required=True)
    delivery_user_id = Identifier(required=True)
    status = String(required=True, choices=DeliveryStatus)
    instructions = Text()


@urbanmart.command_handler(part_of=DeliveryAssignment)
class DeliveryProgressHandler:
    @handle(UpdateDeliveryStatus)
    def update_status(self, command):
        assignment = get_or_raise(DeliveryAssignment, command.assignment_id, "Assignment not found")
        if not assignment.is_assigned_to(command.delivery_user_id):
            raise PermissionDeniedError("This delivery is not assigned to you")

        previous = assignment.status
        order = None

        if command.status == DeliveryStatus.IN_TRANSIT.value:
            order = get_or_raise(Order, assignment.order_id, "Order not found")
            assignment.mark_in_transit(command.instructions)
            order.mark_picked_up(command.delivery_user_id, notes=command.instructions)
        elif command.status == DeliveryStatus.COMPLETED.value:
            order = get_or_raise(Order, assignment.order_id, "Order not found")
            assignment.mark_completed(command.instructions)
            order.mark_delivered(command.delivery_user_id, notes=command.instructions)
        elif command.status == DeliveryStatus.CANCELLED.value:
            assignment.cancel()
        else:
            raise InvalidTransitionError(
                {"status": [f"Cannot transition delivery from {assignment.status} to {command.status}"]}
            )

        current_domain.repository_for(DeliveryAssignment).add(assignment)
        if order is not None:
            current_domain.repository_for(Order).add(order)
            sync_with_order(order)

        logger.info(
            "delivery_status_changed",
            assignment_id=str(assignment.id),
            previous_status=previous,
            new_status=assignment.status,
            order_status=order.status if order is not None else None,
        )
        return assignment.status
