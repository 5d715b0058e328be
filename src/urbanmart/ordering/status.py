"""UpdateOrderStatus: administrator and merchant status changes.

Cancelling or refunding an order also cancels any delivery that has not been
picked up yet, and the order's transactions follow its status, all in the
same Unit of Work.
"""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from urbanmart.delivery.assignment import DeliveryAssignment
from urbanmart.domain import logger, urbanmart
from urbanmart.identity.user import UserRole
from urbanmart.ordering.order import Order, OrderStatus
from urbanmart.payments.ledger import sync_with_order
from urbanmart.utils.errors import PermissionDeniedError
from urbanmart.utils.lookup import find_all, get_or_raise

_WITHDRAWS_DELIVERY = {OrderStatus.CANCELLED.value, OrderStatus.REFUNDED.value}


@urbanmart.command(part_of="Order")
class UpdateOrderStatus:
    """Move an order to ``status``.

    Administrators may act on any order; a merchant only on orders placed
    with their own store.
    """

    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, choices=UserRole)
    tracking_number = String(max_length=100)
    notes = Text()


@urbanmart.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = get_or_raise(Order, command.order_id, "Order not found")

        if command.actor_role != UserRole.ADMIN.value and str(order.merchant_id) != str(command.actor_id):
            raise PermissionDeniedError("Not authorized to update this order")

        previous = order.status
        order.transition_to(
            command.status,
            updated_by=command.actor_id,
            notes=command.notes,
            tracking_number=command.tracking_number,
        )
        repo.add(order)
        sync_with_order(order)

        withdrawn = self._withdraw_deliveries(order) if order.status in _WITHDRAWS_DELIVERY else []

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
            actor_id=str(command.actor_id),
            cancelled_assignments=withdrawn,
        )

    def _withdraw_deliveries(self, order):
        repo = current_domain.repository_for(DeliveryAssignment)
        withdrawn = []
        for assignment in find_all(DeliveryAssignment, order_id=str(order.id)):
            if assignment.awaiting_pickup:
                assignment.cancel()
                repo.add(assignment)
                withdrawn.append(str(assignment.id))
        return withdrawn
