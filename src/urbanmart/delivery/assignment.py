"""DeliveryAssignment aggregate (CQRS): a courier job for one order.

State Machine:
    REQUESTED → ASSIGNED | CANCELLED
    ASSIGNED → IN_TRANSIT | CANCELLED
    IN_TRANSIT → COMPLETED
    COMPLETED, CANCELLED (terminal)

A REQUESTED assignment is addressed to a delivery organization and has no
courier yet. Once the courier has picked the parcel up (IN_TRANSIT) the
assignment can no longer be handed to someone else.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from urbanmart.domain import urbanmart
from urbanmart.ordering.order import OrderStatus
from urbanmart.utils.errors import InvalidTransitionError

REASSIGNMENT_LOCKED_MESSAGE = "Cannot re-assign delivery after it has been picked up or completed"


class DeliveryStatus(Enum):
    REQUESTED = "REQUESTED"
    ASSIGNED = "ASSIGNED"
    IN_TRANSIT = "IN_TRANSIT"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class DeliveryPaymentType(Enum):
    PREPAID = "PREPAID"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"


_VALID_TRANSITIONS = {
    DeliveryStatus.REQUESTED: {DeliveryStatus.ASSIGNED, DeliveryStatus.CANCELLED},
    DeliveryStatus.ASSIGNED: {DeliveryStatus.IN_TRANSIT, DeliveryStatus.CANCELLED},
    DeliveryStatus.IN_TRANSIT: {DeliveryStatus.COMPLETED},
    DeliveryStatus.COMPLETED: set(),  # terminal
    DeliveryStatus.CANCELLED: set(),  # terminal
}

ACTIVE_STATUSES = {
    DeliveryStatus.REQUESTED.value,
    DeliveryStatus.ASSIGNED.value,
    DeliveryStatus.IN_TRANSIT.value,
}

_LOCKED_STATUSES = {DeliveryStatus.IN_TRANSIT, DeliveryStatus.COMPLETED}
_LOCKED_ORDER_STATUSES = {OrderStatus.SHIPPED, OrderStatus.DELIVERED}


@urbanmart.aggregate
class DeliveryAssignment:
    order_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    delivery_user_id = Identifier()
    delivery_organization_id = Identifier()
    status = String(choices=DeliveryStatus, default=DeliveryStatus.ASSIGNED.value)
    delivery_address = String(max_length=500)
    delivery_fee = Float(default=0.0, min_value=0.0)
    payment_type = String(choices=DeliveryPaymentType, default=DeliveryPaymentType.PREPAID.value)
    estimated_time = Integer(min_value=0)  # minutes
    instructions = Text()
    assigned_at = DateTime()
    picked_up_at = DateTime()
    completed_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def _new(cls, status, **kwargs):
        now = datetime.now(UTC)
        return cls(status=status.value, created_at=now, updated_at=now, **kwargs)

    @classmethod
    def assign(cls, order_id, merchant_id, delivery_user_id, delivery_organization_id=None, **details):
        """A merchant hands the order straight to a courier."""
        from urbanmart.delivery.events import DeliveryAssigned

        assignment = cls._new(
            DeliveryStatus.ASSIGNED,
            order_id=order_id,
            merchant_id=merchant_id,
            delivery_user_id=delivery_user_id,
            delivery_organization_id=delivery_organization_id,
            assigned_at=datetime.now(UTC),
            **details,
        )
        assignment.raise_(
            DeliveryAssigned(
                assignment_id=assignment.id,
                order_id=order_id,
                delivery_user_id=delivery_user_id,
                assigned_at=assignment.assigned_at,
            )
        )
        return assignment

    @classmethod
    def request(cls, order_id, merchant_id, delivery_organization_id, **details):
        """A merchant asks a delivery organization to take the order."""
        from urbanmart.delivery.events import DeliveryRequested

        assignment = cls._new(
            DeliveryStatus.REQUESTED,
            order_id=order_id,
            merchant_id=merchant_id,
            delivery_organization_id=delivery_organization_id,
            **details,
        )
        assignment.raise_(
            DeliveryRequested(
                assignment_id=assignment.id,
                order_id=order_id,
                delivery_organization_id=delivery_organization_id,
            )
        )
        return assignment

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    @property
    def awaiting_pickup(self):
        return self.status in (DeliveryStatus.REQUESTED.value, DeliveryStatus.ASSIGNED.value)

    def is_assigned_to(self, user_id):
        return self.delivery_user_id is not None and str(self.delivery_user_id) == str(user_id)

    def _assert_can_transition(self, target_status):
        current = DeliveryStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(
                {"status": [f"Cannot transition delivery from {current.value} to {target_status.value}"]}
            )

    def _move_to(self, target_status):
        from urbanmart.delivery.events import DeliveryStatusChanged

        self._assert_can_transition(target_status)
        previous = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        self.raise_(
            DeliveryStatusChanged(
                assignment_id=self.id,
                order_id=self.order_id,
                previous_status=previous,
                new_status=target_status.value,
                changed_at=now,
            )
        )
        return now

    def ensure_reassignable(self, order_status):
        """Reject any change of courier once the parcel has left the store."""
        if (
            DeliveryStatus(self.status) in _LOCKED_STATUSES
            or OrderStatus(order_status) in _LOCKED_ORDER_STATUSES
        ):
            raise ValidationError({"assignment": [REASSIGNMENT_LOCKED_MESSAGE]})
        if self.status == DeliveryStatus.CANCELLED.value:
            raise InvalidTransitionError({"status": ["Cannot re-assign a cancelled delivery"]})

    def assign_courier(self, delivery_user_id, order_status):
        """Hand the job to ``delivery_user_id``.

        Returns True when this moved a REQUESTED assignment to ASSIGNED.
        """
        self.ensure_reassignable(order_status)

        self.delivery_user_id = delivery_user_id
        self.updated_at = datetime.now(UTC)
        if self.status == DeliveryStatus.REQUESTED.value:
            self.assigned_at = self._move_to(DeliveryStatus.ASSIGNED)
            return True
        return False

    def accept_request(self):
        if self.status != DeliveryStatus.REQUESTED.value:
            raise InvalidTransitionError({"status": ["Only requested deliveries can be accepted"]})
        self.assigned_at = self._move_to(DeliveryStatus.ASSIGNED)

    def decline_request(self):
        if self.status != DeliveryStatus.REQUESTED.value:
            raise InvalidTransitionError({"status": ["Only requested deliveries can be declined"]})
        self._move_to(DeliveryStatus.CANCELLED)

    def mark_in_transit(self, instructions=None):
        self.picked_up_at = self._move_to(DeliveryStatus.IN_TRANSIT)
        if instructions:
            self.instructions = instructions

    def mark_completed(self, instructions=None):
        self.completed_at = self._move_to(DeliveryStatus.COMPLETED)
        if instructions:
            self.instructions = instructions

    def cancel(self):
        self._move_to(DeliveryStatus.CANCELLED)

    def to_dict(self):
        def _iso(value):
            return value.isoformat() if value else None

        return {
            "id": str(self.id),
            "order_id": str(self.order_id),
            "merchant_id": str(self.merchant_id),
            "delivery_user_id": str(self.delivery_user_id) if self.delivery_user_id else None,
            "delivery_organization_id": (
                str(self.delivery_organization_id) if self.delivery_organization_id else None
            ),
            "status": self.status,
            "delivery_address": self.delivery_address,
            "delivery_fee": self.delivery_fee,
            "payment_type": self.payment_type,
            "estimated_time": self.estimated_time,
            "instructions": self.instructions,
            "assigned_at": _iso(self.assigned_at),
            "picked_up_at": _iso(self.picked_up_at),
            "completed_at": _iso(self.completed_at),
            "created_at": _iso(self.created_at),
        }
