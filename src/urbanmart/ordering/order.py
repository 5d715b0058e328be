"""Order aggregate (CQRS) with line items, status history and pricing.

State Machine:
    PENDING → CONFIRMED | PROCESSING | CANCELLED
    CONFIRMED → PROCESSING | SHIPPED | CANCELLED
    PROCESSING → SHIPPED | CANCELLED
    SHIPPED → DELIVERED
    DELIVERED → REFUNDED
    CANCELLED → REFUNDED
    REFUNDED (terminal)

Every status change appends exactly one ``OrderStatusHistory`` row inside the
aggregate, so the status and its history are always persisted together.
"""

import secrets
import string
import time
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from urbanmart.domain import urbanmart
from urbanmart.ordering.pricing import totals_match
from urbanmart.utils.errors import InvalidTransitionError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class PaymentMethod(Enum):
    CARD = "CARD"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"
    WALLET = "WALLET"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.REFUNDED: set(),  # terminal
}

# An order in one of these states can no longer be handed to a courier
_DISPATCH_CLOSED_STATUSES = {
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
}

# Statuses at or past each courier milestone; REFUNDED is only reachable with
# an active delivery once the order was DELIVERED
_DELIVERY_REACHED = {
    OrderStatus.SHIPPED: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.REFUNDED},
    OrderStatus.DELIVERED: {OrderStatus.DELIVERED, OrderStatus.REFUNDED},
}

_ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase


def allowed_transitions(status):
    return _VALID_TRANSITIONS.get(OrderStatus(status), set())


def generate_order_number():
    """``ORD-<last 6 digits of the ms timestamp>-<6 random base36 chars>``."""
    timestamp = str(int(time.time() * 1000))[-6:]
    suffix = "".join(secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(6))
    return f"ORD-{timestamp}-{suffix}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@urbanmart.value_object(part_of="Order")
class OrderPricing:
    """Amounts locked at checkout; later catalogue price changes never touch them."""

    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    shipping = Float(default=0.0)
    total = Float(default=0.0)


@urbanmart.value_object(part_of="Order")
class ShippingAddress:
    """Copy of the shipping address as it was when the order was placed."""

    address1 = String(max_length=255)
    address2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@urbanmart.entity(part_of="Order")
class OrderItem:
    """Snapshot of a cart line: name and price are frozen when the order is placed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    total = Float(required=True, min_value=0.0)

    def to_dict(self):
        return {
            "id": str(self.id),
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "quantity": self.quantity,
            "price": self.price,
            "total": self.total,
        }


@urbanmart.entity(part_of="Order")
class OrderStatusHistory:
    """One row per status change. Rows are only ever appended."""

    status = String(required=True, choices=OrderStatus)
    notes = Text()
    updated_by = Identifier()
    created_at = DateTime(required=True)

    def to_dict(self):
        return {
            "id": str(self.id),
            "status": self.status,
            "notes": self.notes,
            "updated_by": str(self.updated_by) if self.updated_by else None,
            "created_at": self.created_at.isoformat(),
        }


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@urbanmart.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    store_id = Identifier(required=True)
    items = HasMany(OrderItem)
    status_history = HasMany(OrderStatusHistory)
    pricing = ValueObject(OrderPricing)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CARD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    shipping_address_id = Identifier(required=True)
    billing_address_id = Identifier(required=True)
    shipping_address = ValueObject(ShippingAddress)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    tracking_number = String(max_length=100)
    delivery_user_id = Identifier()
    notes = Text()
    shipped_at = DateTime()
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_is_sum_of_parts(self):
        if self.pricing is None:
            return
        p = self.pricing
        if not totals_match(p.subtotal, p.tax, p.shipping, p.total):
            raise ValidationError({"pricing": ["Total must equal subtotal + tax + shipping"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        merchant_id,
        store_id,
        items,
        pricing,
        shipping_address_id,
        billing_address_id,
        shipping_address=None,
        payment_method=PaymentMethod.CARD.value,
        notes=None,
    ):
        """Create a PENDING order.

        Args:
            items: list of dicts with product_id, product_name, quantity,
                price and total.
            pricing: dict with subtotal, tax, shipping and total.
        """
        from urbanmart.ordering.events import OrderPlaced

        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(),
            customer_id=customer_id,
            merchant_id=merchant_id,
            store_id=store_id,
            pricing=OrderPricing(**pricing),
            payment_method=payment_method,
            shipping_address_id=shipping_address_id,
            billing_address_id=billing_address_id,
            shipping_address=shipping_address,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            order.add_items(OrderItem(**item))
        order.add_status_history(
            OrderStatusHistory(
                status=OrderStatus.PENDING.value,
                notes="Order placed",
                updated_by=customer_id,
                created_at=now,
            )
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                customer_id=customer_id,
                merchant_id=merchant_id,
                total=order.pricing.total,
                item_count=sum(item["quantity"] for item in items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in allowed_transitions(current):
            raise InvalidTransitionError(
                {"status": [f"Cannot transition order from {current.value} to {target_status.value}"]}
            )

    def transition_to(self, status, updated_by=None, notes=None, tracking_number=None):
        """Move to ``status`` and append the matching history row."""
        from urbanmart.ordering.events import OrderStatusChanged

        target = OrderStatus(status)
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)

        self.status = target.value
        if target == OrderStatus.SHIPPED:
            self.shipped_at = now
            if tracking_number:
                self.tracking_number = tracking_number
        elif target == OrderStatus.DELIVERED:
            self.delivered_at = now
            self.payment_status = PaymentStatus.PAID.value
        elif target == OrderStatus.REFUNDED:
            self.payment_status = PaymentStatus.REFUNDED.value
        self.updated_at = now

        self.add_status_history(
            OrderStatusHistory(
                status=target.value,
                notes=notes or f"Order status changed to {target.value}",
                updated_by=updated_by,
                created_at=now,
            )
        )
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                updated_by=updated_by,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Delivery hooks
    # -------------------------------------------------------------------
    @property
    def is_open_for_dispatch(self):
        return OrderStatus(self.status) not in _DISPATCH_CLOSED_STATUSES

    def attach_courier(self, delivery_user_id):
        self.delivery_user_id = delivery_user_id
        self.updated_at = datetime.now(UTC)

    def confirm_for_delivery(self, updated_by, notes="Delivery assigned"):
        """Confirm a PENDING order once a courier is attached.

        Orders already past PENDING keep their status. Returns whether a
        transition happened.
        """
        if self.status != OrderStatus.PENDING.value:
            return False
        self.transition_to(OrderStatus.CONFIRMED.value, updated_by=updated_by, notes=notes)
        return True

    def _advance_for_delivery(self, target, updated_by, notes):
        """Move forward to ``target`` unless the order already got there.

        A merchant or administrator may have shipped or delivered the order
        by hand; the courier's report then leaves the order where it is.
        Returns whether a transition happened.
        """
        if OrderStatus(self.status) in _DELIVERY_REACHED[target]:
            return False
        self.transition_to(target.value, updated_by=updated_by, notes=notes)
        return True

    def mark_picked_up(self, updated_by, notes=None):
        return self._advance_for_delivery(
            OrderStatus.SHIPPED,
            updated_by=updated_by,
            notes=notes or "Order picked up for delivery",
        )

    def mark_delivered(self, delivery_user_id, notes=None):
        self.delivery_user_id = delivery_user_id
        return self._advance_for_delivery(
            OrderStatus.DELIVERED,
            updated_by=delivery_user_id,
            notes=notes or "Order delivered",
        )

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def history_newest_first(self):
        indexed = sorted(enumerate(self.status_history), key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [row for _, row in indexed]

    def to_dict(self, include_history=False):
        data = {
            "id": str(self.id),
            "order_number": self.order_number,
            "customer_id": str(self.customer_id),
            "merchant_id": str(self.merchant_id),
            "store_id": str(self.store_id),
            "status": self.status,
            "subtotal": self.pricing.subtotal,
            "tax": self.pricing.tax,
            "shipping": self.pricing.shipping,
            "total": self.pricing.total,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "shipping_address_id": str(self.shipping_address_id),
            "billing_address_id": str(self.billing_address_id),
            "shipping_address": self.shipping_address.to_dict() if self.shipping_address else None,
            "tracking_number": self.tracking_number,
            "delivery_user_id": str(self.delivery_user_id) if self.delivery_user_id else None,
            "notes": self.notes,
            "items": [item.to_dict() for item in self.items],
            "shipped_at": self.shipped_at.isoformat() if self.shipped_at else None,
            "delivered_at": self.delivered_at.isoformat() if self.delivered_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_history:
            data["status_history"] = [h.to_dict() for h in self.history_newest_first()]
        return data
