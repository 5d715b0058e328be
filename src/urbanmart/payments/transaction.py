"""Transaction aggregate (CQRS): money moving for an order.

Checkout records a PENDING payment. Delivery completes it and cancellation
fails it; refunding an order whose payment completed adds a REFUND.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, String

from urbanmart.domain import urbanmart
from urbanmart.utils.errors import InvalidTransitionError


class TransactionType(Enum):
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    WITHDRAWAL = "WITHDRAWAL"


class TransactionStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@urbanmart.aggregate
class Transaction:
    order_id = Identifier(required=True)
    order_number = String(max_length=50)
    merchant_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    transaction_type = String(required=True, choices=TransactionType)
    status = String(choices=TransactionStatus, default=TransactionStatus.PENDING.value)
    payment_method = String(max_length=50)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def _record(cls, order, transaction_type, status):
        now = datetime.now(UTC)
        return cls(
            order_id=order.id,
            order_number=order.order_number,
            merchant_id=order.merchant_id,
            customer_id=order.customer_id,
            amount=order.pricing.total,
            transaction_type=transaction_type.value,
            status=status.value,
            payment_method=order.payment_method,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def payment_for(cls, order):
        return cls._record(order, TransactionType.PAYMENT, TransactionStatus.PENDING)

    @classmethod
    def refund_for(cls, order):
        return cls._record(order, TransactionType.REFUND, TransactionStatus.COMPLETED)

    @property
    def is_pending(self):
        return self.status == TransactionStatus.PENDING.value

    def _settle(self, status):
        if not self.is_pending:
            raise InvalidTransitionError({"status": [f"Transaction is already {self.status}"]})
        self.status = status.value
        self.updated_at = datetime.now(UTC)

    def complete(self):
        self._settle(TransactionStatus.COMPLETED)

    def fail(self):
        self._settle(TransactionStatus.FAILED)

    def to_dict(self):
        return {
            "id": str(self.id),
            "order_id": str(self.order_id),
            "order_number": self.order_number,
            "merchant_id": str(self.merchant_id),
            "customer_id": str(self.customer_id),
            "amount": self.amount,
            "type": self.transaction_type,
            "status": self.status,
            "payment_method": self.payment_method,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
