"""MerchantCustomer aggregate: a customer's running totals with one merchant.

The identity is derived from the (merchant, customer) pair, so there is at
most one row per pair and a checkout upserts it by primary key.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, Integer

from urbanmart.domain import urbanmart
from urbanmart.ordering.pricing import to_money


def merchant_customer_id(merchant_id, customer_id):
    return f"{merchant_id}:{customer_id}"


@urbanmart.aggregate
class MerchantCustomer:
    customer_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    store_id = Identifier(required=True)
    total_orders = Integer(default=0, min_value=0)
    total_spent = Float(default=0.0, min_value=0.0)
    first_order_at = DateTime()
    last_order_at = DateTime()

    @classmethod
    def start(cls, merchant_id, customer_id, store_id):
        return cls(
            id=merchant_customer_id(merchant_id, customer_id),
            merchant_id=merchant_id,
            customer_id=customer_id,
            store_id=store_id,
        )

    def record_order(self, total, placed_at=None):
        now = placed_at or datetime.now(UTC)
        self.total_orders += 1
        self.total_spent = float(to_money(to_money(self.total_spent) + to_money(total)))
        if self.first_order_at is None:
            self.first_order_at = now
        self.last_order_at = now

    def to_dict(self):
        return {
            "customer_id": str(self.customer_id),
            "merchant_id": str(self.merchant_id),
            "store_id": str(self.store_id),
            "total_orders": self.total_orders,
            "total_spent": self.total_spent,
            "first_order_at": self.first_order_at.isoformat() if self.first_order_at else None,
            "last_order_at": self.last_order_at.isoformat() if self.last_order_at else None,
        }
