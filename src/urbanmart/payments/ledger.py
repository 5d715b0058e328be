"""Keeps an order's transactions in step with its status.

Called from the command handlers that move an order, so the transaction rows
are written in the same Unit of Work as the order itself.
"""

from protean.utils.globals import current_domain

from urbanmart.domain import logger
from urbanmart.ordering.order import OrderStatus
from urbanmart.payments.transaction import Transaction, TransactionStatus, TransactionType
from urbanmart.utils.lookup import choice_value, find_all, find_one


def _payment(order):
    return find_one(Transaction, order_id=str(order.id), transaction_type=TransactionType.PAYMENT.value)


def record_payment(order):
    payment = Transaction.payment_for(order)
    current_domain.repository_for(Transaction).add(payment)
    return payment


def sync_with_order(order):
    """Settle the order's payment, or refund it, after a status change."""
    repo = current_domain.repository_for(Transaction)
    payment = _payment(order)
    if payment is None:
        return

    status = OrderStatus(order.status)
    if status == OrderStatus.DELIVERED and payment.is_pending:
        payment.complete()
        repo.add(payment)
    elif status == OrderStatus.CANCELLED and payment.is_pending:
        payment.fail()
        repo.add(payment)
    elif status == OrderStatus.REFUNDED and payment.status == TransactionStatus.COMPLETED.value:
        repo.add(Transaction.refund_for(order))
    else:
        return

    logger.info("transactions_synced", order_id=str(order.id), order_status=order.status)


def list_transactions(status=None, transaction_type=None) -> list[dict]:
    filters = {}
    if status:
        filters["status"] = choice_value(TransactionStatus, status)
    if transaction_type:
        filters["transaction_type"] = choice_value(TransactionType, transaction_type, "type")
    rows = find_all(Transaction, **filters)
    return [t.to_dict() for t in sorted(rows, key=lambda t: t.created_at, reverse=True)]
