"""Order reads for customers, merchants and administrators."""

from protean.exceptions import ObjectNotFoundError

from urbanmart.identity.user import UserRole
from urbanmart.ordering.order import Order, OrderStatus
from urbanmart.utils.lookup import choice_value, find_all


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


def _filters(status=None, **filters):
    if status:
        filters["status"] = choice_value(OrderStatus, status)
    return filters


def customer_orders(customer_id, status=None) -> list[dict]:
    orders = find_all(Order, **_filters(status, customer_id=str(customer_id)))
    return [o.to_dict() for o in _newest_first(orders)]


def customer_order(order_id, customer_id) -> dict:
    orders = find_all(Order, id=str(order_id), customer_id=str(customer_id))
    if not orders:
        raise ObjectNotFoundError({"order": ["Order not found"]})
    return orders[0].to_dict(include_history=True)


def merchant_orders(merchant_id, status=None) -> list[dict]:
    orders = find_all(Order, **_filters(status, merchant_id=str(merchant_id)))
    return [o.to_dict() for o in _newest_first(orders)]


def all_orders(status=None) -> list[dict]:
    orders = find_all(Order, **_filters(status))
    return [o.to_dict() for o in _newest_first(orders)]


def order_status_history(order_id, actor_id, actor_role) -> list[dict]:
    """History rows, newest first, for the order's customer or an administrator.

    Anyone else is told the order does not exist.
    """
    filters = {"id": str(order_id)}
    if actor_role != UserRole.ADMIN.value:
        filters["customer_id"] = str(actor_id)

    orders = find_all(Order, **filters)
    if not orders:
        raise ObjectNotFoundError({"order": ["Order not found"]})
    return [row.to_dict() for row in orders[0].history_newest_first()]
