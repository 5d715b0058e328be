"""Platform and merchant dashboards."""

from urbanmart.catalogue.product import Product
from urbanmart.catalogue.store import MerchantStore
from urbanmart.customers.merchant_customer import MerchantCustomer
from urbanmart.identity.user import User, UserRole
from urbanmart.ordering.order import Order, OrderStatus
from urbanmart.ordering.pricing import to_money
from urbanmart.utils.lookup import choice_value, count, find_all, find_one


def _revenue(orders):
    return float(sum((to_money(o.pricing.total) for o in orders), to_money(0)))


def admin_dashboard() -> dict:
    return {
        "users": {
            "total": count(User),
            **{role.value.lower(): count(User, role=role.value) for role in UserRole},
        },
        "total_orders": count(Order),
        "revenue": _revenue(find_all(Order)),
        "total_products": count(Product),
        "orders_by_status": {status.value: count(Order, status=status.value) for status in OrderStatus},
    }


def list_users(role=None) -> list[dict]:
    filters = {"role": choice_value(UserRole, role, "role")} if role else {}
    users = find_all(User, **filters)
    return [u.to_dict() for u in sorted(users, key=lambda u: u.created_at, reverse=True)]


def merchant_dashboard(merchant_id) -> dict:
    orders = find_all(Order, merchant_id=str(merchant_id))
    products = find_all(Product, merchant_id=str(merchant_id))
    low_stock = [p for p in products if p.is_active and p.is_low_stock]

    return {
        "total_orders": len(orders),
        "revenue": _revenue(orders),
        "total_products": len(products),
        "low_stock_count": len(low_stock),
        "low_stock_products": [p.to_dict() for p in low_stock],
        "recent_orders": [
            o.to_dict() for o in sorted(orders, key=lambda o: o.created_at, reverse=True)[:5]
        ],
    }


def merchant_customers(merchant_id) -> list[dict]:
    rows = find_all(MerchantCustomer, merchant_id=str(merchant_id))
    result = []
    for row in sorted(rows, key=lambda r: r.last_order_at, reverse=True):
        data = row.to_dict()
        customer = find_one(User, id=str(row.customer_id))
        if customer is not None:
            data["customer"] = {
                "id": str(customer.id),
                "first_name": customer.first_name,
                "last_name": customer.last_name,
                "email": customer.email,
            }
        result.append(data)
    return result


def list_stores(is_verified=None, search=None) -> list[dict]:
    """Merchant stores, newest first, with their product and order counts.

    ``search`` matches the store name or description, case-insensitively.
    """
    filters = {"is_verified": is_verified} if is_verified is not None else {}
    stores = find_all(MerchantStore, **filters)
    if search:
        needle = search.lower()
        stores = [s for s in stores if needle in s.name.lower() or needle in (s.description or "").lower()]

    result = []
    for store in sorted(stores, key=lambda s: s.created_at, reverse=True):
        data = store.to_dict()
        data["product_count"] = count(Product, store_id=str(store.id))
        data["order_count"] = count(Order, store_id=str(store.id))
        merchant = find_one(User, id=str(store.merchant_id))
        if merchant is not None:
            data["merchant"] = {
                "id": str(merchant.id),
                "first_name": merchant.first_name,
                "last_name": merchant.last_name,
                "email": merchant.email,
            }
        result.append(data)
    return result
