"""Merchant endpoints: store, products, orders, delivery requests and dashboards."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from urbanmart.admin.dashboard import merchant_customers, merchant_dashboard
from urbanmart.api.auth import require_merchant
from urbanmart.api.responses import ok
from urbanmart.api.schemas import (
    CreateProductRequest,
    RequestDeliveryRequest,
    StoreRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
)
from urbanmart.catalogue.management import CreateProduct, OpenStore, UpdateProduct
from urbanmart.catalogue.product import Product
from urbanmart.catalogue.store import MerchantStore
from urbanmart.delivery.assignment import DeliveryAssignment
from urbanmart.delivery.dispatch import RequestDelivery
from urbanmart.identity.user import User
from urbanmart.ordering import queries
from urbanmart.ordering.order import Order
from urbanmart.ordering.status import UpdateOrderStatus
from urbanmart.utils.lookup import find_all

router = APIRouter(prefix="/api/merchant", tags=["merchant"])


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
@router.post("/store")
async def upsert_store(body: StoreRequest, user: User = Depends(require_merchant)):
    store_id = current_domain.process(
        OpenStore(merchant_id=user.id, name=body.name, description=body.description),
        asynchronous=False,
    )
    store = current_domain.repository_for(MerchantStore).get(store_id)
    return ok(store.to_dict(), "Store updated successfully")


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@router.get("/products")
async def list_products(user: User = Depends(require_merchant)):
    products = find_all(Product, merchant_id=str(user.id))
    return ok([p.to_dict() for p in products], "Products retrieved successfully")


@router.post("/products", status_code=201)
async def create_product(body: CreateProductRequest, user: User = Depends(require_merchant)):
    product_id = current_domain.process(
        CreateProduct(
            merchant_id=user.id,
            name=body.name,
            description=body.description,
            price=body.price,
            stock_quantity=body.stock_quantity,
            min_stock_level=body.min_stock_level,
        ),
        asynchronous=False,
    )
    product = current_domain.repository_for(Product).get(product_id)
    return ok(product.to_dict(), "Product created successfully")


@router.put("/products/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, user: User = Depends(require_merchant)):
    current_domain.process(
        UpdateProduct(
            merchant_id=user.id,
            product_id=product_id,
            name=body.name,
            description=body.description,
            price=body.price,
            min_stock_level=body.min_stock_level,
            restock_quantity=body.restock_quantity,
            is_active=body.is_active,
        ),
        asynchronous=False,
    )
    product = current_domain.repository_for(Product).get(product_id)
    return ok(product.to_dict(), "Product updated successfully")


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@router.get("/orders")
async def list_orders(status: str | None = None, user: User = Depends(require_merchant)):
    return ok(queries.merchant_orders(user.id, status), "Orders retrieved successfully")


@router.patch("/orders/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, user: User = Depends(require_merchant)):
    current_domain.process(
        UpdateOrderStatus(
            order_id=order_id,
            status=body.status,
            actor_id=user.id,
            actor_role=user.role,
            tracking_number=body.tracking_number,
            notes=body.notes,
        ),
        asynchronous=False,
    )
    order = current_domain.repository_for(Order).get(order_id)
    return ok(order.to_dict(), "Order status updated successfully")


@router.post("/orders/{order_id}/request-delivery", status_code=201)
async def request_delivery(order_id: str, body: RequestDeliveryRequest, user: User = Depends(require_merchant)):
    assignment_id = current_domain.process(
        RequestDelivery(
            merchant_id=user.id,
            order_id=order_id,
            organization_id=body.organization_id,
            delivery_fee=body.delivery_fee,
            payment_type=body.payment_type,
            estimated_time=body.estimated_time,
            instructions=body.instructions,
        ),
        asynchronous=False,
    )
    assignment = current_domain.repository_for(DeliveryAssignment).get(assignment_id)
    return ok(assignment.to_dict(), "Delivery requested successfully")


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------
@router.get("/customers")
async def list_customers(user: User = Depends(require_merchant)):
    return ok(merchant_customers(user.id), "Customers retrieved successfully")


@router.get("/dashboard")
async def dashboard(user: User = Depends(require_merchant)):
    return ok(merchant_dashboard(user.id), "Dashboard data retrieved successfully")
