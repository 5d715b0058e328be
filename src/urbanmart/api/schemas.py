"""Pydantic request schemas for the UrbanMart API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Cart ---


class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-001", "quantity": 2}]}}

    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


# --- Orders ---


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address_id": "addr-001",
                    "billing_address_id": "addr-001",
                    "payment_method": "CARD",
                    "notes": "Leave at the front desk",
                }
            ]
        }
    }

    shipping_address_id: str
    billing_address_id: str
    payment_method: str = "CARD"
    notes: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = Field(None, max_length=100)
    notes: str | None = None


# --- Wishlist ---


class WishlistRequest(BaseModel):
    product_id: str


# --- Users ---


class AddAddressRequest(BaseModel):
    label: str | None = Field(None, max_length=50)
    address1: str = Field(..., max_length=255)
    address2: str | None = Field(None, max_length=255)
    city: str = Field(..., max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str = Field(..., max_length=100)
    is_default: bool = False


class SubmitReportRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "type": "COMPLAINT",
                    "title": "Parcel arrived damaged",
                    "description": "The box was crushed and two jars were broken.",
                    "priority": "HIGH",
                }
            ]
        }
    }

    type: str
    title: str = Field(..., max_length=200)
    description: str
    priority: str = "MEDIUM"


# --- Merchant ---


class StoreRequest(BaseModel):
    name: str = Field(..., max_length=200)
    description: str | None = None


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Espresso Beans 1kg", "price": 24.5, "stock_quantity": 40, "min_stock_level": 5}]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    stock_quantity: int = Field(0, ge=0)
    min_stock_level: int = Field(5, ge=0)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    min_stock_level: int | None = Field(None, ge=0)
    restock_quantity: int | None = Field(None, ge=1)
    is_active: bool | None = None


class RequestDeliveryRequest(BaseModel):
    organization_id: str
    delivery_fee: float = Field(0.0, ge=0)
    payment_type: str = "PREPAID"
    estimated_time: int | None = Field(None, ge=0)
    instructions: str | None = None


# --- Delivery ---


class AssignDeliveryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "ord-001",
                    "delivery_user_id": "usr-042",
                    "delivery_fee": 4.5,
                    "payment_type": "PREPAID",
                    "estimated_time": 45,
                }
            ]
        }
    }

    order_id: str
    delivery_user_id: str
    delivery_fee: float = Field(0.0, ge=0)
    payment_type: str = "PREPAID"
    estimated_time: int | None = Field(None, ge=0)
    instructions: str | None = None


class ReassignDeliveryRequest(BaseModel):
    delivery_user_id: str


class DeliveryStatusRequest(BaseModel):
    status: str
    instructions: str | None = None


# --- Delivery organizations ---


class CreateOrganizationRequest(BaseModel):
    name: str = Field(..., max_length=200)
    description: str | None = None
    logo: str | None = Field(None, max_length=500)


class InviteMemberRequest(BaseModel):
    email: str = Field(..., max_length=254)
    message: str | None = None


class ApplyRequest(BaseModel):
    organization_id: str
    message: str | None = None


class RespondRequest(BaseModel):
    status: str


class AssignMemberRequest(BaseModel):
    member_id: str


# --- Admin ---


class ChangeRoleRequest(BaseModel):
    role: str


class ChangeUserStatusRequest(BaseModel):
    is_active: bool


class AssignReportRequest(BaseModel):
    assigned_admin_id: str | None = None


class ReportStatusRequest(BaseModel):
    status: str


class VerifyStoreRequest(BaseModel):
    is_verified: bool
