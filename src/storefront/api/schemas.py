"""Pydantic request/response schemas for the Storefront API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Catalogue ---


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Huile d'olive 1L",
                    "price": 230.0,
                    "stock": 40,
                    "discount": 10,
                    "category_id": "cat-epicerie",
                    "images": ["https://cdn.example.com/olive-oil.jpg"],
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    price: float = Field(..., gt=0)
    stock: int = Field(0, ge=0)
    discount: float = Field(0.0, ge=0, le=100)
    category_id: str | None = None
    description: str | None = None
    sku: str | None = Field(None, max_length=50)
    barcode: str | None = Field(None, max_length=50)
    images: list[str] = Field(default_factory=list)
    kind: str | None = Field(None, max_length=20)
    bundle_items: list[str] = Field(default_factory=list)


class RestockProductRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CategoryDiscountRequest(BaseModel):
    discount: float
    actor_id: str


class ProductIdResponse(BaseModel):
    product_id: str


class CategoryDiscountResponse(BaseModel):
    updated: int


# --- Coupons ---


class CreateCouponRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "RAMADAN10",
                    "discount_percentage": 10,
                    "expiry_date": "2026-12-31T23:59:59Z",
                    "actor_id": "admin-001",
                }
            ]
        }
    }

    code: str = Field(..., max_length=50)
    discount_percentage: float = Field(..., ge=1, le=100)
    expiry_date: datetime
    actor_id: str


class DeactivateCouponRequest(BaseModel):
    actor_id: str


class CouponQuoteResponse(BaseModel):
    code: str
    subtotal: float
    total: float


# --- Shoppers ---


class RegisterShopperRequest(BaseModel):
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    phone: str | None = Field(None, max_length=30)
    external_id: str | None = None
    role: str | None = Field(None, max_length=10)


class ShopperIdResponse(BaseModel):
    shopper_id: str


# --- Orders ---


class OrderLineRequest(BaseModel):
    product_id: str
    name: str
    unit_price: float = Field(..., ge=0)
    discount_percent: float = Field(0.0, ge=0, le=100)
    quantity: int = Field(..., ge=1)


class PlaceOrderRequest(BaseModel):
    customer_id: str
    shipping_address: str = Field(..., min_length=1, max_length=500)
    phone: str | None = Field(None, max_length=30)
    items: list[OrderLineRequest] = Field(..., min_length=1)
    total_amount: float = Field(..., ge=0)
    coupon_code: str | None = Field(None, max_length=50)


class ChangeOrderStatusRequest(BaseModel):
    status: str
    actor_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price: float


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    total_amount: float
    shipping_address: str
    phone: str | None = None
    coupon_code: str | None = None
    order_date: datetime
    items: list[OrderItemResponse]


class StatusResponse(BaseModel):
    status: str = "ok"
