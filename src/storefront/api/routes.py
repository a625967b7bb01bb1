"""FastAPI endpoints for the Storefront domain.

Thin adapters: schema → command → response. Protean ``ValidationError``,
``ObjectNotFoundError`` and ``PermissionDeniedError`` are turned into HTTP
responses by the app-level exception handlers.
"""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddProductRequest,
    CategoryDiscountRequest,
    CategoryDiscountResponse,
    ChangeOrderStatusRequest,
    CouponQuoteResponse,
    CreateCouponRequest,
    DeactivateCouponRequest,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    RegisterShopperRequest,
    RestockProductRequest,
    ShopperIdResponse,
    StatusResponse,
)
from storefront.catalogue.management import AddProduct, ApplyCategoryDiscount, RestockProduct
from storefront.coupon.coupon import CreateCoupon, DeactivateCoupon, find_redeemable_coupon
from storefront.customer.shopper import RegisterShopper, require_admin
from storefront.order.placement import PlaceOrder
from storefront.order.queries import all_orders, orders_for_customer
from storefront.order.status import ChangeOrderStatus

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])
shopper_router = APIRouter(prefix="/shoppers", tags=["shoppers"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


# --- Catalogue endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        price=body.price,
        stock=body.stock,
        discount=body.discount,
        category_id=body.category_id,
        description=body.description,
        sku=body.sku,
        barcode=body.barcode,
        images=json.dumps(body.images),
        kind=body.kind,
        bundle_items=json.dumps(body.bundle_items) if body.bundle_items else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.post("/{product_id}/restock", response_model=StatusResponse)
async def restock_product(product_id: str, body: RestockProductRequest) -> StatusResponse:
    command = RestockProduct(product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@category_router.post("/{category_id}/discount", response_model=CategoryDiscountResponse)
async def apply_category_discount(category_id: str, body: CategoryDiscountRequest) -> CategoryDiscountResponse:
    command = ApplyCategoryDiscount(
        category_id=category_id,
        discount=body.discount,
        actor_id=body.actor_id,
    )
    updated = current_domain.process(command, asynchronous=False)
    return CategoryDiscountResponse(updated=updated or 0)


# --- Coupon endpoints ---


@coupon_router.post("", status_code=201, response_model=StatusResponse)
async def create_coupon(body: CreateCouponRequest) -> StatusResponse:
    command = CreateCoupon(
        code=body.code,
        discount_percentage=body.discount_percentage,
        expiry_date=body.expiry_date,
        actor_id=body.actor_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@coupon_router.post("/{code}/deactivate", response_model=StatusResponse)
async def deactivate_coupon(code: str, body: DeactivateCouponRequest) -> StatusResponse:
    command = DeactivateCoupon(code=code, actor_id=body.actor_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@coupon_router.get("/{code}/quote", response_model=CouponQuoteResponse)
async def quote_coupon(code: str, subtotal: float = Query(..., ge=0)) -> CouponQuoteResponse:
    coupon = find_redeemable_coupon(code)
    return CouponQuoteResponse(code=coupon.code, subtotal=subtotal, total=coupon.apply_to(subtotal))


# --- Shopper endpoints ---


@shopper_router.post("", status_code=201, response_model=ShopperIdResponse)
async def register_shopper(body: RegisterShopperRequest) -> ShopperIdResponse:
    command = RegisterShopper(
        name=body.name,
        email=body.email,
        phone=body.phone,
        external_id=body.external_id,
        role=body.role,
    )
    result = current_domain.process(command, asynchronous=False)
    return ShopperIdResponse(shopper_id=result)


# --- Order endpoints ---


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        status=order.status,
        total_amount=order.total_amount,
        shipping_address=order.shipping_address,
        phone=order.phone,
        coupon_code=order.coupon_code,
        order_date=order.order_date,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
            )
            for item in order.items
        ],
    )


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        customer_id=body.customer_id,
        shipping_address=body.shipping_address,
        phone=body.phone,
        items=json.dumps([item.model_dump() for item in body.items]),
        total_amount=body.total_amount,
        coupon_code=body.coupon_code,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(customer_id: str | None = None, actor_id: str | None = None) -> list[OrderResponse]:
    """A shopper's own orders, or every order when an admin asks without ``customer_id``."""
    if customer_id:
        orders = orders_for_customer(customer_id)
    else:
        require_admin(actor_id, path="orders", operation="list")
        orders = all_orders()
    return [_order_response(order) for order in orders]


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def change_order_status(order_id: str, body: ChangeOrderStatusRequest) -> StatusResponse:
    command = ChangeOrderStatus(order_id=order_id, new_status=body.status, actor_id=body.actor_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
