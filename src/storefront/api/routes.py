"""FastAPI endpoints for the storefront: cart, checkout, orders, catalogue and stock."""

import json
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import Caller, admin_caller, current_caller
from storefront.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CreateProductRequest,
    PlaceOrderRequest,
    ProductIdResponse,
    ShippingQuoteRequest,
    StatusResponse,
    StockAdjustmentRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    UpdateProductRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.cart.queries import cart_view
from storefront.catalogue.management import AddProduct, UpdateProductDetails
from storefront.catalogue.product import ProductStatus
from storefront.catalogue.queries import available_product, browse_products, low_stock_products, product_payload
from storefront.inventory.adjustment import AdjustStock
from storefront.inventory.queries import stock_history
from storefront.order.cancellation import CancelOrder
from storefront.order.fulfillment import UpdateOrderStatus
from storefront.order.payment import UpdatePaymentStatus
from storefront.order.placement import place_order
from storefront.order.queries import order_for_viewer, order_payload, orders_for_customer, search_orders
from storefront.shipping.resolver import get_resolver, validate_destination

cart_router = APIRouter(prefix="/cart", tags=["cart"])
shipping_router = APIRouter(prefix="/shipping", tags=["shipping"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
product_router = APIRouter(prefix="/products", tags=["products"])

MAX_PAGE_LIMIT = 100


# --- Cart endpoints ---


@cart_router.get("")
async def get_cart(caller: Caller = Depends(current_caller)) -> dict:
    return cart_view(caller.user_id)


@cart_router.post("/items")
async def add_to_cart(body: AddToCartRequest, caller: Caller = Depends(current_caller)) -> dict:
    command = AddToCart(
        customer_id=caller.user_id,
        product_id=body.product_id,
        color=body.color,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return cart_view(caller.user_id)


@cart_router.put("/items/{product_id}")
async def update_cart_item(
    product_id: str,
    body: UpdateCartItemRequest,
    color: str = Query(...),
    caller: Caller = Depends(current_caller),
) -> dict:
    command = UpdateCartItem(
        customer_id=caller.user_id,
        product_id=product_id,
        color=color,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return cart_view(caller.user_id)


@cart_router.delete("/items/{product_id}")
async def remove_from_cart(
    product_id: str,
    color: str = Query(...),
    caller: Caller = Depends(current_caller),
) -> dict:
    command = RemoveFromCart(customer_id=caller.user_id, product_id=product_id, color=color)
    current_domain.process(command, asynchronous=False)
    return cart_view(caller.user_id)


@cart_router.delete("")
async def clear_cart(caller: Caller = Depends(current_caller)) -> dict:
    current_domain.process(ClearCart(customer_id=caller.user_id), asynchronous=False)
    return cart_view(caller.user_id)


# --- Shipping endpoints ---


@shipping_router.post("/quote")
async def quote_shipping(body: ShippingQuoteRequest) -> dict:
    validate_destination(body.state, body.city)
    quote = get_resolver().quote({"city": body.city, "state": body.state}, body.subtotal)
    return quote.to_dict()


# --- Order endpoints ---


@order_router.post("", status_code=201)
async def create_order(body: PlaceOrderRequest, caller: Caller = Depends(current_caller)) -> dict:
    order = place_order(
        customer_id=caller.user_id,
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method,
        notes=body.notes,
    )
    return order_payload(order)


@order_router.get("/mine")
async def my_orders(
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_LIMIT),
    caller: Caller = Depends(current_caller),
) -> dict:
    return orders_for_customer(caller.user_id, status=status, page=page, limit=limit).to_dict(order_payload)


@order_router.get("")
async def list_orders(
    status: str | None = None,
    payment_status: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_LIMIT),
    caller: Caller = Depends(admin_caller),
) -> dict:
    result = search_orders(
        status=status,
        payment_status=payment_status,
        placed_from=start_date,
        placed_to=end_date,
        page=page,
        limit=limit,
    )
    return result.to_dict(order_payload)


@order_router.get("/{order_id}")
async def get_order(order_id: str, caller: Caller = Depends(current_caller)) -> dict:
    return order_payload(order_for_viewer(order_id, caller.user_id, caller.is_admin))


@order_router.put("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    caller: Caller = Depends(current_caller),
) -> dict:
    command = CancelOrder(
        order_id=order_id,
        requested_by=caller.user_id,
        is_admin=caller.is_admin,
        reason=body.reason if body else None,
    )
    order = current_domain.process(command, asynchronous=False)
    return order_payload(order)


@order_router.put("/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    caller: Caller = Depends(admin_caller),
) -> dict:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        carrier=body.carrier,
        tracking_number=body.tracking_number,
        tracking_url=body.tracking_url,
        reason=body.reason,
        changed_by=caller.user_id,
    )
    order = current_domain.process(command, asynchronous=False)
    return order_payload(order)


@order_router.put("/{order_id}/payment")
async def update_payment_status(
    order_id: str,
    body: UpdatePaymentStatusRequest,
    caller: Caller = Depends(admin_caller),
) -> dict:
    command = UpdatePaymentStatus(order_id=order_id, payment_status=body.payment_status)
    order = current_domain.process(command, asynchronous=False)
    return order_payload(order)


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, caller: Caller = Depends(admin_caller)) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        category=body.category,
        price=body.price,
        stock=body.stock,
        stock_threshold=body.stock_threshold,
        colors=json.dumps(body.colors),
        images=json.dumps(body.images),
        status=body.status,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("")
async def list_products(
    search: str | None = None,
    category: str | None = None,
    sort: str = "-created_at",
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=MAX_PAGE_LIMIT),
) -> dict:
    return browse_products(search=search, category=category, sort=sort, page=page, limit=limit).to_dict(
        product_payload
    )


@product_router.get("/low-stock")
async def list_low_stock(caller: Caller = Depends(admin_caller)) -> list[dict]:
    return [product_payload(product) for product in low_stock_products()]


@product_router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    return product_payload(available_product(product_id))


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    caller: Caller = Depends(admin_caller),
) -> StatusResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        description=body.description,
        category=body.category,
        price=body.price,
        stock_threshold=body.stock_threshold,
        colors=json.dumps(body.colors) if body.colors is not None else None,
        images=json.dumps(body.images) if body.images is not None else None,
        status=body.status,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def archive_product(product_id: str, caller: Caller = Depends(admin_caller)) -> StatusResponse:
    """Withdraw a product from sale. Orders and the stock ledger keep referring to it."""
    command = UpdateProductDetails(product_id=product_id, status=ProductStatus.ARCHIVED.value)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/stock")
async def adjust_product_stock(
    product_id: str,
    body: StockAdjustmentRequest,
    caller: Caller = Depends(admin_caller),
) -> dict:
    command = AdjustStock(
        product_id=product_id,
        adjustment_type=body.type,
        quantity=body.quantity,
        reason=body.reason,
        adjusted_by=caller.user_id,
    )
    new_stock = current_domain.process(command, asynchronous=False)
    return {"product_id": product_id, "stock": new_stock}


@product_router.get("/{product_id}/stock-history")
async def get_stock_history(product_id: str, caller: Caller = Depends(admin_caller)) -> list[dict]:
    return stock_history(product_id)
