"""FastAPI routes for the Ordering context: carts, checkout and orders."""

from fastapi import APIRouter, Depends, Path

from ordering.api.schemas import AddItemRequest, CartResponse, CheckoutRequest, CheckoutResponse, OrderResponse
from shared.web import ID_PATTERN, ORDER_NUMBER_PATTERN, get_services, token_header

cart_router = APIRouter(prefix="/carts", tags=["carts"])
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


# --- Cart endpoints ---


@cart_router.post("", status_code=201, response_model=CartResponse)
async def create_cart(token: str | None = Depends(token_header), services=Depends(get_services)) -> CartResponse:
    session = await services.sessions.authenticate(token)
    cart = await services.carts.create_cart(session.user_id)
    return CartResponse.model_validate(cart.to_document())


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(
    cart_id: str = Path(pattern=ID_PATTERN),
    token: str | None = Depends(token_header),
    services=Depends(get_services),
) -> CartResponse:
    session = await services.sessions.authenticate(token)
    cart = await services.carts.get_cart(cart_id, user_id=session.user_id)
    return CartResponse.model_validate(cart.to_document())


@cart_router.put("/{cart_id}/items", response_model=CartResponse)
async def add_item(
    body: AddItemRequest,
    cart_id: str = Path(pattern=ID_PATTERN),
    token: str | None = Depends(token_header),
    services=Depends(get_services),
) -> CartResponse:
    session = await services.sessions.authenticate(token)
    cart = await services.carts.add_or_merge_item(cart_id, body.product_id, body.quantity, user_id=session.user_id)
    return CartResponse.model_validate(cart.to_document())


# --- Checkout endpoints ---


@checkout_router.post("", response_model=CheckoutResponse)
async def checkout(
    body: CheckoutRequest,
    token: str | None = Depends(token_header),
    services=Depends(get_services),
) -> CheckoutResponse:
    session = await services.sessions.authenticate(token)
    receipt = await services.checkout.checkout(session.user_id, body.cart_id, body.payment_token)
    return CheckoutResponse(
        order=OrderResponse.model_validate(receipt.order.to_document()),
        order_persisted=receipt.order_persisted,
        cart_removed=receipt.cart_removed,
        notified=receipt.notified,
    )


# --- Order endpoints ---


@order_router.get("/{number}", response_model=OrderResponse)
async def get_order(
    number: str = Path(pattern=ORDER_NUMBER_PATTERN),
    token: str | None = Depends(token_header),
    services=Depends(get_services),
) -> OrderResponse:
    session = await services.sessions.authenticate(token)
    order = await services.checkout.get_order(number, user_id=session.user_id)
    return OrderResponse.model_validate(order.to_document())
