"""Pydantic request/response schemas for the Ordering API: carts, checkout and orders."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared.web import ID_PATTERN

# --- Request Schemas ---


class AddItemRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": 298740, "quantity": 2}]}}

    product_id: int
    quantity: int


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"cart_id": "k3j5h2g4f6d8s0a1q2w3", "payment_token": "tok_visa"}]}
    }

    cart_id: str = Field(..., pattern=ID_PATTERN)
    payment_token: str = Field(..., min_length=5, max_length=255)


# --- Response Schemas ---


class LineItemResponse(BaseModel):
    product_id: int
    quantity: int


class TotalsResponse(BaseModel):
    total: float
    tax: float
    currency: str


class CartResponse(BaseModel):
    id: str
    user_id: str
    items: list[LineItemResponse]
    payment: TotalsResponse
    expires: int | None = None


class PriceResponse(BaseModel):
    total: float
    tax: float
    currency: str


class OrderItemResponse(BaseModel):
    id: int
    name: str
    price: PriceResponse
    quantity: int


class OrderResponse(BaseModel):
    number: str
    user_id: str
    customer: str
    email: str
    charge_id: str
    items: list[OrderItemResponse]
    totals: TotalsResponse
    placed_at: str


class CheckoutResponse(BaseModel):
    order: OrderResponse
    order_persisted: bool
    cart_removed: bool
    notified: bool
