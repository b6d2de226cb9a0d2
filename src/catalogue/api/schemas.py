"""Pydantic response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel


class PriceResponse(BaseModel):
    total: float
    tax: float
    currency: str


class ProductResponse(BaseModel):
    id: int
    name: str
    price: PriceResponse


class MenuResponse(BaseModel):
    pizzas: list[ProductResponse]
