"""FastAPI endpoints for the Catalogue context."""

from fastapi import APIRouter, Depends

from catalogue.api.schemas import MenuResponse, ProductResponse
from shared.web import get_services, token_header

product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=MenuResponse)
async def list_products(token: str | None = Depends(token_header), services=Depends(get_services)) -> MenuResponse:
    await services.sessions.authenticate(token)
    return MenuResponse(
        pizzas=[ProductResponse.model_validate(product.model_dump()) for product in services.catalog.products()]
    )
