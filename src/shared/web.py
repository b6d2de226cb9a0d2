"""FastAPI plumbing shared by every context's router."""

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse

from shared.errors import (
    AlreadyExists,
    AuthenticationFailed,
    EmptyCart,
    Expired,
    Forbidden,
    InvalidProduct,
    NotFound,
    PaymentFailed,
    ShopError,
    ValidationError,
)

# 20-char ids from the lowercase alphanumeric alphabet
ID_PATTERN = r"^[a-z0-9]{20}$"
ORDER_NUMBER_PATTERN = r"^[A-Z0-9]{5}-[0-9]+$"

ERROR_STATUS: dict[type[ShopError], int] = {
    ValidationError: 400,
    InvalidProduct: 400,
    EmptyCart: 400,
    Expired: 400,
    AuthenticationFailed: 401,
    PaymentFailed: 402,
    Forbidden: 403,
    NotFound: 404,
    AlreadyExists: 409,
}


def status_for(exc: ShopError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS:
            return ERROR_STATUS[error_type]
    return 500


async def shop_error_handler(request: Request, exc: ShopError) -> JSONResponse:
    content = {"error": exc.message}
    if isinstance(exc, ValidationError):
        content["fields"] = exc.messages
    return JSONResponse(status_code=status_for(exc), content=content)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopError, shop_error_handler)


def get_services(request: Request):
    """The ``Services`` container attached to the running app."""
    return request.app.state.services


def token_header(token: str | None = Header(None)) -> str | None:
    """Credential token from the ``token`` request header."""
    return token
