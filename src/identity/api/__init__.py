"""Identity API package."""

from identity.api.routes import token_router, user_router

__all__ = ["user_router", "token_router"]
