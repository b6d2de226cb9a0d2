"""Error taxonomy shared by every context.

Store-level: NotFound, AlreadyExists.
Session-level: AuthenticationFailed, Expired, Forbidden.
Workflow-level: InvalidProduct, EmptyCart, CartNotFound, PaymentFailed.

OperationalError is never raised to a caller whose operation already
succeeded; it is logged where it is detected.
"""


class ShopError(Exception):
    """Base class for errors reported back to the caller."""

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ValidationError(ShopError):
    """Input failed validation. `messages` maps field names to problems."""

    def __init__(self, messages: dict[str, list[str]]) -> None:
        self.messages = messages
        summary = "; ".join(f"{field}: {', '.join(problems)}" for field, problems in messages.items())
        super().__init__(summary or "Invalid input")


class NotFound(ShopError):
    pass


class AlreadyExists(ShopError):
    pass


class AuthenticationFailed(ShopError):
    pass


class Expired(ShopError):
    pass


class Forbidden(ShopError):
    pass


class InvalidProduct(ShopError):
    pass


class CartNotFound(NotFound):
    pass


class EmptyCart(ShopError):
    pass


class PaymentFailed(ShopError):
    pass


class OperationalError(ShopError):
    """Failure downstream of a committed success (logged, never retried)."""
