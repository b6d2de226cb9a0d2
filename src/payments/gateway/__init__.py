"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- StripeGateway for production
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from shared.config import Settings, get_settings

_current_gateway: PaymentGateway | None = None


def build_gateway(settings: Settings) -> PaymentGateway:
    """Construct the adapter named by ``settings.payment_gateway``."""
    if settings.payment_gateway == "fake":
        return FakeGateway()
    if settings.payment_gateway == "stripe":
        from payments.gateway.stripe_adapter import StripeGateway

        if not settings.stripe_api_key:
            raise ValueError("SHOP_STRIPE_API_KEY is required for the stripe gateway")
        return StripeGateway(
            api_key=settings.stripe_api_key,
            base_url=settings.stripe_url,
            timeout=settings.http_timeout_seconds,
        )
    raise ValueError(f"Unknown payment gateway: {settings.payment_gateway}")


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway(get_settings())
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
