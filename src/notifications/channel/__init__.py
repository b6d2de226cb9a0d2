"""Email channel registry.

Provides singleton access to the email adapter. Uses the fake adapter by
default; Mailgun is selected with ``SHOP_EMAIL_CHANNEL=mailgun``.
"""

from notifications.channel.email_port import EmailPort
from notifications.channel.fake_email import FakeEmailAdapter
from shared.config import Settings, get_settings

_channel: EmailPort | None = None


def build_channel(settings: Settings) -> EmailPort:
    """Construct the adapter named by ``settings.email_channel``."""
    if settings.email_channel == "fake":
        return FakeEmailAdapter()
    if settings.email_channel == "mailgun":
        from notifications.channel.mailgun_email import MailgunEmailAdapter

        if not (settings.mailgun_domain and settings.mailgun_api_key):
            raise ValueError("SHOP_MAILGUN_DOMAIN and SHOP_MAILGUN_API_KEY are required for the mailgun channel")
        return MailgunEmailAdapter(
            base_url=settings.mailgun_url,
            domain=settings.mailgun_domain,
            api_key=settings.mailgun_api_key,
            timeout=settings.http_timeout_seconds,
        )
    raise ValueError(f"Unknown email channel: {settings.email_channel}")


def get_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _channel
    if _channel is None:
        _channel = build_channel(get_settings())
    return _channel


def set_channel(channel: EmailPort) -> None:
    global _channel
    _channel = channel


def reset_channels():
    """Reset the channel singleton (useful for testing)."""
    global _channel
    _channel = None
