"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing the checkout workflow.

A charge either succeeds with an opaque charge reference or fails
definitively; there is no pending state.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeResult:
    """Result of a payment charge attempt."""

    success: bool
    charge_id: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_token: str,
        receipt_email: str,
        idempotency_key: str,
    ) -> ChargeResult:
        """Charge ``amount`` minor currency units using an opaque client payment token.

        Adapters report every failure (declines, non-success statuses, network
        errors) as ``ChargeResult(success=False)`` rather than raising.
        """
        ...
