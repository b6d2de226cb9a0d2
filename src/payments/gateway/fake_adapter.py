"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
It can be configured at runtime to succeed or fail, making it useful for
automated tests with predictable outcomes and for development without real
gateway credentials.
"""

from uuid import uuid4

from payments.gateway.port import ChargeResult, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.next_charge_id: str | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Card declined",
        charge_id: str | None = None,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.next_charge_id = charge_id

    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_token: str,
        receipt_email: str,
        idempotency_key: str,
    ) -> ChargeResult:
        call = {
            "method": "create_charge",
            "amount": amount,
            "currency": currency,
            "payment_token": payment_token,
            "receipt_email": receipt_email,
            "idempotency_key": idempotency_key,
        }
        self.calls.append(call)

        if self.should_succeed:
            return ChargeResult(
                success=True,
                charge_id=self.next_charge_id or f"ch_fake_{uuid4().hex[:12]}",
                gateway_status="succeeded",
            )
        return ChargeResult(
            success=False,
            gateway_status="failed",
            failure_reason=self.failure_reason,
        )
