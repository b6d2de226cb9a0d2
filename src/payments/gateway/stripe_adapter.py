"""Stripe payment gateway adapter.

Posts a form-encoded charge to the Stripe charges endpoint with HTTP basic
auth (secret key as username). Any non-200 status or transport error is
reported as a failed charge; nothing is retried here.
"""

import requests
import structlog

from identity.shared.email import is_valid_email
from payments.gateway.port import ChargeResult, PaymentGateway

logger = structlog.get_logger(__name__)

# Stripe rejects charges below 50 minor units
MINIMUM_AMOUNT = 50


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, base_url: str, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    def _invalid(self, amount, currency, payment_token, receipt_email) -> str | None:
        if not isinstance(amount, int) or amount < MINIMUM_AMOUNT:
            return f"Amount must be an integer of at least {MINIMUM_AMOUNT} minor units"
        if not isinstance(currency, str) or len(currency.strip()) != 3:
            return "Currency must be a 3-letter code"
        if not isinstance(payment_token, str) or not payment_token.strip():
            return "Missing payment token"
        if not is_valid_email(receipt_email):
            return "Invalid receipt email"
        return None

    def create_charge(
        self,
        amount: int,
        currency: str,
        payment_token: str,
        receipt_email: str,
        idempotency_key: str,
    ) -> ChargeResult:
        problem = self._invalid(amount, currency, payment_token, receipt_email)
        if problem:
            logger.warning("Charge parameters rejected", reason=problem)
            return ChargeResult(success=False, gateway_status="rejected", failure_reason=problem)

        payload = {
            "amount": amount,
            "currency": currency.strip().lower(),
            "source": payment_token.strip(),
            "receipt_email": receipt_email,
        }
        try:
            response = requests.post(
                self.base_url,
                data=payload,
                auth=(self.api_key, ""),
                headers={"Idempotency-Key": idempotency_key},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Charge request failed", error=str(exc))
            return ChargeResult(success=False, gateway_status="error", failure_reason=str(exc))

        if response.status_code != 200:
            logger.warning("Charge declined", status_code=response.status_code)
            return ChargeResult(
                success=False,
                gateway_status=str(response.status_code),
                failure_reason=f"Gateway returned status {response.status_code}",
            )

        try:
            charge_id = response.json()["id"]
        except (ValueError, KeyError, TypeError):
            return ChargeResult(success=False, gateway_status="malformed", failure_reason="Unreadable gateway response")

        return ChargeResult(success=True, charge_id=charge_id, gateway_status="succeeded")
