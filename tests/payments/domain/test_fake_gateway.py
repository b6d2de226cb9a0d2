"""Tests for the fake payment gateway and the gateway registry."""

import pytest
from payments.gateway import build_gateway, get_gateway, reset_gateway, set_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import ChargeResult
from payments.gateway.stripe_adapter import StripeGateway
from shared.config import Settings


def _charge(gateway, **overrides):
    params = {
        "amount": 4000,
        "currency": "USD",
        "payment_token": "tok_visa",
        "receipt_email": "jane@example.com",
        "idempotency_key": "cart-1",
    }
    params.update(overrides)
    return gateway.create_charge(**params)


class TestFakeGateway:
    def test_default_charge_succeeds(self):
        result = _charge(FakeGateway())
        assert isinstance(result, ChargeResult)
        assert result.success is True
        assert result.charge_id.startswith("ch_fake_")
        assert result.gateway_status == "succeeded"

    def test_configured_charge_id(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=True, charge_id="ch_1")
        assert _charge(gateway).charge_id == "ch_1"

    def test_configured_charge_fails(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Insufficient funds")
        result = _charge(gateway)
        assert result.success is False
        assert result.charge_id is None
        assert result.failure_reason == "Insufficient funds"

    def test_calls_are_recorded(self):
        gateway = FakeGateway()
        _charge(gateway, amount=2450)
        assert gateway.calls[0]["amount"] == 2450
        assert gateway.calls[0]["method"] == "create_charge"


class TestGatewayRegistry:
    def setup_method(self):
        reset_gateway()

    def teardown_method(self):
        reset_gateway()

    def test_set_gateway_overrides_default(self):
        gateway = FakeGateway()
        set_gateway(gateway)
        assert get_gateway() is gateway

    def test_build_fake_gateway(self):
        assert isinstance(build_gateway(Settings(payment_gateway="fake")), FakeGateway)

    def test_build_stripe_gateway(self):
        gateway = build_gateway(Settings(payment_gateway="stripe", stripe_api_key="sk_test"))
        assert isinstance(gateway, StripeGateway)
        assert gateway.api_key == "sk_test"

    def test_stripe_requires_key(self):
        with pytest.raises(ValueError):
            build_gateway(Settings(payment_gateway="stripe"))

    def test_unknown_gateway(self):
        with pytest.raises(ValueError):
            build_gateway(Settings(payment_gateway="paypal"))
