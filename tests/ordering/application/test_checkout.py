"""Application tests for the checkout orchestrator."""

import asyncio

import pytest
from identity.user.directory import UserDirectory
from ordering.cart.engine import CartEngine
from ordering.checkout.orchestrator import CheckoutOrchestrator, charge_idempotency_key
from shared.errors import AlreadyExists, CartNotFound, EmptyCart, Forbidden, NotFound, PaymentFailed
from shared.store import CARTS, ORDERS


@pytest.fixture()
def orchestrator(store, catalog, gateway, mailer, clock):
    return CheckoutOrchestrator(store, catalog, gateway, mailer, clock=clock)


@pytest.fixture()
def carts(store, catalog, clock):
    return CartEngine(store, catalog, clock=clock)


@pytest.fixture()
async def user(store, user_data):
    return await UserDirectory(store).register(**user_data)


@pytest.fixture()
async def filled_cart(carts, user):
    cart = await carts.create_cart(user.id)
    return await carts.add_or_merge_item(cart.id, 298740, 2)


class TestValidation:
    async def test_empty_cart_has_no_side_effects(self, orchestrator, carts, user, store, gateway, mailer):
        cart = await carts.create_cart(user.id)

        with pytest.raises(EmptyCart):
            await orchestrator.checkout(user.id, cart.id, "tok_visa")

        assert gateway.calls == []
        assert mailer.attempts == 0
        assert await store.list(ORDERS) == set()
        assert await store.list(CARTS) == {cart.id}

    async def test_missing_cart(self, orchestrator, user, gateway):
        with pytest.raises(CartNotFound):
            await orchestrator.checkout(user.id, "x" * 20, "tok_visa")
        assert gateway.calls == []

    async def test_cart_of_another_user(self, orchestrator, filled_cart, store, user_data, gateway):
        other = await UserDirectory(store).register(**{**user_data, "email": "other@example.com"})
        with pytest.raises(Forbidden):
            await orchestrator.checkout(other.id, filled_cart.id, "tok_visa")
        assert gateway.calls == []

    async def test_vanished_user(self, orchestrator, filled_cart, store, user):
        await UserDirectory(store).delete(user.id)
        with pytest.raises(NotFound):
            await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")


class TestPaymentFailure:
    async def test_failed_charge_leaves_cart_and_creates_no_order(
        self, orchestrator, filled_cart, user, store, gateway, mailer
    ):
        gateway.configure(should_succeed=False, failure_reason="Card declined")

        with pytest.raises(PaymentFailed):
            await orchestrator.checkout(user.id, filled_cart.id, "tok_declined")

        assert await store.list(ORDERS) == set()
        assert await store.list(CARTS) == {filled_cart.id}
        assert mailer.attempts == 0

    async def test_retry_with_another_card_uses_a_new_charge_key(self, orchestrator, filled_cart, user, gateway):
        gateway.configure(should_succeed=False)
        with pytest.raises(PaymentFailed):
            await orchestrator.checkout(user.id, filled_cart.id, "tok_declined")

        gateway.configure(should_succeed=True, charge_id="ch_2")
        receipt = await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        declined, paid = gateway.calls
        assert declined["idempotency_key"] != paid["idempotency_key"]
        assert receipt.order.charge_id == "ch_2"

    def test_charge_key_depends_on_card_and_amount(self):
        key = charge_idempotency_key("c" * 20, "tok_visa", 4000)
        assert key == charge_idempotency_key("c" * 20, "tok_visa", 4000)
        assert key != charge_idempotency_key("c" * 20, "tok_mastercard", 4000)
        assert key != charge_idempotency_key("c" * 20, "tok_visa", 6200)
        assert key != charge_idempotency_key("d" * 20, "tok_visa", 4000)


class TestCartLocking:
    async def test_checkout_waits_for_a_merge_in_progress(self, orchestrator, filled_cart, user, store, gateway):
        async with store.lock(CARTS, filled_cart.id):
            task = asyncio.create_task(orchestrator.checkout(user.id, filled_cart.id, "tok_visa"))
            await asyncio.sleep(0.05)
            assert not task.done()
            assert gateway.calls == []

        receipt = await task
        assert receipt.cart_removed


class TestSuccessfulCheckout:
    async def test_checkout_places_order(self, orchestrator, filled_cart, user, store, gateway, mailer):
        gateway.configure(should_succeed=True, charge_id="ch_1")

        receipt = await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        order = receipt.order
        assert order.charge_id == "ch_1"
        assert order.customer == "Jane Doe"
        assert [(item.id, item.quantity) for item in order.items] == [(298740, 2)]
        assert order.totals.total == 40
        assert order.totals.tax == 3.52
        assert receipt.order_persisted and receipt.cart_removed and receipt.notified
        assert receipt.operational_errors == []

        assert await store.list(ORDERS) == {order.number}
        assert await store.list(CARTS) == set()

    async def test_charge_request(self, orchestrator, filled_cart, user, gateway):
        await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        (call,) = gateway.calls
        assert call["amount"] == 4000
        assert call["currency"] == "USD"
        assert call["payment_token"] == "tok_visa"
        assert call["receipt_email"] == "jane.doe@example.com"
        assert call["idempotency_key"] == charge_idempotency_key(filled_cart.id, "tok_visa", 4000)

    async def test_receipt_email(self, orchestrator, filled_cart, user, mailer):
        receipt = await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        (email,) = mailer.sent_emails
        assert email["to"] == "jane.doe@example.com"
        assert email["subject"] == "Order has been placed"
        assert receipt.order.number in email["body"]

    async def test_get_order(self, orchestrator, filled_cart, user):
        receipt = await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        order = await orchestrator.get_order(receipt.order.number, user_id=user.id)
        assert order == receipt.order

        with pytest.raises(Forbidden):
            await orchestrator.get_order(receipt.order.number, user_id="o" * 20)
        with pytest.raises(NotFound):
            await orchestrator.get_order("ABCDE-1")


class TestDegradedCheckout:
    async def test_email_failure_does_not_fail_checkout(self, orchestrator, filled_cart, user, store, mailer):
        mailer.configure(should_succeed=False, failure_reason="SMTP down")

        receipt = await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        assert receipt.notified is False
        assert receipt.order_persisted is True
        assert [error.message for error in receipt.operational_errors] == ["Could not email the user receipt"]

    async def test_order_persistence_failure_keeps_cart(
        self, orchestrator, filled_cart, user, store, mailer, monkeypatch
    ):
        async def collide(collection, key, document):
            raise AlreadyExists("taken", collection=collection, key=key)

        monkeypatch.setattr(store, "create", collide)

        receipt = await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        assert receipt.order_persisted is False
        assert receipt.cart_removed is False
        assert receipt.notified is True
        assert await store.list(CARTS) == {filled_cart.id}
        assert len(mailer.sent_emails) == 1

    async def test_cart_deletion_failure_is_logged_only(self, orchestrator, filled_cart, user, store, monkeypatch):
        original_delete = store.delete

        async def delete_elsewhere(collection, key):
            await original_delete(collection, key)
            await original_delete(collection, key)

        monkeypatch.setattr(store, "delete", delete_elsewhere)

        receipt = await orchestrator.checkout(user.id, filled_cart.id, "tok_visa")

        assert receipt.order_persisted is True
        assert receipt.cart_removed is False
        assert [error.message for error in receipt.operational_errors] == ["Could not delete the cart"]
