"""Checkout orchestrator: turns a non-empty cart into an order via an external charge.

Flow (linear, no rollback):
    1. Validate: the user exists, the cart exists, belongs to the user and
       has at least one line item. Failures stop here with no side effects.
    2. Charge: the cart total in minor units goes to the payment gateway.
       A failed charge raises PaymentFailed; nothing else happens.
    3. Materialize: the order is built from a catalog snapshot and persisted.
    4. Cleanup: the cart is deleted, but only when the order was persisted.
    5. Notify: a receipt email is sent to the user.

Steps 1-4 hold the per-cart lock the cart engine merges under, so no item
can be merged between the snapshot and the removal of the cart.

Once the charge has cleared, checkout reports success to the caller no matter
how steps 3-5 turn out. Their failures are logged as operational errors and
never retried, since a blind retry risks charging the customer twice.
"""

import asyncio
import hashlib
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog
from pydantic import ValidationError as ModelValidationError

from catalogue.product.product import Catalog
from catalogue.shared.money import to_minor_units
from identity.user.directory import UserDirectory
from notifications.channel.email_port import EmailPort
from notifications.templates import ORDER_RECEIPT, get_template
from ordering.cart.engine import CartEngine
from ordering.order.order import Order, snapshot_items
from payments.gateway.port import PaymentGateway
from shared.errors import AlreadyExists, EmptyCart, Forbidden, NotFound, OperationalError, PaymentFailed
from shared.ids import now_ms
from shared.store import CARTS, ORDERS, DocumentStore

logger = structlog.get_logger(__name__)


def charge_idempotency_key(cart_id: str, payment_token: str, amount: int) -> str:
    """Key shared by repeats of one charge attempt.

    A different card or a changed cart total is a new attempt with a new key,
    so a declined cart can be paid later.
    """
    return hashlib.sha256(f"{cart_id}:{payment_token}:{amount}".encode()).hexdigest()


@dataclass(frozen=True)
class CheckoutReceipt:
    """Outcome of a checkout whose charge cleared."""

    order: Order
    order_persisted: bool
    cart_removed: bool
    notified: bool
    operational_errors: list[OperationalError] = field(default_factory=list)


class CheckoutOrchestrator:
    def __init__(
        self,
        store: DocumentStore,
        catalog: Catalog,
        gateway: PaymentGateway,
        mailer: EmailPort,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.gateway = gateway
        self.mailer = mailer
        self.clock = clock
        self.users = UserDirectory(store)
        self.carts = CartEngine(store, catalog, clock=clock)

    async def checkout(self, user_id: str, cart_id: str, payment_token: str) -> CheckoutReceipt:
        user = await self.users.get(user_id)

        # Merges into this cart wait until it has been charged and removed
        async with self.store.lock(CARTS, cart_id):
            cart = await self.carts.get_cart(cart_id, user_id=user_id)
            if cart.is_empty:
                raise EmptyCart("Cart is empty", cart_id=cart_id)
            items = snapshot_items(cart, self.catalog)

            amount = to_minor_units(cart.payment.total)
            result = await asyncio.to_thread(
                self.gateway.create_charge,
                amount=amount,
                currency=cart.payment.currency,
                payment_token=payment_token,
                receipt_email=user.email,
                idempotency_key=charge_idempotency_key(cart.id, payment_token, amount),
            )
            if not result.success:
                logger.info("Charge declined", cart_id=cart_id, user_id=user_id, reason=result.failure_reason)
                raise PaymentFailed(
                    "Could not process the charge, please review your payment information",
                    cart_id=cart_id,
                    reason=result.failure_reason,
                )

            order = Order.place(cart, user, items, charge_id=result.charge_id, now=self.clock())
            document = order.to_document()
            errors: list[OperationalError] = []

            order_persisted = await self._persist_order(order, document, errors)
            cart_removed = False
            if order_persisted:
                cart_removed = await self._remove_cart(cart_id, document, errors)

        notified = await self._send_receipt(user.email, document, errors)

        logger.info("An order has been placed", order=document)
        return CheckoutReceipt(
            order=order,
            order_persisted=order_persisted,
            cart_removed=cart_removed,
            notified=notified,
            operational_errors=errors,
        )

    async def _persist_order(self, order: Order, document: dict, errors: list) -> bool:
        try:
            await self.store.create(ORDERS, order.number, document)
        except (AlreadyExists, OSError) as exc:
            errors.append(_operational("Could not save the order", document, exc))
            return False
        return True

    async def _remove_cart(self, cart_id: str, document: dict, errors: list) -> bool:
        try:
            await self.store.delete(CARTS, cart_id)
        except (NotFound, OSError) as exc:
            errors.append(_operational("Could not delete the cart", document, exc, cart_id=cart_id))
            return False
        return True

    async def _send_receipt(self, email: str, document: dict, errors: list) -> bool:
        message = get_template(ORDER_RECEIPT).render(document)
        try:
            outcome = await asyncio.to_thread(self.mailer.send, email, message["subject"], message["body"])
        except OSError as exc:
            outcome = {"status": "failed", "error": str(exc)}

        if outcome.get("status") != "sent":
            errors.append(
                _operational("Could not email the user receipt", document, outcome.get("error", "unknown error"))
            )
            return False
        return True

    async def get_order(self, number: str, user_id: str | None = None) -> Order:
        document = await self.store.read(ORDERS, number)
        try:
            order = Order.model_validate(document)
        except ModelValidationError:
            raise NotFound(f"Order {number!r} has no readable record", number=number) from None
        if user_id is not None and order.user_id != user_id:
            raise Forbidden("Order belongs to another user", number=number)
        return order


def _operational(message: str, order: dict, cause, **context) -> OperationalError:
    error = OperationalError(message, order=order, cause=str(cause), **context)
    logger.error(message, order=order, cause=str(cause), **context)
    return error
