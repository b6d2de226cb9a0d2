"""Cart engine: cart creation, lookup and line-item merging against the store."""

from collections.abc import Callable

import structlog
from pydantic import ValidationError as ModelValidationError

from catalogue.product.product import Catalog
from ordering.cart.cart import Cart
from shared.errors import CartNotFound, Forbidden, NotFound
from shared.ids import new_id, now_ms
from shared.store import CARTS, DocumentStore

logger = structlog.get_logger(__name__)

CART_LIFETIME_MS = 24 * 60 * 60 * 1000


class CartEngine:
    def __init__(
        self,
        store: DocumentStore,
        catalog: Catalog,
        clock: Callable[[], int] = now_ms,
        lifetime_ms: int = CART_LIFETIME_MS,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.lifetime_ms = lifetime_ms

    async def create_cart(self, user_id: str) -> Cart:
        cart = Cart(id=new_id(), user_id=user_id, expires=self.clock() + self.lifetime_ms)
        await self.store.create(CARTS, cart.id, cart.to_document())
        logger.debug("Cart created", cart_id=cart.id, user_id=user_id)
        return cart

    async def get_cart(self, cart_id: str, user_id: str | None = None) -> Cart:
        """Load a cart; when ``user_id`` is given it must own the cart."""
        try:
            document = await self.store.read(CARTS, cart_id)
        except NotFound:
            raise CartNotFound(f"Cart {cart_id!r} does not exist", cart_id=cart_id) from None

        try:
            cart = Cart.model_validate(document)
        except ModelValidationError:
            raise CartNotFound(f"Cart {cart_id!r} has no readable record", cart_id=cart_id) from None

        if user_id is not None and cart.user_id != user_id:
            raise Forbidden("Cart belongs to another user", cart_id=cart_id)
        return cart

    async def add_or_merge_item(self, cart_id: str, product_id: int, quantity: int, user_id: str | None = None) -> Cart:
        """Merge a product into the cart and persist the recomputed totals.

        The read-modify-write runs under the store's per-key lock, so merges
        on one cart within this process never overwrite each other.
        """
        async with self.store.lock(CARTS, cart_id):
            cart = await self.get_cart(cart_id, user_id=user_id)
            cart.merge_item(product_id, quantity, self.catalog)
            cart.expires = self.clock() + self.lifetime_ms
            try:
                await self.store.update(CARTS, cart_id, cart.to_document())
            except NotFound:
                # Removed by checkout or garbage collection since the read
                raise CartNotFound(f"Cart {cart_id!r} does not exist", cart_id=cart_id) from None

        logger.debug(
            "Cart item merged",
            cart_id=cart_id,
            product_id=product_id,
            quantity=quantity,
            total=cart.payment.total,
        )
        return cart
