"""Order record created by a successful checkout.

Orders are immutable: item names and prices are snapshotted from the catalog
at checkout time, so later catalog changes never alter a historical order.
"""

from pydantic import BaseModel, ConfigDict

from catalogue.product.product import Catalog
from catalogue.shared.money import Price
from identity.user.user import User
from ordering.cart.cart import Cart, PaymentTotals
from shared.errors import InvalidProduct
from shared.ids import ms_to_datetime, random_string

ORDER_CODE_LENGTH = 5


def order_number(now: int) -> str:
    """Human-readable order number: short random code plus epoch milliseconds.

    Not checked for uniqueness here; the exclusive create in the store is the
    backstop.
    """
    return f"{random_string(ORDER_CODE_LENGTH).upper()}-{now}"


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: Price
    quantity: int


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: str
    user_id: str
    customer: str
    email: str
    charge_id: str
    items: tuple[OrderItem, ...]
    totals: PaymentTotals
    placed_at: str

    def to_document(self) -> dict:
        return self.model_dump(mode="json")

    @classmethod
    def place(cls, cart: Cart, user: User, items: tuple[OrderItem, ...], charge_id: str, now: int) -> "Order":
        return cls(
            number=order_number(now),
            user_id=user.id,
            customer=user.name,
            email=user.email,
            charge_id=charge_id,
            items=items,
            totals=cart.payment.model_copy(),
            placed_at=ms_to_datetime(now).isoformat(),
        )


def snapshot_items(cart: Cart, catalog: Catalog) -> tuple[OrderItem, ...]:
    """Current catalog name and price for every line item of the cart."""
    items = []
    for line in cart.items:
        product = catalog.get(line.product_id)
        if product is None:
            raise InvalidProduct(f"Product {line.product_id} is not in the catalog", product_id=line.product_id)
        items.append(OrderItem(id=product.id, name=product.name, price=product.price, quantity=line.quantity))
    return tuple(items)
