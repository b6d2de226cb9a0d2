"""Shopping cart record and totals computation.

A cart holds at most one line item per product. Its payment totals are
always derived from scratch from the current line items and the current
catalog prices; they are never adjusted incrementally.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from catalogue.product.product import Catalog
from catalogue.shared.money import round_cents, to_decimal
from shared.errors import InvalidProduct

DEFAULT_CURRENCY = "USD"


class LineItem(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class PaymentTotals(BaseModel):
    total: float = 0
    tax: float = 0
    currency: str = DEFAULT_CURRENCY


def compute_totals(items: list[LineItem], catalog: Catalog, currency: str = DEFAULT_CURRENCY) -> PaymentTotals:
    """Sum of unit price x quantity and unit tax x quantity over all items."""
    total = Decimal("0")
    tax = Decimal("0")
    for item in items:
        product = catalog.get(item.product_id)
        if product is None:
            raise InvalidProduct(f"Product {item.product_id} is not in the catalog", product_id=item.product_id)
        total += to_decimal(product.price.total) * item.quantity
        tax += to_decimal(product.price.tax) * item.quantity
    return PaymentTotals(total=round_cents(total), tax=round_cents(tax), currency=currency)


class Cart(BaseModel):
    id: str
    user_id: str
    items: list[LineItem] = Field(default_factory=list)
    payment: PaymentTotals = Field(default_factory=PaymentTotals)
    expires: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_for(self, product_id: int) -> LineItem | None:
        return next((item for item in self.items if item.product_id == product_id), None)

    def merge_item(self, product_id: int, quantity: int, catalog: Catalog) -> None:
        """Add ``quantity`` of a product (incrementing an existing line) and recompute totals."""
        if quantity <= 0:
            raise InvalidProduct("Quantity must be greater than zero", product_id=product_id, quantity=quantity)

        product = catalog.get(product_id)
        if product is None:
            raise InvalidProduct(f"Product {product_id} is not in the catalog", product_id=product_id)
        if product.price.currency != self.payment.currency:
            raise InvalidProduct(
                f"Product {product_id} is priced in {product.price.currency}, cart uses {self.payment.currency}",
                product_id=product_id,
            )

        existing = self.item_for(product_id)
        if existing:
            existing.quantity += quantity
        else:
            self.items.append(LineItem(product_id=product_id, quantity=quantity))

        self.payment = compute_totals(self.items, catalog, self.payment.currency)

    def to_document(self) -> dict:
        return self.model_dump(mode="json")
