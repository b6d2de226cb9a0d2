"""Static product catalog.

The catalog is built once at startup and handed by reference to the cart
engine and the checkout orchestrator. It is never persisted through the
document store and never mutated.
"""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from catalogue.shared.money import Price


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: Price


DEFAULT_PRODUCTS: tuple[dict, ...] = (
    {"id": 298740, "name": "Regular Pizza", "price": {"total": 20, "tax": 1.76, "currency": "USD"}},
    {"id": 298741, "name": "Margherita Pizza", "price": {"total": 22, "tax": 1.94, "currency": "USD"}},
    {"id": 298742, "name": "Quattro Formaggi Pizza", "price": {"total": 24.5, "tax": 2.16, "currency": "USD"}},
    {"id": 298743, "name": "Quattro Stagioni Pizza", "price": {"total": 24.5, "tax": 2.16, "currency": "USD"}},
    {"id": 298744, "name": "Slice and Co. Special Pizza", "price": {"total": 24.5, "tax": 2.16, "currency": "USD"}},
    {"id": 298745, "name": "Hawaiian Pizza", "price": {"total": 24.5, "tax": 2.16, "currency": "USD"}},
    {"id": 298746, "name": "Vegetarian Pizza", "price": {"total": 24.5, "tax": 2.16, "currency": "USD"}},
    {"id": 298747, "name": "Meat Lover's Pizza", "price": {"total": 24.5, "tax": 2.16, "currency": "USD"}},
)


class Catalog(Mapping[int, Product]):
    """Read-only product table keyed by product id."""

    def __init__(self, products: Iterable[Product]) -> None:
        table: dict[int, Product] = {}
        for product in products:
            if product.id in table:
                raise ValueError(f"Duplicate product id in catalog: {product.id}")
            table[product.id] = product
        self._products = MappingProxyType(table)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "Catalog":
        return cls(Product.model_validate(record) for record in records)

    @classmethod
    def default(cls) -> "Catalog":
        """The seeded pizza menu."""
        return cls.from_records(DEFAULT_PRODUCTS)

    def __getitem__(self, product_id: int) -> Product:
        return self._products[product_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def products(self) -> list[Product]:
        return list(self._products.values())
