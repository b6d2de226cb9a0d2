"""Price value object and money arithmetic helpers.

Amounts are stored as floats rounded to cents (that is what ends up in the
JSON documents); all arithmetic goes through ``Decimal``.
"""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CENT = Decimal("0.01")

VALID_CURRENCIES = frozenset({"USD", "EUR", "GBP", "CAD", "AUD"})


def to_decimal(amount) -> Decimal:
    return Decimal(str(amount))


def round_cents(amount: Decimal) -> float:
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (e.g. 40.5 USD) to minor units (4050)."""
    return int((to_decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class Price(BaseModel):
    """Unit price: base amount, tax amount and ISO currency code."""

    model_config = ConfigDict(frozen=True)

    total: float = Field(ge=0)
    tax: float = Field(ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def currency_must_be_known(cls, value: str) -> str:
        value = value.upper()
        if value not in VALID_CURRENCIES:
            raise ValueError(f"Unsupported currency: {value}")
        return value
