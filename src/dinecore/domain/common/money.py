from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

LOCAL_CURRENCY = "PHP"


@dataclass(frozen=True)
class Money:
    amount_cents: int
    currency: str = LOCAL_CURRENCY

    def __post_init__(self) -> None:
        if self.amount_cents < 0:
            raise ValueError("amount_cents must be >= 0")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValueError("currency must be a 3-letter uppercase code")

    @classmethod
    def of(cls, amount: int | float | str | Decimal, currency: str = LOCAL_CURRENCY) -> Money:
        """Build from major units (pesos), rounding half-up to the cent."""
        cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(amount_cents=int(cents), currency=currency)

    @classmethod
    def zero(cls, currency: str = LOCAL_CURRENCY) -> Money:
        return cls(amount_cents=0, currency=currency)

    @property
    def amount(self) -> Decimal:
        return Decimal(self.amount_cents) / 100

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if other.currency != self.currency:
            raise ValueError("cannot add money with different currencies")
        return Money(amount_cents=self.amount_cents + other.amount_cents, currency=self.currency)

    def times(self, quantity: int) -> Money:
        return Money(amount_cents=self.amount_cents * quantity, currency=self.currency)
