"""Exact fixed-point money value used by every settlement calculation"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from functools import total_ordering
from typing import Union

from shortlet_settlement.domain.exceptions import CurrencyMismatchError, InvalidArgumentError

DEFAULT_CURRENCY = "NGN"
MINOR_UNIT = Decimal("0.01")

Rate = Union[Decimal, int, str]


def _to_decimal(value: Union[Decimal, int, str]) -> Decimal:
    # bool is an int subclass and float is inexact; neither is a valid amount
    if isinstance(value, (bool, float)):
        raise InvalidArgumentError(f"Money amounts must be Decimal, int or str, got {type(value).__name__}")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(value)
    except (ArithmeticError, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid money amount: {value!r}") from e


@total_ordering
@dataclass(frozen=True)
class Money:
    """
    Decimal amount tagged with a currency.

    Arithmetic is exact: nothing is rounded until quantize() is called at the
    persistence or presentation boundary.

    Example:
        Money(100000) * Decimal("0.02") -> Money(2000.00, "NGN")
        Money(100, "NGN") + Money(100, "USD") -> CurrencyMismatchError
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount))
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(Decimal("0"), currency)

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise InvalidArgumentError(f"Expected Money, got {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(f"Cannot combine {self.currency} with {other.currency}")

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, rate: Rate) -> "Money":
        return Money(self.amount * _to_decimal(rate), self.currency)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def is_negative(self) -> bool:
        return self.amount < 0

    def quantize(self) -> "Money":
        """Round half-up to the currency minor unit (2 places)"""
        return Money(self.amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP), self.currency)

    def __str__(self) -> str:
        return f"{self.currency} {self.quantize().amount:,}"
