"""
models/money.py
---------------
Exact-decimal value types for money and allocation percentages.
Both are immutable and travel to and from the database as their
canonical decimal string (e.g. "8.00", "0.50").
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Union

_CENTS = Decimal("0.01")


def _to_decimal(value: Union[str, int, Decimal], kind: str) -> Decimal:
    if isinstance(value, float):
        raise TypeError(f"{kind} must not be built from a float: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a valid {kind}: {value!r}") from e
    if not number.is_finite():
        raise ValueError(f"Not a valid {kind}: {value!r}")
    return number


@dataclass(frozen=True, order=True)
class Percentage:
    """
    A fraction between 0 and 1 held at two decimal places.

    Attributes:
        value: The fraction, e.g. Decimal("0.50") for 50%.
    """
    value: Decimal

    def __post_init__(self) -> None:
        value = _to_decimal(self.value, "percentage").quantize(_CENTS, ROUND_HALF_EVEN)
        if value < 0 or value > 1:
            raise ValueError(f"Percentage must be between 0 and 1, got {value}")
        object.__setattr__(self, "value", value)

    @classmethod
    def value_of(cls, text: str) -> Percentage:
        """Parse "50%" or "0.5" style strings."""
        text = text.strip()
        if text.endswith("%"):
            return cls(_to_decimal(text[:-1], "percentage") / 100)
        return cls(_to_decimal(text, "percentage"))

    @classmethod
    def zero(cls) -> Percentage:
        return cls(Decimal("0"))

    @classmethod
    def one(cls) -> Percentage:
        return cls(Decimal("1"))

    def as_decimal(self) -> Decimal:
        return self.value

    def __add__(self, other: Percentage) -> Percentage:
        if not isinstance(other, Percentage):
            return NotImplemented
        return Percentage(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class MonetaryAmount:
    """
    An amount of money held at two decimal places (half-even rounding).

    Attributes:
        value: The amount as an exact Decimal.
    """
    value: Decimal

    def __post_init__(self) -> None:
        value = _to_decimal(self.value, "monetary amount").quantize(_CENTS, ROUND_HALF_EVEN)
        object.__setattr__(self, "value", value)

    @classmethod
    def value_of(cls, text: str) -> MonetaryAmount:
        """Parse a decimal string, with or without a leading "$"."""
        return cls(_to_decimal(text.strip().lstrip("$"), "monetary amount"))

    @classmethod
    def zero(cls) -> MonetaryAmount:
        return cls(Decimal("0"))

    def as_decimal(self) -> Decimal:
        return self.value

    def __add__(self, other: MonetaryAmount) -> MonetaryAmount:
        if not isinstance(other, MonetaryAmount):
            return NotImplemented
        return MonetaryAmount(self.value + other.value)

    def __sub__(self, other: MonetaryAmount) -> MonetaryAmount:
        if not isinstance(other, MonetaryAmount):
            return NotImplemented
        return MonetaryAmount(self.value - other.value)

    def __mul__(self, other: Union[Percentage, int, Decimal]) -> MonetaryAmount:
        if isinstance(other, Percentage):
            return MonetaryAmount(self.value * other.value)
        if isinstance(other, (int, Decimal)):
            return MonetaryAmount(self.value * other)
        return NotImplemented

    __rmul__ = __mul__

    def __str__(self) -> str:
        return str(self.value)
