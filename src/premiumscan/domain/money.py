from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

_WHOLE_UNIT = Decimal("1")
_HUNDRED = Decimal("100")

FIAT_CURRENCY = "EUR"
FIAT_SUFFIX = "€"


def _fmt_decimal(value: Decimal) -> str:
    normalized = format(value, "f")
    if "." in normalized:
        normalized = normalized.rstrip("0").rstrip(".")
    if normalized in ("", "-0"):
        return "0"
    return normalized


def group_thousands(value: Decimal) -> str:
    """Render a decimal with space separated thousands (``1 349 750.5``)."""

    text = _fmt_decimal(value)
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    int_part, dot, frac_part = text.partition(".")
    grouped = f"{int(int_part):,}".replace(",", " ")
    return f"{sign}{grouped}{dot}{frac_part}"


@dataclass(frozen=True, order=True)
class FiatAmount:
    """A decimal amount in the common fiat currency.

    Ordering is only defined between two ``FiatAmount`` values; comparing with a bare
    number raises ``TypeError``. Multiplication is defined with another ``FiatAmount`` and,
    as the one unitless exception, with a bare ``Decimal`` quantity (a base-asset amount).
    Currency conversion goes through ``ConversionRate``, never a bare multiplier.
    """

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise TypeError(f"FiatAmount requires Decimal, got {type(self.value).__name__}")

    def __mul__(self, other: object) -> FiatAmount:
        if isinstance(other, FiatAmount):
            return FiatAmount(self.value * other.value)
        if isinstance(other, Decimal):
            return FiatAmount(self.value * other)
        return NotImplemented

    __rmul__ = __mul__

    def rounded(self) -> FiatAmount:
        return FiatAmount(self.value.quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP))

    def is_positive(self) -> bool:
        return self.value > 0

    def __str__(self) -> str:
        return f"{group_thousands(self.value)} {FIAT_SUFFIX}"


@dataclass(frozen=True)
class ConversionRate:
    """Fiat value of one unit of an exchange's quote currency."""

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise TypeError(f"ConversionRate requires Decimal, got {type(self.value).__name__}")
        if not self.value.is_finite() or self.value <= 0:
            raise ValueError(f"conversion rate must be finite and > 0, got {self.value}")

    def convert(self, amount: Decimal) -> FiatAmount:
        return FiatAmount(amount * self.value)


UNIT_RATE = ConversionRate(Decimal("1"))


@dataclass(frozen=True, order=True)
class Percentage:
    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise TypeError(f"Percentage requires Decimal, got {type(self.value).__name__}")

    @classmethod
    def premium(cls, *, reference: FiatAmount, comparison: FiatAmount) -> Percentage:
        """Relative price of ``comparison`` over ``reference`` (``110`` vs ``100`` is ``10``)."""

        return cls(comparison.value / reference.value * _HUNDRED - _HUNDRED)

    def is_nan(self) -> bool:
        return self.value.is_nan()

    def __str__(self) -> str:
        return f"{self.value:.2f} %"
