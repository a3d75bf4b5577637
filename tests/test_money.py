from __future__ import annotations

from decimal import Decimal

import pytest

from premiumscan.domain.money import ConversionRate, FiatAmount, Percentage, group_thousands


def test_premium_examples() -> None:
    up = Percentage.premium(reference=FiatAmount(Decimal("100")), comparison=FiatAmount(Decimal("110")))
    down = Percentage.premium(reference=FiatAmount(Decimal("100")), comparison=FiatAmount(Decimal("90")))

    assert up.value == Decimal("10")
    assert str(up) == "10.00 %"
    assert down.value == Decimal("-10")
    assert str(down) == "-10.00 %"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("1349750"), "1 349 750 €"),
        (Decimal("29843.730000"), "29 843.73 €"),
        (Decimal("0.075346"), "0.075346 €"),
        (Decimal("999"), "999 €"),
        (Decimal("-1234.50"), "-1 234.5 €"),
        (Decimal("0.000"), "0 €"),
    ],
)
def test_fiat_amount_renders_space_separated_thousands(value: Decimal, expected: str) -> None:
    assert str(FiatAmount(value)) == expected


def test_group_thousands_keeps_fraction() -> None:
    assert group_thousands(Decimal("1234567.891")) == "1 234 567.891"


def test_fiat_amount_rejects_float() -> None:
    with pytest.raises(TypeError):
        FiatAmount(1.5)  # type: ignore[arg-type]


def test_fiat_amount_ordering_is_only_defined_within_type() -> None:
    assert FiatAmount(Decimal("1")) < FiatAmount(Decimal("2"))
    with pytest.raises(TypeError):
        assert FiatAmount(Decimal("1")) < Decimal("2")  # type: ignore[operator]
    with pytest.raises(TypeError):
        assert FiatAmount(Decimal("1")) < Percentage(Decimal("2"))  # type: ignore[operator]


def test_fiat_amount_multiplication() -> None:
    price = FiatAmount(Decimal("26995"))

    assert price * Decimal("50") == FiatAmount(Decimal("1349750"))
    assert Decimal("2") * FiatAmount(Decimal("3")) == FiatAmount(Decimal("6"))
    assert FiatAmount(Decimal("2")) * FiatAmount(Decimal("3")) == FiatAmount(Decimal("6"))
    with pytest.raises(TypeError):
        price * ConversionRate(Decimal("0.5"))  # type: ignore[operator]
    with pytest.raises(TypeError):
        price * 1.5  # type: ignore[operator]



def test_conversion_rate_converts_quote_amounts_to_fiat() -> None:
    rate = ConversionRate(Decimal("0.000746"))

    assert rate.convert(Decimal("40005000")) == FiatAmount(Decimal("29843.730000"))


@pytest.mark.parametrize("value", [Decimal("0"), Decimal("-1"), Decimal("NaN"), Decimal("Infinity")])
def test_conversion_rate_must_be_finite_and_positive(value: Decimal) -> None:
    with pytest.raises(ValueError):
        ConversionRate(value)


def test_conversion_rate_requires_decimal() -> None:
    with pytest.raises(TypeError):
        ConversionRate(0.5)  # type: ignore[arg-type]

@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("298437.3"), Decimal("298437")),
        (Decimal("2.5"), Decimal("3")),
        (Decimal("1119186.5"), Decimal("1119187")),
        (Decimal("0.49"), Decimal("0")),
    ],
)
def test_rounded_uses_half_up(value: Decimal, expected: Decimal) -> None:
    assert FiatAmount(value).rounded() == FiatAmount(expected)


def test_percentage_nan_detection() -> None:
    assert Percentage(Decimal("NaN")).is_nan() is True
    assert Percentage(Decimal("1.5")).is_nan() is False
