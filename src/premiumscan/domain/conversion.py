from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from premiumscan.domain.exchanges import VolumeUnit
from premiumscan.domain.models import RawTicker
from premiumscan.domain.money import ConversionRate, FiatAmount

_TWO = Decimal("2")


@dataclass(frozen=True)
class FiatConversion:
    price: FiatAmount
    volume: FiatAmount


def mid_price(ticker: RawTicker) -> Decimal:
    return (ticker.best_bid + ticker.best_ask) / _TWO


def to_fiat_price(ticker: RawTicker, rate: ConversionRate) -> FiatAmount:
    """Average bid/ask first, then convert the quote currency with ``rate``."""

    return rate.convert(mid_price(ticker))


def to_fiat_volume(
    ticker: RawTicker,
    *,
    price: FiatAmount,
    rate: ConversionRate,
    volume_unit: VolumeUnit,
) -> FiatAmount:
    if volume_unit is VolumeUnit.BASE:
        return (price * ticker.volume).rounded()
    # Already denominated in the quote currency: only the currency changes.
    return rate.convert(ticker.volume).rounded()


def to_fiat(
    ticker: RawTicker, rate: ConversionRate, *, volume_unit: VolumeUnit
) -> FiatConversion:
    price = to_fiat_price(ticker, rate)
    volume = to_fiat_volume(ticker, price=price, rate=rate, volume_unit=volume_unit)
    return FiatConversion(price=price, volume=volume)
