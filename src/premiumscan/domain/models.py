from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from premiumscan.domain.money import FiatAmount, Percentage


@dataclass(frozen=True)
class RawTicker:
    raw_symbol: str
    best_bid: Decimal
    best_ask: Decimal
    volume: Decimal


@dataclass(frozen=True)
class MarketQuote:
    asset: str
    price: FiatAmount
    volume: FiatAmount
    raw_symbol: str = ""

    def __post_init__(self) -> None:
        if self.volume.value < 0:
            raise ValueError(f"MarketQuote volume must be >= 0 for {self.asset}")


@dataclass(frozen=True)
class MatchedPair:
    asset: str
    reference_price: FiatAmount
    comparison_price: FiatAmount
    premium: Percentage
    reference_volume: FiatAmount
    comparison_volume: FiatAmount


@dataclass(frozen=True)
class UnmatchedAsset:
    asset: str
    exchange: str


@dataclass(frozen=True)
class DuplicateAsset:
    """A canonical code that more than one raw symbol of one exchange resolved to."""

    asset: str
    exchange: str
    kept_symbol: str
    dropped_symbols: tuple[str, ...]
