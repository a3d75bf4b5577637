from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from premiumscan.domain.conversion import to_fiat
from premiumscan.domain.exchanges import ExchangeProfile
from premiumscan.domain.models import MarketQuote, RawTicker
from premiumscan.domain.money import ConversionRate, FiatAmount
from premiumscan.domain.symbols import canonicalize
from premiumscan.logging_context import log_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregationResult:
    exchange: str
    quotes: tuple[MarketQuote, ...]
    dropped: Mapping[str, int]


def _volume_order_key(quote: MarketQuote) -> tuple[Decimal, str, str]:
    # Volume desc, then asset and raw symbol asc so equal volumes never depend on input order.
    return (-quote.volume.value, quote.asset, quote.raw_symbol)


class AggregationService:
    def __init__(self, *, min_volume: FiatAmount) -> None:
        if min_volume.value < 0:
            raise ValueError("min_volume must be >= 0")
        self._min_volume = min_volume

    def aggregate(
        self,
        raw_tickers: Mapping[str, RawTicker],
        *,
        profile: ExchangeProfile,
        rate: ConversionRate,
    ) -> AggregationResult:
        kept: list[MarketQuote] = []
        dropped: Counter[str] = Counter()
        for raw_symbol in sorted(raw_tickers):
            ticker = raw_tickers[raw_symbol]
            asset = canonicalize(profile, raw_symbol)
            if asset is None:
                dropped["not_applicable"] += 1
                continue

            converted = to_fiat(ticker, rate, volume_unit=profile.volume_unit)
            reason: str | None = None
            if not converted.price.is_positive():
                reason = "non_positive_price"
            elif not converted.volume > self._min_volume:
                reason = "illiquid"
            if reason is not None:
                dropped[reason] += 1
                with log_scope(asset=asset):
                    logger.debug(
                        "quote_dropped",
                        extra={
                            "extra": {
                                "reason": reason,
                                "raw_symbol": raw_symbol,
                                "volume": str(converted.volume.value),
                            }
                        },
                    )
                continue

            kept.append(
                MarketQuote(
                    asset=asset,
                    price=converted.price,
                    volume=converted.volume,
                    raw_symbol=raw_symbol,
                )
            )

        kept.sort(key=_volume_order_key)
        logger.info(
            "aggregation_completed",
            extra={
                "extra": {
                    "exchange": profile.exchange_id,
                    "raw_count": len(raw_tickers),
                    "kept_count": len(kept),
                    "dropped": dict(dropped),
                    "min_volume": str(self._min_volume.value),
                }
            },
        )
        return AggregationResult(
            exchange=profile.exchange_id,
            quotes=tuple(kept),
            dropped=dict(dropped),
        )


def aggregate(
    raw_tickers: Mapping[str, RawTicker],
    *,
    profile: ExchangeProfile,
    rate: ConversionRate,
    min_volume: FiatAmount,
) -> list[MarketQuote]:
    service = AggregationService(min_volume=min_volume)
    return list(service.aggregate(raw_tickers, profile=profile, rate=rate).quotes)
