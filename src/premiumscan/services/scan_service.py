from __future__ import annotations

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from premiumscan.adapters.ticker_source import TickerSource
from premiumscan.domain.exchanges import ExchangeProfile, get_profile
from premiumscan.domain.models import DuplicateAsset, MatchedPair, UnmatchedAsset
from premiumscan.domain.money import FIAT_CURRENCY, UNIT_RATE, ConversionRate, FiatAmount
from premiumscan.logging_context import log_scope
from premiumscan.services.aggregation_service import AggregationResult, AggregationService
from premiumscan.services.matching_service import match
from premiumscan.services.ranking_service import rank

logger = logging.getLogger(__name__)

DEFAULT_KRW_TO_EUR_RATE = Decimal("0.000746")
DEFAULT_MIN_VOLUME_EUR = Decimal("3000")


@dataclass(frozen=True)
class ScanConfig:
    krw_to_eur_rate: Decimal = DEFAULT_KRW_TO_EUR_RATE
    min_volume: FiatAmount = field(default_factory=lambda: FiatAmount(DEFAULT_MIN_VOLUME_EUR))
    parallel_fetch: bool = False

    def rate_for(self, profile: ExchangeProfile) -> ConversionRate:
        quote = profile.quote_currency.upper()
        if quote == FIAT_CURRENCY:
            return UNIT_RATE
        if quote == "KRW":
            return ConversionRate(self.krw_to_eur_rate)
        raise ValueError(f"No conversion rate from {quote} to {FIAT_CURRENCY}")


@dataclass(frozen=True)
class ScanReport:
    run_id: str
    generated_at: datetime
    reference_exchange: str
    comparison_exchange: str
    pairs: tuple[MatchedPair, ...]
    unmatched_reference: tuple[UnmatchedAsset, ...]
    unmatched_comparison: tuple[UnmatchedAsset, ...]
    duplicates: tuple[DuplicateAsset, ...]
    quote_counts: dict[str, int]


class ScanService:
    """One point-in-time scan: fetch both exchanges, aggregate, match and rank."""

    def __init__(
        self,
        *,
        reference_source: TickerSource,
        comparison_source: TickerSource,
        config: ScanConfig | None = None,
    ) -> None:
        self.reference_source = reference_source
        self.comparison_source = comparison_source
        self.config = config or ScanConfig()
        self._aggregator = AggregationService(min_volume=self.config.min_volume)

    def _collect(self, source: TickerSource) -> AggregationResult:
        profile = get_profile(source.exchange_id)
        with log_scope(exchange=profile.exchange_id):
            raw_tickers = source.fetch_tickers()
            return self._aggregator.aggregate(
                raw_tickers,
                profile=profile,
                rate=self.config.rate_for(profile),
            )

    def _collect_both(self) -> tuple[AggregationResult, AggregationResult]:
        if not self.config.parallel_fetch:
            return self._collect(self.reference_source), self._collect(self.comparison_source)

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="ticker-fetch") as pool:
            reference_future = pool.submit(
                contextvars.copy_context().run, self._collect, self.reference_source
            )
            comparison_future = pool.submit(
                contextvars.copy_context().run, self._collect, self.comparison_source
            )
            return reference_future.result(), comparison_future.result()

    def run(self, *, run_id: str | None = None, now: datetime | None = None) -> ScanReport:
        resolved_run_id = run_id or uuid4().hex
        with log_scope(run_id=resolved_run_id):
            reference, comparison = self._collect_both()
            result = match(
                reference.quotes,
                comparison.quotes,
                reference_exchange=reference.exchange,
                comparison_exchange=comparison.exchange,
            )
            ranked = rank(result.pairs)
            logger.info(
                "scan_completed",
                extra={
                    "extra": {
                        "pairs": len(ranked),
                        "top_asset": ranked[0].asset if ranked else None,
                        "top_premium": str(ranked[0].premium.value) if ranked else None,
                    }
                },
            )

        return ScanReport(
            run_id=resolved_run_id,
            generated_at=now or datetime.now(UTC),
            reference_exchange=reference.exchange,
            comparison_exchange=comparison.exchange,
            pairs=tuple(ranked),
            unmatched_reference=result.unmatched_reference,
            unmatched_comparison=result.unmatched_comparison,
            duplicates=result.duplicates,
            quote_counts={
                reference.exchange: len(reference.quotes),
                comparison.exchange: len(comparison.quotes),
            },
        )
