from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from premiumscan.domain.models import DuplicateAsset, MarketQuote, MatchedPair, UnmatchedAsset
from premiumscan.domain.money import Percentage
from premiumscan.logging_context import log_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    pairs: tuple[MatchedPair, ...]
    unmatched_reference: tuple[UnmatchedAsset, ...]
    unmatched_comparison: tuple[UnmatchedAsset, ...]
    duplicates: tuple[DuplicateAsset, ...]


def index_by_asset(
    quotes: Sequence[MarketQuote], *, exchange: str
) -> tuple[dict[str, MarketQuote], list[DuplicateAsset]]:
    """Index quotes by asset code, keeping the first quote seen for each code.

    Aggregated quotes arrive in descending volume order, so the most liquid market wins a
    collision. Every collision is reported; none is resolved silently.
    """

    indexed: dict[str, MarketQuote] = {}
    dropped: dict[str, list[str]] = {}
    for quote in quotes:
        if quote.asset in indexed:
            dropped.setdefault(quote.asset, []).append(quote.raw_symbol)
            continue
        indexed[quote.asset] = quote

    duplicates = [
        DuplicateAsset(
            asset=asset,
            exchange=exchange,
            kept_symbol=indexed[asset].raw_symbol,
            dropped_symbols=tuple(symbols),
        )
        for asset, symbols in dropped.items()
    ]
    for duplicate in duplicates:
        with log_scope(exchange=exchange, asset=duplicate.asset):
            logger.warning(
                "duplicate_asset_code",
                extra={
                    "extra": {
                        "kept_symbol": duplicate.kept_symbol,
                        "dropped_symbols": list(duplicate.dropped_symbols),
                    }
                },
            )
    return indexed, duplicates


def match(
    reference: Sequence[MarketQuote],
    comparison: Sequence[MarketQuote],
    *,
    reference_exchange: str = "reference",
    comparison_exchange: str = "comparison",
) -> MatchResult:
    """Inner-join two quote sets on asset code.

    The premium of each pair is ``comparison / reference * 100 - 100``: positive when the
    asset is more expensive on the comparison exchange.
    """

    reference_index, reference_dupes = index_by_asset(reference, exchange=reference_exchange)
    comparison_index, comparison_dupes = index_by_asset(comparison, exchange=comparison_exchange)

    pairs: list[MatchedPair] = []
    unmatched_reference: list[UnmatchedAsset] = []
    for asset, ref_quote in reference_index.items():
        cmp_quote = comparison_index.get(asset)
        if cmp_quote is None:
            unmatched_reference.append(UnmatchedAsset(asset=asset, exchange=reference_exchange))
            continue
        pairs.append(
            MatchedPair(
                asset=asset,
                reference_price=ref_quote.price,
                comparison_price=cmp_quote.price,
                premium=Percentage.premium(reference=ref_quote.price, comparison=cmp_quote.price),
                reference_volume=ref_quote.volume,
                comparison_volume=cmp_quote.volume,
            )
        )

    unmatched_comparison = [
        UnmatchedAsset(asset=asset, exchange=comparison_exchange)
        for asset in comparison_index
        if asset not in reference_index
    ]

    logger.info(
        "match_completed",
        extra={
            "extra": {
                "reference_exchange": reference_exchange,
                "comparison_exchange": comparison_exchange,
                "matched_count": len(pairs),
                "unmatched_reference_count": len(unmatched_reference),
                "unmatched_comparison_count": len(unmatched_comparison),
                "duplicate_count": len(reference_dupes) + len(comparison_dupes),
            }
        },
    )
    return MatchResult(
        pairs=tuple(pairs),
        unmatched_reference=tuple(unmatched_reference),
        unmatched_comparison=tuple(unmatched_comparison),
        duplicates=tuple(reference_dupes + comparison_dupes),
    )
