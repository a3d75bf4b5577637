from __future__ import annotations

from collections.abc import Iterable

from premiumscan.domain.models import MatchedPair
from premiumscan.errors import RankingError


def rank(pairs: Iterable[MatchedPair]) -> list[MatchedPair]:
    """Sort pairs by signed premium, highest first; ties keep their input order."""

    items = list(pairs)
    for pair in items:
        if pair.premium.is_nan():
            raise RankingError(f"premium is NaN for {pair.asset}")
    return sorted(items, key=lambda pair: pair.premium.value, reverse=True)
