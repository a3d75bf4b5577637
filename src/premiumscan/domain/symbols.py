from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from premiumscan.domain.exchanges import ExchangeProfile

# Exchange specific base-asset spellings -> common lower-case asset code.
KORBIT_ALIASES: Mapping[str, str] = MappingProxyType({})

KRAKEN_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "xxbtz": "btc",
        "xbt": "btc",
        "xethz": "eth",
        "xxrpz": "xrp",
        "xdg": "doge",
        "xltcz": "ltc",
        "xxlmz": "xlm",
        "xetcz": "etc",
        "xzecz": "zec",
        "xxmrz": "xmr",
        "xrepz": "rep",
        "xmlnz": "mln",
    }
)


def normalize_raw_symbol(symbol: str) -> str:
    return symbol.strip().lower()


def split_base(profile: ExchangeProfile, raw_symbol: str) -> str | None:
    """Return the base-asset part of ``raw_symbol`` or ``None`` if the pair does not apply."""

    normalized = normalize_raw_symbol(raw_symbol)
    suffix = profile.quote_suffix.lower()
    if normalized.endswith(suffix) and len(normalized) > len(suffix):
        return normalized[: -len(suffix)]
    if profile.require_quote_suffix:
        return None
    return normalized or None


def canonicalize(profile: ExchangeProfile, raw_symbol: str) -> str | None:
    """Map a raw exchange symbol to its canonical asset code (e.g. ``XXBTZEUR`` -> ``btc``).

    Returns ``None`` when the symbol is not quoted in the currency this exchange is
    scanned in. Unknown spellings pass through lower-cased; they only join when the other
    exchange uses the same spelling.
    """

    base = split_base(profile, raw_symbol)
    if base is None:
        return None
    return profile.aliases.get(base, base)
