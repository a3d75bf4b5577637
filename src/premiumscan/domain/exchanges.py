from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from premiumscan.domain.symbols import KORBIT_ALIASES, KRAKEN_ALIASES


class VolumeUnit(StrEnum):
    BASE = "base"
    QUOTE = "quote"


@dataclass(frozen=True)
class ExchangeProfile:
    exchange_id: str
    display_name: str
    quote_currency: str
    quote_suffix: str
    require_quote_suffix: bool
    aliases: Mapping[str, str]
    volume_unit: VolumeUnit = VolumeUnit.BASE


# Korbit quotes every market against KRW ("btc_krw").
KORBIT = ExchangeProfile(
    exchange_id="korbit",
    display_name="Korbit",
    quote_currency="KRW",
    quote_suffix="_krw",
    require_quote_suffix=False,
    aliases=KORBIT_ALIASES,
)

# Kraken lists every quote currency; only "...EUR" pairs are scanned ("XXBTZEUR").
KRAKEN = ExchangeProfile(
    exchange_id="kraken",
    display_name="Kraken",
    quote_currency="EUR",
    quote_suffix="eur",
    require_quote_suffix=True,
    aliases=KRAKEN_ALIASES,
)

PROFILES: dict[str, ExchangeProfile] = {
    KORBIT.exchange_id: KORBIT,
    KRAKEN.exchange_id: KRAKEN,
}


def get_profile(exchange_id: str) -> ExchangeProfile:
    try:
        return PROFILES[exchange_id.strip().lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown exchange: {exchange_id}") from exc
