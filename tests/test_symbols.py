from __future__ import annotations

import pytest

from premiumscan.domain.exchanges import KORBIT, KRAKEN, get_profile
from premiumscan.domain.symbols import KORBIT_ALIASES, KRAKEN_ALIASES, canonicalize


@pytest.mark.parametrize(("raw", "expected"), sorted(KRAKEN_ALIASES.items()))
def test_every_kraken_alias_resolves_for_eur_pairs(raw: str, expected: str) -> None:
    assert canonicalize(KRAKEN, f"{raw.upper()}EUR") == expected


def test_alias_tables_are_lower_case() -> None:
    for table in (KORBIT_ALIASES, KRAKEN_ALIASES):
        for key, value in table.items():
            assert key == key.lower()
            assert value == value.lower()
            assert value


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("XXBTZEUR", "btc"),
        ("XETHZEUR", "eth"),
        ("XXRPZEUR", "xrp"),
        ("XDGEUR", "doge"),
        ("DOTEUR", "dot"),
        ("adaeur", "ada"),
    ],
)
def test_kraken_canonicalization(raw: str, expected: str) -> None:
    assert canonicalize(KRAKEN, raw) == expected


@pytest.mark.parametrize("raw", ["XXBTZUSD", "XETHXXBT", "EURTUSD", "ZEURZUSD", "EUR", ""])
def test_kraken_non_eur_pairs_are_not_applicable(raw: str) -> None:
    assert canonicalize(KRAKEN, raw) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("btc_krw", "btc"),
        ("ETH_KRW", "eth"),
        ("doge_krw", "doge"),
        ("usdt_krw", "usdt"),
        ("bch", "bch"),
    ],
)
def test_korbit_canonicalization(raw: str, expected: str) -> None:
    assert canonicalize(KORBIT, raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["XXBTZEUR", "xXbTzEuR", "XDGEUR", "DOTEUR", "XXBTZUSD", "btc_krw", "BTC_KRW", "Eth_Krw"],
)
@pytest.mark.parametrize("profile", [KORBIT, KRAKEN], ids=["korbit", "kraken"])
def test_canonicalization_is_case_insensitive(profile, raw: str) -> None:
    assert canonicalize(profile, raw) == canonicalize(profile, raw.lower())
    assert canonicalize(profile, raw) == canonicalize(profile, raw.upper())


def test_same_asset_joins_across_exchanges() -> None:
    for kraken_symbol, korbit_symbol in (
        ("XXBTZEUR", "btc_krw"),
        ("XETHZEUR", "eth_krw"),
        ("XXRPZEUR", "xrp_krw"),
        ("XDGEUR", "doge_krw"),
        ("XLTCZEUR", "ltc_krw"),
    ):
        assert canonicalize(KRAKEN, kraken_symbol) == canonicalize(KORBIT, korbit_symbol)


def test_get_profile() -> None:
    assert get_profile(" Kraken ") is KRAKEN
    with pytest.raises(ValueError):
        get_profile("binance")
