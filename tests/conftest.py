from __future__ import annotations

import io
import json
import logging
import os

import pytest

from premiumscan.config import Settings
from premiumscan.logging_utils import JsonFormatter


@pytest.fixture(autouse=True)
def isolate_settings_from_host_env(monkeypatch: pytest.MonkeyPatch):
    original_env_file = Settings.model_config.get("env_file")
    Settings.model_config["env_file"] = None

    settings_env_keys: set[str] = set()
    for field in Settings.model_fields.values():
        if isinstance(field.alias, str):
            settings_env_keys.add(field.alias)

    for key in list(os.environ):
        if key in settings_env_keys:
            monkeypatch.delenv(key, raising=False)

    yield

    Settings.model_config["env_file"] = original_env_file


@pytest.fixture
def json_log_lines():
    """Collect the JSON lines the package loggers emit at DEBUG and above."""

    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    package_logger = logging.getLogger("premiumscan")
    previous_level = package_logger.level
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)

    def lines() -> list[dict[str, object]]:
        return [json.loads(line) for line in stream.getvalue().splitlines()]

    yield lines

    package_logger.removeHandler(handler)
    package_logger.setLevel(previous_level)


def _korbit_market(bid: str, ask: str, volume: str) -> dict[str, object]:
    return {
        "timestamp": 1_700_000_000_000,
        "last": bid,
        "open": bid,
        "bid": bid,
        "ask": ask,
        "low": bid,
        "high": ask,
        "volume": volume,
        "change": "0",
        "changePercent": "0.00",
    }


def _kraken_market(ask: str, bid: str, volume: str) -> dict[str, object]:
    return {
        "a": [ask, "1", "1.000"],
        "b": [bid, "1", "1.000"],
        "c": [ask, "0.1"],
        "v": [volume, volume],
        "p": [ask, ask],
        "t": [10, 20],
        "l": [bid, bid],
        "h": [ask, ask],
        "o": ask,
    }


@pytest.fixture
def korbit_payload() -> dict[str, object]:
    return {
        "btc_krw": _korbit_market("40000000", "40010000", "10"),
        "eth_krw": _korbit_market("2500000", "2501000", "100"),
        "doge_krw": _korbit_market("100", "102", "1000000"),
        "xrp_krw": _korbit_market("700", "702", "10"),
        "sol_krw": _korbit_market("30000", "30010", "50000"),
    }


@pytest.fixture
def kraken_payload() -> dict[str, object]:
    return {
        "error": [],
        "result": {
            "XXBTZEUR": _kraken_market("27000", "26990", "50"),
            "XETHZEUR": _kraken_market("1700.0", "1690.0", "1000"),
            "XDGEUR": _kraken_market("0.0702", "0.0698", "2000000"),
            "DOTEUR": _kraken_market("5.01", "4.99", "10000"),
            "XXRPZEUR": _kraken_market("0.5", "0.5", "1000"),
            "XXBTZUSD": _kraken_market("29000", "28990", "80"),
        },
    }
