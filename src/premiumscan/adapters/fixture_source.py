from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from premiumscan.adapters.korbit import decode_korbit_payload
from premiumscan.adapters.kraken import decode_kraken_payload
from premiumscan.adapters.ticker_source import TickerSource
from premiumscan.domain.models import RawTicker
from premiumscan.errors import DecodeError, FetchError

_DECODERS: dict[str, Callable[[object], dict[str, RawTicker]]] = {
    "korbit": decode_korbit_payload,
    "kraken": decode_kraken_payload,
}


class FixtureTickerSource(TickerSource):
    """Replays a raw ticker payload captured earlier (see ``premiumscan capture``)."""

    def __init__(self, exchange_id: str, path: str | Path) -> None:
        if exchange_id not in _DECODERS:
            raise ValueError(f"Unknown exchange: {exchange_id}")
        self.exchange_id = exchange_id
        self.path = Path(path)

    def fetch_tickers(self) -> dict[str, RawTicker]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FetchError(
                f"cannot read {self.exchange_id} fixture {self.path}: {exc}",
                exchange=self.exchange_id,
                request_path=str(self.path),
            ) from exc
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                f"{self.exchange_id} fixture {self.path} is not JSON: {exc}",
                exchange=self.exchange_id,
            ) from exc
        return _DECODERS[self.exchange_id](payload)


class StaticTickerSource(TickerSource):
    def __init__(self, exchange_id: str, tickers: dict[str, RawTicker]) -> None:
        self.exchange_id = exchange_id
        self._tickers = dict(tickers)

    def fetch_tickers(self) -> dict[str, RawTicker]:
        return dict(self._tickers)
