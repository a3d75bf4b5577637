from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

from premiumscan.adapters.korbit import KorbitTickerSource, decode_korbit_payload
from premiumscan.errors import DecodeError, FetchError


def _source(handler) -> KorbitTickerSource:
    return KorbitTickerSource(
        base_url="https://api.korbit.co.kr",
        transport=httpx.MockTransport(handler),
    )


def test_fetch_tickers_parses_string_numbers(korbit_payload) -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["method"] = request.method
        return httpx.Response(200, json=korbit_payload)

    with _source(handler) as source:
        tickers = source.fetch_tickers()

    assert seen == {"path": "/v1/ticker/detailed/all", "method": "GET"}
    btc = tickers["btc_krw"]
    assert btc.raw_symbol == "btc_krw"
    assert btc.best_bid == Decimal("40000000")
    assert btc.best_ask == Decimal("40010000")
    assert btc.volume == Decimal("10")
    assert set(tickers) == set(korbit_payload)


def test_only_bid_ask_volume_are_required() -> None:
    tickers = decode_korbit_payload({"eth_krw": {"bid": "1", "ask": "2", "volume": "3"}})

    assert tickers["eth_krw"].best_ask == Decimal("2")


def test_http_error_raises_fetch_error() -> None:
    source = _source(lambda request: httpx.Response(503, text="maintenance"))

    with pytest.raises(FetchError) as exc_info:
        source.fetch_tickers()

    assert exc_info.value.status_code == 503
    assert exc_info.value.exchange == "korbit"
    assert exc_info.value.request_path == "/v1/ticker/detailed/all"
    assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
    assert "maintenance" in str(exc_info.value)
    source.close()


def test_transport_error_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source = _source(handler)

    with pytest.raises(FetchError) as exc_info:
        source.fetch_tickers()

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    source.close()


def test_non_json_body_raises_decode_error() -> None:
    source = _source(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(DecodeError):
        source.fetch_tickers()
    source.close()


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"btc_krw": "not-a-dict"},
        {"btc_krw": {"bid": "abc", "ask": "1", "volume": "1"}},
        {"btc_krw": {"bid": "1", "ask": "1"}},
        {"btc_krw": {"bid": "1", "ask": "1", "volume": "-5"}},
    ],
)
def test_shape_mismatch_raises_decode_error(payload: object) -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_korbit_payload(payload)

    assert exc_info.value.exchange == "korbit"
