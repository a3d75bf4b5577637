from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from premiumscan.adapters.ticker_source import HttpTickerSource
from premiumscan.domain.exchanges import KRAKEN
from premiumscan.domain.models import RawTicker
from premiumscan.errors import DecodeError, ExchangeReportedError

NonNegativeDecimal = Annotated[Decimal, Field(ge=0)]


class KrakenTicker(BaseModel):
    """Ticker entry of ``/0/public/Ticker``. Only the first element of each array is used."""

    model_config = ConfigDict(extra="ignore")

    a: list[NonNegativeDecimal] = Field(min_length=1)
    b: list[NonNegativeDecimal] = Field(min_length=1)
    v: list[NonNegativeDecimal] = Field(min_length=1)


class KrakenTickerResponse(BaseModel):
    """Kraken response envelope. ``result`` is only validated once ``error`` is empty."""

    model_config = ConfigDict(extra="ignore")

    error: list[str]
    result: Any = Field(default_factory=dict)


_TICKERS = TypeAdapter(dict[str, KrakenTicker])


def _shape_error(exc: ValidationError) -> DecodeError:
    return DecodeError(
        f"kraken ticker payload has unexpected shape: {exc.error_count()} error(s): "
        f"{exc.errors(include_url=False)[:3]}",
        exchange=KRAKEN.exchange_id,
    )


def decode_kraken_payload(payload: object) -> dict[str, RawTicker]:
    try:
        response = KrakenTickerResponse.model_validate(payload)
    except ValidationError as exc:
        raise _shape_error(exc) from exc

    if response.error:
        raise ExchangeReportedError(exchange=KRAKEN.exchange_id, errors=response.error)

    try:
        tickers = _TICKERS.validate_python(response.result)
    except ValidationError as exc:
        raise _shape_error(exc) from exc

    return {
        symbol: RawTicker(
            raw_symbol=symbol,
            best_bid=ticker.b[0],
            best_ask=ticker.a[0],
            volume=ticker.v[0],
        )
        for symbol, ticker in tickers.items()
    }


class KrakenTickerSource(HttpTickerSource):
    exchange_id = KRAKEN.exchange_id
    BASE_URL = "https://api.kraken.com"
    TICKER_PATH = "/0/public/Ticker"

    def decode(self, payload: object) -> dict[str, RawTicker]:
        return decode_kraken_payload(payload)
