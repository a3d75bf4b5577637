from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from premiumscan.adapters.ticker_source import HttpTickerSource
from premiumscan.domain.exchanges import KORBIT
from premiumscan.domain.models import RawTicker
from premiumscan.errors import DecodeError


class KorbitTicker(BaseModel):
    """One entry of ``/v1/ticker/detailed/all``; every number arrives as a string."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    timestamp: int | None = None
    last: Decimal | None = None
    open: Decimal | None = None
    bid: Decimal = Field(ge=0)
    ask: Decimal = Field(ge=0)
    low: Decimal | None = None
    high: Decimal | None = None
    volume: Decimal = Field(ge=0)
    change: Decimal | None = None
    change_percent: Decimal | None = Field(default=None, alias="changePercent")


_KORBIT_PAYLOAD = TypeAdapter(dict[str, KorbitTicker])


def decode_korbit_payload(payload: object) -> dict[str, RawTicker]:
    try:
        markets = _KORBIT_PAYLOAD.validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(
            f"korbit ticker payload has unexpected shape: {exc.error_count()} error(s): "
            f"{exc.errors(include_url=False)[:3]}",
            exchange=KORBIT.exchange_id,
        ) from exc

    return {
        symbol: RawTicker(
            raw_symbol=symbol,
            best_bid=market.bid,
            best_ask=market.ask,
            volume=market.volume,
        )
        for symbol, market in markets.items()
    }


class KorbitTickerSource(HttpTickerSource):
    exchange_id = KORBIT.exchange_id
    BASE_URL = "https://api.korbit.co.kr"
    TICKER_PATH = "/v1/ticker/detailed/all"

    def decode(self, payload: object) -> dict[str, RawTicker]:
        return decode_korbit_payload(payload)
