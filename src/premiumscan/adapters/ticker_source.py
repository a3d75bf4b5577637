from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import TracebackType

import httpx

from premiumscan.domain.models import RawTicker
from premiumscan.errors import DecodeError, FetchError

logger = logging.getLogger(__name__)

_SNIPPET_LIMIT = 240


class TickerSource(ABC):
    exchange_id: str

    @abstractmethod
    def fetch_tickers(self) -> dict[str, RawTicker]:
        """Return raw tickers keyed by the exchange's own symbol."""
        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> TickerSource:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _response_snippet(response: httpx.Response) -> str:
    return response.text.strip().replace("\n", " ")[:_SNIPPET_LIMIT]


class HttpTickerSource(TickerSource):
    BASE_URL = ""
    TICKER_PATH = ""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | httpx.Timeout = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        resolved_timeout = (
            timeout
            if isinstance(timeout, httpx.Timeout)
            else httpx.Timeout(timeout=timeout, connect=5.0)
        )
        self.client = httpx.Client(
            base_url=base_url or self.BASE_URL,
            timeout=resolved_timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        self.client.close()

    def fetch_payload(self) -> object:
        """GET the ticker endpoint and return the decoded JSON body."""

        path = self.TICKER_PATH
        logger.info(
            "ticker_fetch_started",
            extra={"extra": {"exchange": self.exchange_id, "path": path}},
        )
        try:
            response = self.client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise FetchError(
                f"{self.exchange_id} ticker request failed with HTTP {status_code}: "
                f"{_response_snippet(exc.response)}",
                exchange=self.exchange_id,
                status_code=status_code,
                request_path=path,
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(
                f"{self.exchange_id} ticker request failed: {type(exc).__name__}: {exc}",
                exchange=self.exchange_id,
                request_path=path,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(
                f"{self.exchange_id} ticker response is not JSON: {_response_snippet(response)}",
                exchange=self.exchange_id,
            ) from exc

        logger.info(
            "ticker_fetch_completed",
            extra={
                "extra": {
                    "exchange": self.exchange_id,
                    "path": path,
                    "status_code": response.status_code,
                }
            },
        )
        return payload

    @abstractmethod
    def decode(self, payload: object) -> dict[str, RawTicker]:
        raise NotImplementedError

    def fetch_tickers(self) -> dict[str, RawTicker]:
        return self.decode(self.fetch_payload())
