from __future__ import annotations


class PremiumScanError(RuntimeError):
    """Base class for failures that abort a scan run."""


class FetchError(PremiumScanError):
    """Raised when an exchange ticker request fails at the transport or HTTP level."""

    def __init__(
        self,
        message: str,
        *,
        exchange: str,
        status_code: int | None = None,
        request_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.exchange = exchange
        self.status_code = status_code
        self.request_path = request_path


class DecodeError(PremiumScanError):
    """Raised when a ticker response does not have the expected shape."""

    def __init__(self, message: str, *, exchange: str) -> None:
        super().__init__(message)
        self.exchange = exchange


class ExchangeReportedError(PremiumScanError):
    """Raised when an exchange answers with a non-empty error field."""

    def __init__(self, *, exchange: str, errors: list[str]) -> None:
        super().__init__(f"{exchange} reported errors: {errors}")
        self.exchange = exchange
        self.errors = list(errors)


class RankingError(PremiumScanError):
    """Raised when a premium cannot be placed in a total order."""
