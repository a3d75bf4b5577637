"""Scan correlation fields carried by every log line emitted inside a scope."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_RUN_ID: ContextVar[str | None] = ContextVar("run_id", default=None)
_EXCHANGE: ContextVar[str | None] = ContextVar("exchange", default=None)
_ASSET: ContextVar[str | None] = ContextVar("asset", default=None)


def current_log_fields() -> dict[str, str]:
    """Fields bound by the enclosing ``log_scope`` blocks; unbound ones are omitted."""

    fields = {"run_id": _RUN_ID.get(), "exchange": _EXCHANGE.get(), "asset": _ASSET.get()}
    return {name: value for name, value in fields.items() if value is not None}


@contextmanager
def log_scope(
    *,
    run_id: str | None = None,
    exchange: str | None = None,
    asset: str | None = None,
) -> Iterator[None]:
    """Bind correlation fields for the block. ``None`` keeps the outer value."""

    tokens = [
        (var, var.set(value))
        for var, value in ((_RUN_ID, run_id), (_EXCHANGE, exchange), (_ASSET, asset))
        if value is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
