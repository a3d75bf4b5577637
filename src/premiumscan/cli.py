from __future__ import annotations

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from premiumscan.adapters.fixture_source import FixtureTickerSource
from premiumscan.adapters.korbit import KorbitTickerSource
from premiumscan.adapters.kraken import KrakenTickerSource
from premiumscan.adapters.ticker_source import HttpTickerSource, TickerSource
from premiumscan.config import Settings
from premiumscan.errors import PremiumScanError
from premiumscan.logging_utils import setup_logging
from premiumscan.reporting import render_csv, render_json, render_table
from premiumscan.services.scan_service import ScanService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SCAN_FAILED = 1
EXIT_BAD_CONFIG = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="premiumscan",
        description="Korbit (KRW) vs Kraken (EUR) price premium scanner",
        epilog=(
            "Env overrides: KRW_TO_EUR_RATE, MIN_VOLUME_EUR, KORBIT_BASE_URL, "
            "KRAKEN_BASE_URL, HTTP_TIMEOUT_SECONDS, PARALLEL_FETCH, LOG_LEVEL."
        ),
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Optional dotenv file with settings overrides",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Fetch both exchanges and rank premiums")
    scan_parser.add_argument(
        "--format",
        choices=("table", "json", "csv"),
        default="table",
        help="Output format (default: table)",
    )
    scan_parser.add_argument(
        "--show-unmatched",
        action="store_true",
        help="Also list assets that only trade on one exchange",
    )
    scan_parser.add_argument(
        "--korbit-fixture",
        default=None,
        help="Read Korbit tickers from a captured JSON file instead of the API",
    )
    scan_parser.add_argument(
        "--kraken-fixture",
        default=None,
        help="Read Kraken tickers from a captured JSON file instead of the API",
    )

    capture_parser = subparsers.add_parser(
        "capture", help="Save one raw ticker response for later fixture runs"
    )
    capture_parser.add_argument("--exchange", choices=("korbit", "kraken"), required=True)
    capture_parser.add_argument("--out", required=True, help="Output JSON path")
    return parser


def _load_settings(env_file: str | None) -> Settings:
    if env_file in (None, ""):
        return Settings()
    return Settings(_env_file=env_file)


def _http_source(exchange: str, settings: Settings) -> HttpTickerSource:
    if exchange == "korbit":
        return KorbitTickerSource(
            base_url=settings.korbit_base_url, timeout=settings.http_timeout_seconds
        )
    return KrakenTickerSource(
        base_url=settings.kraken_base_url, timeout=settings.http_timeout_seconds
    )


def _source(exchange: str, settings: Settings, fixture: str | None) -> TickerSource:
    if fixture:
        return FixtureTickerSource(exchange, fixture)
    return _http_source(exchange, settings)


def run_scan(
    settings: Settings,
    *,
    output_format: str = "table",
    show_unmatched: bool = False,
    korbit_fixture: str | None = None,
    kraken_fixture: str | None = None,
    console: Console | None = None,
) -> int:
    with ExitStack() as stack:
        reference = stack.enter_context(_source("kraken", settings, kraken_fixture))
        comparison = stack.enter_context(_source("korbit", settings, korbit_fixture))
        service = ScanService(
            reference_source=reference,
            comparison_source=comparison,
            config=settings.scan_config(),
        )
        try:
            report = service.run()
        except PremiumScanError as exc:
            logger.exception("scan_failed", extra={"extra": {"error_type": type(exc).__name__}})
            print(f"scan failed: {exc}", file=sys.stderr)
            return EXIT_SCAN_FAILED

    if output_format == "json":
        print(render_json(report))
    elif output_format == "csv":
        sys.stdout.write(render_csv(report))
    else:
        render_table(report, console, show_unmatched=show_unmatched)
    return EXIT_OK


def run_capture(settings: Settings, *, exchange: str, out: str) -> int:
    with _http_source(exchange, settings) as source:
        try:
            payload = source.fetch_payload()
            tickers = source.decode(payload)
        except PremiumScanError as exc:
            logger.exception("capture_failed", extra={"extra": {"exchange": exchange}})
            print(f"capture failed: {exc}", file=sys.stderr)
            return EXIT_SCAN_FAILED

    out_path = Path(out)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(payload, sort_keys=True, indent=2), encoding="utf-8")
    except OSError as exc:
        logger.exception(
            "capture_failed", extra={"extra": {"exchange": exchange, "path": str(out_path)}}
        )
        print(f"capture failed: cannot write {out_path}: {exc}", file=sys.stderr)
        return EXIT_SCAN_FAILED
    logger.info(
        "capture_written",
        extra={"extra": {"exchange": exchange, "path": str(out_path), "symbols": len(tickers)}},
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _load_settings(args.env_file)
    except ValidationError as exc:
        print(f"invalid configuration: {exc}", file=sys.stderr)
        return EXIT_BAD_CONFIG
    setup_logging(settings.log_level)

    if args.command == "scan":
        return run_scan(
            settings,
            output_format=args.format,
            show_unmatched=args.show_unmatched,
            korbit_fixture=args.korbit_fixture,
            kraken_fixture=args.kraken_fixture,
        )
    if args.command == "capture":
        return run_capture(settings, exchange=args.exchange, out=args.out)

    parser.error(f"unknown command: {args.command}")
    return EXIT_BAD_CONFIG


if __name__ == "__main__":
    raise SystemExit(main())
