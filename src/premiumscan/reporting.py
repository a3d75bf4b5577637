from __future__ import annotations

import csv
import io
import json
from datetime import datetime
from decimal import Decimal

from rich.console import Console
from rich.table import Table

from premiumscan.domain.exchanges import get_profile
from premiumscan.domain.models import MatchedPair, UnmatchedAsset
from premiumscan.domain.money import FiatAmount, Percentage
from premiumscan.services.scan_service import ScanReport

CSV_COLUMNS = [
    "asset",
    "reference_price",
    "comparison_price",
    "premium_pct",
    "reference_volume",
    "comparison_volume",
]


def _display_name(exchange_id: str) -> str:
    try:
        return get_profile(exchange_id).display_name
    except ValueError:
        return exchange_id


def column_headers(report: ScanReport) -> list[str]:
    reference = _display_name(report.reference_exchange)
    comparison = _display_name(report.comparison_exchange)
    return [
        "Market",
        f"{reference} Price",
        f"{comparison} Price",
        f"{comparison} Premium",
        f"{reference} Volume",
        f"{comparison} Volume",
    ]


def format_row(pair: MatchedPair) -> list[str]:
    return [
        pair.asset,
        str(pair.reference_price),
        str(pair.comparison_price),
        str(pair.premium),
        str(pair.reference_volume),
        str(pair.comparison_volume),
    ]


def build_table(report: ScanReport) -> Table:
    table = Table(show_lines=False)
    for header in column_headers(report):
        table.add_column(header, justify="right")
    for pair in report.pairs:
        table.add_row(*format_row(pair))
    return table


def unmatched_lines(report: ScanReport) -> list[str]:
    lines: list[str] = []
    for exchange, assets in (
        (report.reference_exchange, report.unmatched_reference),
        (report.comparison_exchange, report.unmatched_comparison),
    ):
        codes = ", ".join(item.asset for item in assets) or "-"
        lines.append(f"Unmatched on {_display_name(exchange)}: {codes}")
    for duplicate in report.duplicates:
        lines.append(
            f"Duplicate {duplicate.asset} on {_display_name(duplicate.exchange)}: kept "
            f"{duplicate.kept_symbol}, dropped {', '.join(duplicate.dropped_symbols)}"
        )
    return lines


def render_table(
    report: ScanReport,
    console: Console | None = None,
    *,
    show_unmatched: bool = False,
) -> None:
    target = console or Console()
    target.print(build_table(report))
    if show_unmatched:
        for line in unmatched_lines(report):
            target.print(line, highlight=False)


def render_csv(report: ScanReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for pair in report.pairs:
        writer.writerow(
            [
                pair.asset,
                _fmt(pair.reference_price),
                _fmt(pair.comparison_price),
                _fmt(pair.premium),
                _fmt(pair.reference_volume),
                _fmt(pair.comparison_volume),
            ]
        )
    return buffer.getvalue()


def render_json(report: ScanReport) -> str:
    return json.dumps(_to_jsonable(report_payload(report)), sort_keys=True)


def report_payload(report: ScanReport) -> dict[str, object]:
    return {
        "run_id": report.run_id,
        "generated_at": report.generated_at,
        "reference_exchange": report.reference_exchange,
        "comparison_exchange": report.comparison_exchange,
        "quote_counts": report.quote_counts,
        "pairs": [
            {
                "asset": pair.asset,
                "reference_price": pair.reference_price,
                "comparison_price": pair.comparison_price,
                "premium_pct": pair.premium,
                "reference_volume": pair.reference_volume,
                "comparison_volume": pair.comparison_volume,
            }
            for pair in report.pairs
        ],
        "unmatched": {
            report.reference_exchange: _assets(report.unmatched_reference),
            report.comparison_exchange: _assets(report.unmatched_comparison),
        },
        "duplicates": [
            {
                "asset": item.asset,
                "exchange": item.exchange,
                "kept_symbol": item.kept_symbol,
                "dropped_symbols": list(item.dropped_symbols),
            }
            for item in report.duplicates
        ],
    }


def _assets(items: tuple[UnmatchedAsset, ...]) -> list[str]:
    return [item.asset for item in items]


def _fmt(value: FiatAmount | Percentage) -> str:
    return str(value.value)


def _to_jsonable(value: object) -> object:
    if isinstance(value, (FiatAmount, Percentage)):
        return str(value.value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value
