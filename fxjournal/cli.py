"""
fxjournal command line interface.

Examples:
  python -m fxjournal report trades.csv
  python -m fxjournal report trades.json --accounts accounts.json --account 2
  python -m fxjournal report trades.xlsx --pair EUR --date-from 2024-01-01 --page 2
  python -m fxjournal export trades.json filtered.xlsx --type sell
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .analytics.engine import AnalyticsEngine
from .config.logging import configure_logging
from .config.settings import load_settings
from .core.errors import JournalError
from .data.spreadsheet import default_export_filename, export_trades, load_accounts, load_trades
from .validation.models import validate_criteria

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "trades_file",
        help="Trades as JSON records or a CSV/XLSX spreadsheet",
    )
    parser.add_argument(
        "--accounts",
        type=str,
        default=None,
        help="JSON file with the account list",
    )

    filters = parser.add_argument_group("filters")
    filters.add_argument("--account", type=str, default="all", help="Account id (default: all)")
    filters.add_argument("--date-from", type=str, default=None, help="First date, YYYY-MM-DD")
    filters.add_argument("--date-to", type=str, default=None, help="Last date, YYYY-MM-DD")
    filters.add_argument("--pair", type=str, default=None, help="Pair substring")
    filters.add_argument("--type", type=str, choices=["buy", "sell"], default=None)
    filters.add_argument("--min-pnl", type=float, default=None, help="Minimum P&L")
    filters.add_argument("--max-pnl", type=float, default=None, help="Maximum P&L")
    filters.add_argument("--search", type=str, default=None, help="Search pair, date and type")
    filters.add_argument("--has-notes", action="store_true", help="Only trades with notes")
    filters.add_argument("--has-rating", action="store_true", help="Only rated trades")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML settings file",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level (default: from settings)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON structured logs on stderr",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fxjournal",
        description="Forex trading journal analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Print the analytics report as JSON")
    _add_common_arguments(report)
    report.add_argument("--page", type=int, default=1, help="Trade table page (default: 1)")
    report.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Trades per page (default: from settings)",
    )

    export = subparsers.add_parser("export", help="Write filtered trades to CSV/XLSX")
    _add_common_arguments(export)
    export.add_argument(
        "output_file",
        nargs="?",
        default=None,
        help="Output .csv or .xlsx (default: fx-trades-<today>.xlsx)",
    )

    return parser


def _criteria_from_args(args: argparse.Namespace):
    return validate_criteria(
        {
            "account_id": args.account,
            "date_from": args.date_from,
            "date_to": args.date_to,
            "pair": args.pair,
            "type": args.type,
            "min_pnl": args.min_pnl,
            "max_pnl": args.max_pnl,
            "search_term": args.search,
            "has_notes": args.has_notes,
            "has_rating": args.has_rating,
        }
    )


def run(args: argparse.Namespace) -> int:
    """Run a parsed command; JournalErrors propagate to the caller."""
    settings = load_settings(args.config)
    configure_logging(
        level=args.log_level or settings.log_level,
        json_format=args.json_logs or settings.log_json,
    )

    engine = AnalyticsEngine(settings=settings)
    criteria = _criteria_from_args(args)
    trades = load_trades(args.trades_file)
    accounts = load_accounts(args.accounts) if args.accounts else []

    if args.command == "report":
        report = engine.analyze(
            trades,
            accounts,
            criteria,
            page_number=args.page,
            page_size=args.page_size,
        )
        json.dump(report.to_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    filtered = engine.filter(trades, criteria)
    output = args.output_file or default_export_filename()
    export_trades(filtered, accounts, output)
    print(f"Exported {len(filtered)} trades to {output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except JournalError as e:
        e.log()
        print(f"error: {e.user_message}", file=sys.stderr)
        if e.recovery_hint:
            print(f"hint: {e.recovery_hint}", file=sys.stderr)
        return 1
