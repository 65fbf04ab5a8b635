"""
Spreadsheet Import/Export Module

Reads trade rows from CSV/XLSX (and trade/account records from JSON) and
writes filtered trades back out, using pandas with the openpyxl engine.
"""

import json
import logging
import zipfile
from datetime import date as date_type
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from ..config.logging import journal_events
from ..core.errors import DataError, ErrorCodes
from ..journal.models import Account, Trade
from ..validation.models import validate_accounts, validate_trade_objects
from .normalize import normalize_record, normalize_row

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}
JSON_EXTENSIONS = {".json"}

EXPORT_COLUMNS = [
    "Date",
    "Pair",
    "Type",
    "Size",
    "Entry Price",
    "Exit Price",
    "P&L",
    "Account",
]
EXPORT_SHEET = "Trades"
UNKNOWN_ACCOUNT = "Unknown"


def _suffix(path: Path) -> str:
    return path.suffix.lower()


def _require_file(path: Path) -> None:
    if not path.is_file():
        raise DataError(
            ErrorCodes.DATA_FILE_NOT_FOUND,
            detail=str(path),
            context={"path": str(path)},
        )


def read_trade_rows(path: PathLike) -> List[Dict[str, Any]]:
    """
    Read the first sheet of a CSV or XLSX file as a list of row dicts.

    Empty cells come back as None.

    Raises:
        DataError: if the file is missing, unsupported or unreadable
    """
    path = Path(path)
    _require_file(path)
    suffix = _suffix(path)

    try:
        if suffix in CSV_EXTENSIONS:
            frame = pd.read_csv(path)
        elif suffix in EXCEL_EXTENSIONS:
            frame = pd.read_excel(path, sheet_name=0, engine="openpyxl")
        else:
            raise DataError(
                ErrorCodes.DATA_UNSUPPORTED_FORMAT,
                detail=suffix or path.name,
                context={"path": str(path)},
            )
    except DataError:
        raise
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise DataError(
            ErrorCodes.DATA_PARSE_ERROR,
            detail=str(e),
            original_error=e,
            context={"path": str(path)},
        ) from e

    frame = frame.astype(object).where(frame.notna(), None)
    rows = frame.to_dict(orient="records")
    logger.debug(f"Read {len(rows)} rows from {path}")
    return rows


def import_trades(
    path: PathLike,
    account_id: Any = None,
    start_id: int = 1,
    today: Optional[date_type] = None,
) -> List[Trade]:
    """
    Import trades from a spreadsheet.

    Args:
        path: CSV or XLSX file
        account_id: Account assigned to every imported trade
        start_id: Id of the first imported trade; following rows count up
        today: Date for rows without one (defaults to today)

    Returns:
        List of normalized trades in file order
    """
    rows = read_trade_rows(path)
    trades = [
        normalize_row(row, account_id=account_id, trade_id=start_id + i, today=today)
        for i, row in enumerate(rows)
    ]
    journal_events.log_import(Path(path).name, _suffix(Path(path)).lstrip("."), len(trades))
    return trades


def _read_json(path: PathLike) -> Any:
    path = Path(path)
    _require_file(path)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataError(
            ErrorCodes.DATA_PARSE_ERROR,
            detail=str(e),
            original_error=e,
            context={"path": str(path)},
        ) from e


def _json_list(data: Any, key: str, path: PathLike) -> List[Dict[str, Any]]:
    """Accept a bare list or an object wrapping the list under ``key``."""
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise DataError(
            ErrorCodes.DATA_PARSE_ERROR,
            detail=f"expected a list of {key} objects",
            context={"path": str(path)},
        )
    return data


def load_trades(
    path: PathLike,
    account_id: Any = None,
    start_id: int = 1,
) -> List[Trade]:
    """
    Load trades from JSON records or a CSV/XLSX spreadsheet.

    JSON files hold trade records as returned by the journal API (a list,
    or an object with a ``trades`` list). They are normalized and then
    validated, so a malformed record raises ValidationError instead of
    reaching the analytics engine.
    """
    path = Path(path)
    if _suffix(path) in JSON_EXTENSIONS:
        records = _json_list(_read_json(path), "trades", path)
        trades = validate_trade_objects(normalize_record(record) for record in records)
        journal_events.log_import(path.name, "json", len(trades))
        return trades
    return import_trades(path, account_id=account_id, start_id=start_id)


def load_accounts(path: PathLike) -> List[Account]:
    """Load accounts from a JSON list (or an object with an ``accounts`` list)."""
    records = _json_list(_read_json(path), "accounts", path)
    accounts = validate_accounts(records)
    logger.debug(f"Loaded {len(accounts)} accounts from {Path(path).name}")
    return accounts


def export_rows(trades: Sequence[Trade], accounts: Sequence[Account]) -> List[Dict[str, Any]]:
    """Spreadsheet rows for export; unknown accounts are named ``Unknown``."""
    names = {str(a.id): a.name for a in accounts}
    return [
        {
            "Date": t.date,
            "Pair": t.pair,
            "Type": t.type,
            "Size": t.size,
            "Entry Price": t.entry_price,
            "Exit Price": t.exit_price,
            "P&L": t.pnl,
            "Account": names.get(str(t.account), UNKNOWN_ACCOUNT)
            if t.account is not None
            else UNKNOWN_ACCOUNT,
        }
        for t in trades
    ]


def export_trades(
    trades: Sequence[Trade],
    accounts: Sequence[Account],
    path: PathLike,
) -> Path:
    """
    Write trades to CSV or XLSX, chosen by file extension.

    Returns:
        Path of the written file

    Raises:
        DataError: for unsupported extensions or write failures
    """
    path = Path(path)
    suffix = _suffix(path)
    if suffix not in CSV_EXTENSIONS | EXCEL_EXTENSIONS:
        raise DataError(
            ErrorCodes.DATA_UNSUPPORTED_FORMAT,
            detail=suffix or path.name,
            context={"path": str(path)},
        )

    frame = pd.DataFrame(export_rows(trades, accounts), columns=EXPORT_COLUMNS)

    try:
        if suffix in CSV_EXTENSIONS:
            frame.to_csv(path, index=False)
        else:
            frame.to_excel(path, index=False, sheet_name=EXPORT_SHEET, engine="openpyxl")
    except (OSError, ValueError) as e:
        raise DataError(
            ErrorCodes.DATA_EXPORT_FAILED,
            detail=str(e),
            original_error=e,
            context={"path": str(path)},
        ) from e

    journal_events.log_export(str(path), suffix.lstrip("."), len(frame))
    return path


def default_export_filename(today: Optional[date_type] = None) -> str:
    """Export file name stamped with the ISO date, e.g. ``fx-trades-2024-01-05.xlsx``."""
    today = today or date_type.today()
    return f"fx-trades-{today.isoformat()}.xlsx"
