"""
Data Module

Boundary adapters between files/records and the journal models.
"""

from .normalize import (
    RECORD_ALIASES,
    SPREADSHEET_ALIASES,
    ColumnAlias,
    normalize_record,
    normalize_row,
    parse_float_permissive,
)
from .spreadsheet import (
    EXPORT_COLUMNS,
    default_export_filename,
    export_rows,
    export_trades,
    import_trades,
    load_accounts,
    load_trades,
    read_trade_rows,
)

__all__ = [
    "ColumnAlias",
    "SPREADSHEET_ALIASES",
    "RECORD_ALIASES",
    "normalize_row",
    "normalize_record",
    "parse_float_permissive",
    "read_trade_rows",
    "import_trades",
    "load_trades",
    "load_accounts",
    "export_rows",
    "export_trades",
    "default_export_filename",
    "EXPORT_COLUMNS",
]
