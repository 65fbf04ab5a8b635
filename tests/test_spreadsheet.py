"""Tests for spreadsheet import/export."""

import json
from datetime import date

import pandas as pd
import pytest

from fxjournal.core.errors import DataError, ErrorCodes, ValidationError
from fxjournal.data.spreadsheet import (
    EXPORT_COLUMNS,
    default_export_filename,
    export_rows,
    export_trades,
    import_trades,
    load_accounts,
    load_trades,
    read_trade_rows,
)
from fxjournal.journal.models import Account

TODAY = date(2024, 3, 1)

CSV_CONTENT = """Date,Pair,Type,Size,Entry Price,Exit Price,P&L,Time
2024-01-02,EUR/USD,Buy,1.0,1.0950,1.1000,50.0,09:30
,,sell,0.5,,,-20,
"""


@pytest.fixture
def trades_csv(tmp_path):
    path = tmp_path / "trades.csv"
    path.write_text(CSV_CONTENT, encoding="utf-8")
    return path


# =============================================================================
# Import Tests
# =============================================================================


class TestImport:
    """Tests for reading and importing spreadsheets."""

    def test_read_rows_blank_cells_are_none(self, trades_csv):
        rows = read_trade_rows(trades_csv)
        assert len(rows) == 2
        assert rows[0]["Pair"] == "EUR/USD"
        assert rows[1]["Pair"] is None
        assert rows[1]["Date"] is None

    def test_import_csv(self, trades_csv):
        trades = import_trades(trades_csv, account_id=1, start_id=10, today=TODAY)
        assert [t.id for t in trades] == [10, 11]
        first, second = trades
        assert first.date == "2024-01-02"
        assert first.type == "buy"
        assert first.pnl == 50.0
        assert first.time == "09:30"
        assert first.account == 1
        assert second.date == "2024-03-01"
        assert second.pair == "Unknown"
        assert second.type == "sell"
        assert second.pnl == -20.0
        assert second.entry_price == 0.0

    def test_import_xlsx(self, tmp_path):
        path = tmp_path / "trades.xlsx"
        pd.DataFrame(
            {
                "Date": ["2024-01-02", "2024-01-03"],
                "Symbol": ["XAUUSD", "US30"],
                "Side": ["BUY", "SELL"],
                "Lots": [0.1, 2],
                "Profit": [125.5, -60],
            }
        ).to_excel(path, index=False, engine="openpyxl")

        trades = import_trades(path, account_id="2", today=TODAY)
        assert [t.pair for t in trades] == ["XAUUSD", "US30"]
        assert [t.type for t in trades] == ["buy", "sell"]
        assert [t.pnl for t in trades] == [125.5, -60.0]
        assert trades[1].size == 2.0
        assert all(t.account == "2" for t in trades)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataError) as exc_info:
            read_trade_rows(tmp_path / "missing.csv")
        assert exc_info.value.error_code is ErrorCodes.DATA_FILE_NOT_FOUND

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "trades.txt"
        path.write_text("Date,Pair\n", encoding="utf-8")
        with pytest.raises(DataError) as exc_info:
            read_trade_rows(path)
        assert exc_info.value.error_code is ErrorCodes.DATA_UNSUPPORTED_FORMAT

    def test_zero_pnl_cell_uses_profit_column(self, tmp_path):
        path = tmp_path / "broker.csv"
        path.write_text("Date,Pair,PnL,Profit\n2024-01-02,EUR/USD,0,50\n", encoding="utf-8")
        assert import_trades(path, today=TODAY)[0].pnl == 50.0

    def test_corrupt_xlsx(self, tmp_path):
        path = tmp_path / "trades.xlsx"
        path.write_text("not a workbook", encoding="utf-8")
        with pytest.raises(DataError) as exc_info:
            read_trade_rows(path)
        assert exc_info.value.error_code is ErrorCodes.DATA_PARSE_ERROR


# =============================================================================
# JSON Loading Tests
# =============================================================================


class TestJsonLoading:
    """Tests for JSON trade and account files."""

    def test_load_trades_json(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text(
            json.dumps(
                {
                    "trades": [
                        {"id": 1, "date": "2024-01-02", "pair": "EUR/USD", "type": "buy", "size": 1, "pnl": 10, "accountId": 1},
                        {"id": 2, "date": "2024-01-03", "pair": "GBP/USD", "type": "sell", "size": 0.5, "pnl": -5},
                    ]
                }
            ),
            encoding="utf-8",
        )
        trades = load_trades(path)
        assert [t.id for t in trades] == [1, 2]
        assert trades[0].account == 1

    def test_load_trades_spreadsheet(self, trades_csv):
        trades = load_trades(trades_csv, account_id=5, start_id=100)
        assert [t.id for t in trades] == [100, 101]
        assert trades[0].account == 5

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DataError) as exc_info:
            load_trades(path)
        assert exc_info.value.error_code is ErrorCodes.DATA_PARSE_ERROR

    def test_json_must_be_list_of_objects(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(DataError):
            load_trades(path)

    def test_load_accounts(self, tmp_path):
        path = tmp_path / "accounts.json"
        path.write_text(
            json.dumps([{"id": 1, "name": "Main", "broker": "OANDA", "balance": "10000.50"}]),
            encoding="utf-8",
        )
        accounts = load_accounts(path)
        assert accounts == [Account(id=1, name="Main", broker="OANDA", balance=10000.5)]

    def test_malformed_json_trade_is_rejected(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text(
            json.dumps(
                [
                    {"id": 1, "date": "2024-01-02", "pair": "EUR/USD", "type": "buy", "size": 1},
                    {"id": 2, "date": "not-a-date", "pair": "EUR/USD", "type": "buy", "size": -3, "time": "99:99"},
                ]
            ),
            encoding="utf-8",
        )
        with pytest.raises(ValidationError) as exc_info:
            load_trades(path)
        assert exc_info.value.error_code is ErrorCodes.VALIDATION_INVALID_TRADE
        assert exc_info.value.context["index"] == 1

    def test_json_trade_without_size_is_rejected(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text(json.dumps([{"id": 1, "date": "2024-01-02", "pair": "EUR/USD", "type": "buy"}]), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_trades(path)

    def test_account_without_name_is_rejected(self, tmp_path):
        path = tmp_path / "accounts.json"
        path.write_text(json.dumps({"accounts": [{"id": 1, "balance": 100}]}), encoding="utf-8")
        with pytest.raises(ValidationError) as exc_info:
            load_accounts(path)
        assert exc_info.value.error_code is ErrorCodes.VALIDATION_INVALID_ACCOUNT


# =============================================================================
# Export Tests
# =============================================================================


class TestExport:
    """Tests for exporting trades."""

    def test_export_rows(self, sample_trades, sample_accounts):
        rows = export_rows(sample_trades, sample_accounts)
        assert list(rows[0]) == EXPORT_COLUMNS
        assert rows[0]["Account"] == "Main"
        assert rows[2]["Account"] == "Swing"
        # String account id "1" still resolves
        assert rows[7]["Account"] == "Main"

    def test_unknown_account(self, trade_factory, sample_accounts):
        rows = export_rows(
            [trade_factory(1, 10, account=42), trade_factory(2, 10)], sample_accounts
        )
        assert [r["Account"] for r in rows] == ["Unknown", "Unknown"]

    def test_export_csv(self, tmp_path, sample_trades, sample_accounts):
        path = export_trades(sample_trades, sample_accounts, tmp_path / "out.csv")
        frame = pd.read_csv(path)
        assert list(frame.columns) == EXPORT_COLUMNS
        assert len(frame) == 8
        assert frame["P&L"].sum() == pytest.approx(145.5)

    def test_export_xlsx_round_trip(self, tmp_path, sample_trades, sample_accounts):
        path = export_trades(sample_trades, sample_accounts, tmp_path / "out.xlsx")
        trades = import_trades(path, today=TODAY)
        assert [t.pair for t in trades] == [t.pair for t in sample_trades]
        assert sum(t.pnl for t in trades) == pytest.approx(145.5)

    def test_export_empty(self, tmp_path):
        path = export_trades([], [], tmp_path / "empty.csv")
        assert list(pd.read_csv(path).columns) == EXPORT_COLUMNS

    def test_export_unsupported_extension(self, tmp_path, sample_trades):
        with pytest.raises(DataError) as exc_info:
            export_trades(sample_trades, [], tmp_path / "out.pdf")
        assert exc_info.value.error_code is ErrorCodes.DATA_UNSUPPORTED_FORMAT

    def test_export_to_missing_directory(self, tmp_path, sample_trades):
        with pytest.raises(DataError) as exc_info:
            export_trades(sample_trades, [], tmp_path / "nope" / "out.csv")
        assert exc_info.value.error_code is ErrorCodes.DATA_EXPORT_FAILED

    def test_default_export_filename(self):
        assert default_export_filename(date(2024, 1, 5)) == "fx-trades-2024-01-05.xlsx"
