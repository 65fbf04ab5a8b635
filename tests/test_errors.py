"""Tests for the error taxonomy."""

import logging

import pytest

from fxjournal.core.errors import (
    ConfigError,
    DataError,
    ErrorCategory,
    ErrorCodes,
    JournalError,
    ValidationError,
    wrap_exception,
)


class TestErrorCodes:
    """Tests for ErrorCode values."""

    def test_str_includes_category(self):
        assert str(ErrorCodes.DATA_FILE_NOT_FOUND) == "DATA_2001"
        assert str(ErrorCodes.CONFIG_INVALID) == "CONFIG_5002"

    def test_codes_are_unique(self):
        codes = [
            str(value)
            for name, value in vars(ErrorCodes).items()
            if name.isupper()
        ]
        assert len(codes) == len(set(codes))


class TestJournalError:
    """Tests for JournalError and its subclasses."""

    def test_messages(self):
        error = DataError(ErrorCodes.DATA_FILE_NOT_FOUND, detail="trades.csv")
        assert error.code == "DATA_2001"
        assert error.category is ErrorCategory.DATA
        assert error.user_message == "The trade file could not be found. (trades.csv)"
        assert error.technical_message == "[DATA_2001] Trade file not found: trades.csv"
        assert str(error) == error.technical_message
        assert error.recovery_hint

    def test_subclass_defaults(self):
        assert DataError().error_code is ErrorCodes.DATA_PARSE_ERROR
        assert ConfigError().error_code is ErrorCodes.CONFIG_INVALID
        assert ValidationError().error_code is ErrorCodes.VALIDATION_INVALID_VALUE

    def test_to_dict(self):
        error = ValidationError(ErrorCodes.VALIDATION_INVALID_TRADE, field="size", detail="must be positive")
        d = error.to_dict()
        assert d["code"] == "VALIDATION_4001"
        assert d["category"] == "VALIDATION"
        assert d["field"] == "size"
        assert "debug" not in d

    def test_to_dict_debug(self):
        original = ValueError("bad")
        error = JournalError(
            ErrorCodes.SYSTEM_INTERNAL_ERROR,
            original_error=original,
            context={"path": "x.csv"},
        )
        debug = error.to_dict(include_debug=True)["debug"]
        assert debug["context"] == {"path": "x.csv"}
        assert "original_traceback" in debug["debugInfo"]

    def test_log_uses_severity(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="fxjournal.core.errors"):
            DataError(ErrorCodes.DATA_UNSUPPORTED_FORMAT, detail=".pdf").log()
        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].ctx_error_code == "DATA_2002"


class TestWrapException:
    """Tests for wrap_exception."""

    def test_passes_journal_errors_through(self):
        error = DataError()
        assert wrap_exception(error) is error

    @pytest.mark.parametrize(
        "exception, code",
        [
            (FileNotFoundError("x"), ErrorCodes.DATA_FILE_NOT_FOUND),
            (ValueError("x"), ErrorCodes.VALIDATION_INVALID_VALUE),
            (KeyError("x"), ErrorCodes.VALIDATION_INVALID_VALUE),
            (RuntimeError("x"), ErrorCodes.SYSTEM_INTERNAL_ERROR),
        ],
    )
    def test_maps_exception_types(self, exception, code):
        wrapped = wrap_exception(exception)
        assert wrapped.error_code is code
        assert wrapped.original_error is exception
