"""
Pydantic Validation Models

Boundary models for trade, account and filter payloads. They accept both
camelCase and snake_case keys and convert to the journal dataclasses the
analytics engine consumes.
"""

import re
from dataclasses import asdict
from datetime import date
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ErrorCode, ErrorCodes, ValidationError
from ..journal.models import ALL_ACCOUNTS, Account, FilterCriteria, Trade

CLOCK_PATTERN = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")

# =============================================================================
# Custom Field Types
# =============================================================================

IdField = Union[int, str]

PositiveSize = Annotated[
    float,
    Field(gt=0, description="Lot size"),
]

PriceField = Annotated[
    float,
    Field(ge=0, description="Instrument price"),
]

ScoreField = Annotated[
    int,
    Field(ge=0, le=10, description="Journal score"),
]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _check_iso_date(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        date.fromisoformat(v)
    except ValueError:
        raise ValueError(f"Expected an ISO date (YYYY-MM-DD), got {v!r}")
    return v


def _check_clock(v: Optional[str]) -> Optional[str]:
    if v is not None and not CLOCK_PATTERN.match(v):
        raise ValueError(f"Expected a time as HH:MM, got {v!r}")
    return v


class JournalBaseModel(BaseModel):
    """Base model for journal payloads."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",  # API records carry storage columns we do not use
        populate_by_name=True,
    )

    def to_api_response(self) -> Dict[str, Any]:
        """Convert model to API response format (camelCase)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Trade / Account Models
# =============================================================================


class ValidatedTrade(JournalBaseModel):
    """Validated trade record."""

    id: IdField
    date: str
    pair: str = Field(min_length=1, max_length=30)
    type: Literal["buy", "sell"]
    size: PositiveSize
    entry_price: PriceField = Field(default=0.0, alias="entryPrice")
    exit_price: PriceField = Field(default=0.0, alias="exitPrice")
    pnl: float = 0.0
    account: Optional[IdField] = Field(default=None, alias="accountId")
    time: Optional[str] = None
    entry_time: Optional[str] = Field(default=None, alias="entryTime")
    exit_time: Optional[str] = Field(default=None, alias="exitTime")
    exit_date: Optional[str] = Field(default=None, alias="exitDate")
    notes: str = ""
    tags: List[str] = Field(default_factory=list)
    rating: ScoreField = 0
    setup_quality: ScoreField = Field(default=0, alias="setupQuality")
    execution_quality: ScoreField = Field(default=0, alias="executionQuality")
    emotions: List[str] = Field(default_factory=list)
    screenshot_url: str = Field(default="", alias="screenshotUrl")
    lessons_learned: str = Field(default="", alias="lessonsLearned")

    @model_validator(mode="before")
    @classmethod
    def accept_account_key(cls, data: Any) -> Any:
        """Accept ``account`` and ``account_id`` as well as ``accountId``."""
        if isinstance(data, dict) and "accountId" not in data:
            for key in ("account", "account_id"):
                if key in data:
                    data = {**data, "accountId": data[key]}
                    break
        return data

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("pnl", mode="before")
    @classmethod
    def missing_pnl_is_zero(cls, v: Any) -> Any:
        return 0.0 if v is None or v == "" else v

    @field_validator("time", "entry_time", "exit_time", "exit_date", mode="before")
    @classmethod
    def blank_optional(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("date", "exit_date")
    @classmethod
    def validate_dates(cls, v: Optional[str]) -> Optional[str]:
        return _check_iso_date(v)

    @field_validator("time", "entry_time", "exit_time")
    @classmethod
    def validate_clock(cls, v: Optional[str]) -> Optional[str]:
        return _check_clock(v)

    @model_validator(mode="after")
    def validate_exit_after_entry(self) -> "ValidatedTrade":
        """An exit date before the trade date is a data-entry error."""
        if self.exit_date is not None and self.exit_date < self.date:
            raise ValueError(f"exitDate {self.exit_date} is before date {self.date}")
        return self

    def to_trade(self) -> Trade:
        return Trade(
            id=self.id,
            date=self.date,
            pair=self.pair,
            type=self.type,
            size=self.size,
            entry_price=self.entry_price,
            exit_price=self.exit_price,
            pnl=self.pnl,
            account=self.account,
            time=self.time,
            entry_time=self.entry_time,
            exit_time=self.exit_time,
            exit_date=self.exit_date,
            notes=self.notes,
            tags=list(self.tags),
            rating=self.rating,
            setup_quality=self.setup_quality,
            execution_quality=self.execution_quality,
            emotions=list(self.emotions),
            screenshot_url=self.screenshot_url,
            lessons_learned=self.lessons_learned,
        )


class ValidatedAccount(JournalBaseModel):
    """Validated trading account."""

    id: IdField
    name: str = Field(min_length=1, max_length=100)
    broker: str = ""
    balance: float = 0.0

    def to_account(self) -> Account:
        return Account(id=self.id, name=self.name, broker=self.broker, balance=self.balance)


# =============================================================================
# Filter Criteria
# =============================================================================


class ValidatedFilterCriteria(JournalBaseModel):
    """Validated filter parameters; blank values mean the filter is unset."""

    account_id: IdField = Field(default=ALL_ACCOUNTS, alias="accountId")
    date_from: Optional[str] = Field(default=None, alias="dateFrom")
    date_to: Optional[str] = Field(default=None, alias="dateTo")
    pair: Optional[str] = None
    type: Optional[Literal["buy", "sell"]] = None
    min_pnl: Optional[float] = Field(default=None, alias="minPnl")
    max_pnl: Optional[float] = Field(default=None, alias="maxPnl")
    search_term: Optional[str] = Field(default=None, alias="searchTerm")
    has_notes: bool = Field(default=False, alias="hasNotes")
    has_rating: bool = Field(default=False, alias="hasRating")

    @field_validator(
        "date_from", "date_to", "pair", "type", "min_pnl", "max_pnl", "search_term",
        mode="before",
    )
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("account_id", mode="before")
    @classmethod
    def blank_account_is_all(cls, v: Any) -> Any:
        return ALL_ACCOUNTS if v is None or v == "" else v

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("date_from", "date_to")
    @classmethod
    def validate_dates(cls, v: Optional[str]) -> Optional[str]:
        return _check_iso_date(v)

    @model_validator(mode="after")
    def validate_ranges(self) -> "ValidatedFilterCriteria":
        """Cross-field validation of the date and P&L ranges."""
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError(f"dateFrom {self.date_from} is after dateTo {self.date_to}")
        if (
            self.min_pnl is not None
            and self.max_pnl is not None
            and self.min_pnl > self.max_pnl
        ):
            raise ValueError(f"minPnl {self.min_pnl} is greater than maxPnl {self.max_pnl}")
        return self

    def to_criteria(self) -> FilterCriteria:
        return FilterCriteria(
            account_id=self.account_id,
            date_from=self.date_from,
            date_to=self.date_to,
            pair=self.pair,
            type=self.type,
            min_pnl=self.min_pnl,
            max_pnl=self.max_pnl,
            search_term=self.search_term,
            has_notes=self.has_notes,
            has_rating=self.has_rating,
        )


# =============================================================================
# Conversion Helpers
# =============================================================================


def _to_validation_error(
    e: PydanticValidationError,
    error_code: ErrorCode,
    index: Optional[int] = None,
) -> ValidationError:
    """Wrap the first pydantic error as a journal ValidationError."""
    first = e.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    context: Dict[str, Any] = {"errors": e.error_count()}
    if index is not None:
        context["index"] = index
    return ValidationError(
        error_code,
        field=field,
        detail=f"{field}: {first.get('msg')}" if field else first.get("msg"),
        original_error=e,
        context=context,
    )


def validate_trades(records: Iterable[Dict[str, Any]]) -> List[Trade]:
    """
    Validate trade records and convert them to Trade objects.

    Raises:
        ValidationError: for the first invalid record
    """
    trades = []
    for index, record in enumerate(records):
        try:
            trades.append(ValidatedTrade.model_validate(record).to_trade())
        except PydanticValidationError as e:
            raise _to_validation_error(e, ErrorCodes.VALIDATION_INVALID_TRADE, index) from e
    return trades


def validate_trade_objects(trades: Iterable[Trade]) -> List[Trade]:
    """
    Validate already normalized Trade objects.

    Normalization is permissive (unknown sides, negative sizes and free-form
    dates pass through), so records from outside the journal are checked
    again before they reach the engine.

    Raises:
        ValidationError: for the first invalid trade
    """
    return validate_trades(asdict(trade) for trade in trades)


def validate_accounts(records: Iterable[Dict[str, Any]]) -> List[Account]:
    """
    Validate account records and convert them to Account objects.

    Raises:
        ValidationError: for the first invalid record
    """
    accounts = []
    for index, record in enumerate(records):
        try:
            accounts.append(ValidatedAccount.model_validate(record).to_account())
        except PydanticValidationError as e:
            raise _to_validation_error(e, ErrorCodes.VALIDATION_INVALID_ACCOUNT, index) from e
    return accounts


def validate_criteria(params: Dict[str, Any]) -> FilterCriteria:
    """
    Validate filter parameters and convert them to FilterCriteria.

    Raises:
        ValidationError: if a parameter or range is invalid
    """
    try:
        return ValidatedFilterCriteria.model_validate(params).to_criteria()
    except PydanticValidationError as e:
        raise _to_validation_error(e, ErrorCodes.VALIDATION_INVALID_FILTER) from e
