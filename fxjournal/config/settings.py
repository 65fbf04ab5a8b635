"""
fxjournal Settings

Analytics and presentation defaults loaded from environment variables
(prefix ``FXJOURNAL_``), an optional ``.env`` file, and an optional YAML
configuration file.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.errors import ConfigError, ErrorCodes

logger = logging.getLogger(__name__)


class JournalSettings(BaseSettings):
    """
    Journal analytics configuration.

    Every field has a default, so an empty environment yields a working
    configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FXJOURNAL_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Trade table
    page_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Trades per page in the trade table.",
    )

    # Summary analytics
    top_pairs_limit: int = Field(
        default=6,
        ge=1,
        le=50,
        description="Number of best pairs kept for the pair chart.",
    )
    min_trades_for_significance: int = Field(
        default=3,
        ge=1,
        description="Minimum trades an hour/weekday bucket needs to be ranked best or worst.",
    )

    # Risk metrics
    var_confidence: float = Field(
        default=0.95,
        gt=0.5,
        lt=1.0,
        description="Confidence level for historical Value at Risk.",
    )
    drawdown_chart_points: int = Field(
        default=30,
        ge=1,
        description="Most recent drawdown points kept for the risk chart.",
    )
    rr_chart_points: int = Field(
        default=50,
        ge=1,
        description="Most recent trades kept for the R/R distribution chart.",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level.",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON structured logs instead of console lines.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


def load_settings(config_path: Optional[Union[str, Path]] = None) -> JournalSettings:
    """
    Build settings from the environment, overlaid with a YAML file.

    Values in the YAML file take precedence over environment variables.

    Args:
        config_path: Optional path to a YAML mapping of setting names

    Returns:
        JournalSettings instance

    Raises:
        ConfigError: If the file is missing, not a mapping, or has invalid values
    """
    overrides = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(
                ErrorCodes.CONFIG_FILE_NOT_FOUND,
                detail=str(path),
            )
        try:
            with path.open("r", encoding="utf-8") as f:
                overrides = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(detail=f"{path}: {e}", original_error=e)

        if not isinstance(overrides, dict):
            raise ConfigError(detail=f"{path}: top level must be a mapping")

    try:
        settings = JournalSettings(**overrides)
    except PydanticValidationError as e:
        raise ConfigError(detail=str(e), original_error=e)

    logger.info(
        "Settings loaded",
        extra={"ctx_config_path": str(config_path) if config_path else None},
    )
    return settings


@lru_cache
def get_settings() -> JournalSettings:
    """Get cached settings from the environment."""
    return JournalSettings()
