"""Configuration system for Billflow.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the billing engine.

Usage:
    from billflow_core.config import BillingConfig

    # Load from environment variables and .env file
    config = BillingConfig()

    # Access amount-in-words settings
    print(config.words.numbering)

    # Access batch reconciliation settings
    print(config.reconciliation.project_timeout)
"""

import logging
from enum import Enum
from typing import Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class NumberingSystem(str, Enum):
    """Digit grouping used when spelling amounts out in words."""

    INTERNATIONAL = "international"
    INDIAN = "indian"


class ClassifierMode(str, Enum):
    """Which line item classification rule to use."""

    TAGGED = "tagged"
    LEGACY = "legacy"
    STRICT = "strict"


class AmountWordsConfig(BaseSettings):
    """Amount-in-words settings.

    Environment Variables:
        BILLFLOW_WORDS_NUMBERING: international or indian digit grouping
        BILLFLOW_WORDS_CURRENCY_NAME: Optional prefix (e.g. "Indian Rupee")
        BILLFLOW_WORDS_MINOR_UNIT_NAME: Name of the fractional unit
        BILLFLOW_WORDS_SUFFIX: Optional closing word (e.g. "Only")
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLFLOW_WORDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    numbering: NumberingSystem = Field(
        default=NumberingSystem.INTERNATIONAL,
        description="Digit grouping for spelled-out amounts",
    )
    currency_name: Optional[str] = Field(
        default=None,
        description="Text placed before the spelled-out amount",
    )
    minor_unit_name: str = Field(
        default="Cents",
        description="Name of the fractional currency unit",
    )
    suffix: Optional[str] = Field(
        default=None,
        description="Text placed after the spelled-out amount",
    )

    @field_validator("minor_unit_name")
    @classmethod
    def validate_minor_unit_name(cls, v: str) -> str:
        """Ensure minor unit name is not empty."""
        if not v or not v.strip():
            raise ValueError("Minor unit name cannot be empty")
        return v.strip()

    @classmethod
    def indian_rupee(cls) -> "AmountWordsConfig":
        """Preset matching Indian invoices: lakh/crore grouping, paise."""
        return cls(
            numbering=NumberingSystem.INDIAN,
            currency_name="Indian Rupee",
            minor_unit_name="Paise",
            suffix="Only",
        )


class ClassifierConfig(BaseSettings):
    """Line item classifier settings.

    Environment Variables:
        BILLFLOW_CLASSIFIER_MODE: tagged, legacy or strict
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLFLOW_CLASSIFIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mode: ClassifierMode = Field(
        default=ClassifierMode.TAGGED,
        description="Classification rule applied to document rows",
    )


class ReconciliationConfig(BaseSettings):
    """Batch reconciliation settings.

    Environment Variables:
        BILLFLOW_RECONCILIATION_PROJECT_TIMEOUT: Seconds allowed per project
        BILLFLOW_RECONCILIATION_MAX_CONCURRENCY: Projects reconciled at once
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLFLOW_RECONCILIATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds allowed for one project's fetches",
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=256,
        description="Maximum number of projects fetched concurrently",
    )


class TimesheetItemsConfig(BaseSettings):
    """Settings for rows synthesized from logged hours.

    Environment Variables:
        BILLFLOW_TIMESHEET_HEADER_NAME: Header row placed above the hours
        BILLFLOW_TIMESHEET_DATE_FORMAT: strftime format used in row names
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLFLOW_TIMESHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    header_name: str = Field(
        default="Timesheet Hours",
        description="Name of the HEADER row above timesheet rows",
    )
    date_format: str = Field(
        default="%d/%m/%Y",
        description="strftime format for the date in 'Work on <date>'",
    )


class BillingConfig(BaseSettings):
    """Root configuration for Billflow.

    Environment Variables:
        BILLFLOW_ENV: Environment name (development, staging, production, test)
        BILLFLOW_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = BillingConfig(
            words=AmountWordsConfig.indian_rupee(),
            classifier=ClassifierConfig(mode=ClassifierMode.LEGACY),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    words: AmountWordsConfig = Field(default_factory=AmountWordsConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    reconciliation: ReconciliationConfig = Field(default_factory=ReconciliationConfig)
    timesheet_items: TimesheetItemsConfig = Field(default_factory=TimesheetItemsConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


def configure_logging(config: Optional[BillingConfig] = None) -> None:
    """Apply the configured log level to structlog's filtering logger."""
    config = config or BillingConfig()
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.log_level)
        ),
    )
