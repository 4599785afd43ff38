"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Every field has a default so the handler can be constructed inside a
host process that provides no environment at all.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Attribute names of the quote/opportunity schema are configurable because
  custom fields carry publisher prefixes that differ per organization

Usage:
    from src.core.config import settings

    amount_field = settings.quote_amount_attribute
    if settings.dataverse_url:
        # Talk to a live organization
"""

import re
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.constants import RECORD_STORE_TIMEOUT_DEFAULT
from src.core.enums import Environment

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Service and schema settings, read from environment variables.

    Field names map to upper-case variables (QUOTE_AMOUNT_ATTRIBUTE,
    DATAVERSE_URL, ...). Unset variables fall back to the defaults below.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, detailed errors)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="Opportunity Quote Sum",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL of the webhook service (problem type URIs)",
    )
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API v1 route prefix",
    )

    # Quote / opportunity schema
    quote_status_attribute: str = Field(
        default="statuscode",
        description="Quote status reason attribute that triggers a recompute",
    )
    quote_parent_attribute: str = Field(
        default="opportunityid",
        description="Quote lookup attribute referencing the parent opportunity",
    )
    quote_amount_attribute: str = Field(
        default="rhs_totalamountrhs",
        description="Quote currency attribute summed into the opportunity",
    )
    opportunity_total_attribute: str = Field(
        default="new_qoutesamountcurrency",
        description="Opportunity currency attribute receiving the Won total",
    )
    won_status_code: int = Field(
        default=4,
        description="Quote status reason value meaning Won",
    )
    default_currency: str = Field(
        default="USD",
        description="Currency of the written total when no quote contributes",
    )

    # Dataverse Web API (optional; in-memory store is used when unset)
    dataverse_url: str | None = Field(
        default=None,
        description="Organization URL (e.g., https://contoso.crm.dynamics.com)",
    )
    dataverse_api_version: str = Field(
        default="v9.2",
        description="Dataverse Web API version segment",
    )
    dataverse_access_token: str | None = Field(
        default=None,
        description="OAuth bearer token for the Dataverse Web API",
    )
    dataverse_timeout: float = Field(
        default=RECORD_STORE_TIMEOUT_DEFAULT,
        description="HTTP timeout in seconds for Dataverse calls",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("won_status_code")
    @classmethod
    def validate_won_status_code(cls, v: int) -> int:
        """Status reason option values are positive integers."""
        if v <= 0:
            raise ValueError("won_status_code must be a positive option value")
        return v

    @field_validator("default_currency")
    @classmethod
    def validate_default_currency(cls, v: str) -> str:
        """Reject a malformed code at load time, not on the first recompute."""
        normalized = v.upper().strip()
        if not re.fullmatch(r"[A-Z]{3}", normalized):
            raise ValueError(f"default_currency must be a 3-letter ISO 4217 code: {v}")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept any case; store the uppercase name structlog filtering expects."""
        normalized = v.upper().strip()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return normalized

    @field_validator("api_base_url", "dataverse_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Strip trailing slashes so paths can be appended with a single '/'."""
        return v.rstrip("/") if v else v

    @property
    def is_development(self) -> bool:
        """Colored console logs (see the logger container)."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process."""
    return Settings()


# Module-level instance for import-time users (routers, error builders)
settings = get_settings()
