"""Configuration system for LeadIntel Agents.

This module provides Pydantic Settings-based configuration with environment
variable support and defaults matching the current Canadian rules. The core
engine never reads configuration itself: the tool adapters build rule objects
from these settings and pass them in explicitly.

Usage:
    from leadintel_agents.config import LeadIntelConfig

    # Load from environment variables and .env file
    config = LeadIntelConfig()
    config.configure_logging()

    rules = config.mortgage.to_rules()
    tag_rules = config.tags.to_rules()
"""

import logging
from typing import Optional

import structlog
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from leadintel_core.exceptions import ConfigurationError
from leadintel_core.mortgage_rules import (
    AMORTIZATION_YEARS,
    CMHC_PST_RATE,
    DEFAULT_HEATING_MONTHLY,
    DEFAULT_PROPERTY_TAX_RATE,
    GDS_MAX,
    HIGH_DEBT_RATIO,
    INSURABLE_PRICE_LIMIT,
    PRICE_SEARCH_SPAN,
    PRICE_SEARCH_TOLERANCE,
    STRESS_TEST_BUFFER,
    STRESS_TEST_FLOOR,
    TDS_MAX,
    MortgageRules,
)
from leadintel_core.tags import BudgetBracketTable, TagRules


class MortgageRulesConfig(BaseSettings):
    """Mortgage qualification settings.

    Environment Variables:
        LEADINTEL_MORTGAGE_GDS_MAX: Gross debt service limit (fraction)
        LEADINTEL_MORTGAGE_TDS_MAX: Total debt service limit (fraction)
        LEADINTEL_MORTGAGE_HIGH_DEBT_RATIO: Debt share that triggers a warning
        LEADINTEL_MORTGAGE_STRESS_TEST_FLOOR: Minimum qualifying rate (percent)
        LEADINTEL_MORTGAGE_STRESS_TEST_BUFFER: Points added to the contract rate
        LEADINTEL_MORTGAGE_AMORTIZATION_YEARS: Amortization period
        LEADINTEL_MORTGAGE_PROPERTY_TAX_RATE: Annual property tax (fraction of price)
        LEADINTEL_MORTGAGE_HEATING_MONTHLY: Monthly heating estimate
        LEADINTEL_MORTGAGE_PRICE_SEARCH_SPAN: Width of the price search above the down payment
        LEADINTEL_MORTGAGE_PRICE_SEARCH_TOLERANCE: Price search precision
        LEADINTEL_MORTGAGE_INSURABLE_PRICE_LIMIT: Highest price that can carry default insurance
        LEADINTEL_MORTGAGE_CMHC_PST_RATE: Sales tax charged on the insurance premium
    """

    model_config = SettingsConfigDict(
        env_prefix="LEADINTEL_MORTGAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gds_max: float = Field(default=GDS_MAX, gt=0, lt=1, description="GDS limit")
    tds_max: float = Field(default=TDS_MAX, gt=0, lt=1, description="TDS limit")
    high_debt_ratio: float = Field(
        default=HIGH_DEBT_RATIO,
        gt=0,
        le=1,
        description="Debt share of income that adds a warning to the result",
    )
    stress_test_floor: float = Field(
        default=STRESS_TEST_FLOOR,
        ge=0,
        description="Minimum qualifying rate in percent",
    )
    stress_test_buffer: float = Field(
        default=STRESS_TEST_BUFFER,
        ge=0,
        description="Percentage points added to the contract rate",
    )
    amortization_years: int = Field(default=AMORTIZATION_YEARS, gt=0, le=40)
    property_tax_rate: float = Field(
        default=DEFAULT_PROPERTY_TAX_RATE,
        ge=0,
        description="Annual property tax as a fraction of price",
    )
    heating_monthly: float = Field(default=DEFAULT_HEATING_MONTHLY, ge=0)
    price_search_span: float = Field(default=PRICE_SEARCH_SPAN, gt=0)
    price_search_tolerance: float = Field(default=PRICE_SEARCH_TOLERANCE, gt=0)
    insurable_price_limit: float = Field(default=INSURABLE_PRICE_LIMIT, gt=0)
    cmhc_pst_rate: float = Field(default=CMHC_PST_RATE, ge=0, lt=1)

    def to_rules(self) -> MortgageRules:
        """Build the rules object passed to the solver.

        Raises:
            ConfigurationError: If the limits are inconsistent
        """
        if self.gds_max > self.tds_max:
            raise ConfigurationError(
                "GDS limit cannot exceed TDS limit",
                config_key="LEADINTEL_MORTGAGE_GDS_MAX",
                expected=f"<= {self.tds_max}",
                actual=self.gds_max,
            )
        if self.price_search_tolerance >= self.price_search_span:
            raise ConfigurationError(
                "Price search tolerance must be smaller than the search span",
                config_key="LEADINTEL_MORTGAGE_PRICE_SEARCH_TOLERANCE",
                expected=f"< {self.price_search_span}",
                actual=self.price_search_tolerance,
            )
        return MortgageRules(
            gds_max=self.gds_max,
            tds_max=self.tds_max,
            high_debt_ratio=self.high_debt_ratio,
            stress_test_floor=self.stress_test_floor,
            stress_test_buffer=self.stress_test_buffer,
            amortization_years=self.amortization_years,
            property_tax_rate=self.property_tax_rate,
            heating_monthly=self.heating_monthly,
            price_search_span=self.price_search_span,
            price_search_tolerance=self.price_search_tolerance,
            insurable_price_limit=self.insurable_price_limit,
            cmhc_pst_rate=self.cmhc_pst_rate,
        )


class TaggingConfig(BaseSettings):
    """CRM tagging settings.

    Environment Variables:
        LEADINTEL_TAGS_SITE_TAG: Tag added to every lead
        LEADINTEL_TAGS_DEFAULT_SOURCE: Source tag when the lead has none
        LEADINTEL_TAGS_BRACKET_TABLE: Budget bracket vocabulary (standard, compact)
        LEADINTEL_TAGS_MULTIPLE_SEARCHES_THRESHOLD: Searches for "multiple-searches"
        LEADINTEL_TAGS_MODERATE_ENGAGEMENT_THRESHOLD: Views for "moderate-engagement"
        LEADINTEL_TAGS_HIGH_ENGAGEMENT_THRESHOLD: Views for "high-engagement"
    """

    model_config = SettingsConfigDict(
        env_prefix="LEADINTEL_TAGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    site_tag: str = Field(default="website", description="Tag added to every lead")
    default_source: Optional[str] = Field(
        default=None,
        description="Source tag used when a lead carries none",
    )
    bracket_table: BudgetBracketTable = Field(
        default=BudgetBracketTable.STANDARD,
        description="Budget bracket vocabulary",
    )
    multiple_searches_threshold: int = Field(default=2, ge=1)
    moderate_engagement_threshold: int = Field(default=3, ge=1)
    high_engagement_threshold: int = Field(default=5, ge=1)

    @field_validator("site_tag")
    @classmethod
    def validate_site_tag(cls, v: str) -> str:
        """Ensure the site tag is not empty."""
        if not v or not v.strip():
            raise ValueError("Site tag cannot be empty")
        return v.strip()

    def to_rules(self) -> TagRules:
        """Build the rules object passed to the tag deriver.

        Raises:
            ConfigurationError: If the engagement thresholds are out of order
        """
        if self.moderate_engagement_threshold > self.high_engagement_threshold:
            raise ConfigurationError(
                "Moderate engagement threshold cannot exceed the high threshold",
                config_key="LEADINTEL_TAGS_MODERATE_ENGAGEMENT_THRESHOLD",
                expected=f"<= {self.high_engagement_threshold}",
                actual=self.moderate_engagement_threshold,
            )
        try:
            return TagRules(
                site_tag=self.site_tag,
                default_source=self.default_source,
                bracket_table=self.bracket_table,
                multiple_searches_threshold=self.multiple_searches_threshold,
                moderate_engagement_threshold=self.moderate_engagement_threshold,
                high_engagement_threshold=self.high_engagement_threshold,
            )
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid tagging configuration",
                details={"errors": e.errors(include_url=False)},
            ) from e


class LeadIntelConfig(BaseSettings):
    """Root configuration for LeadIntel Agents.

    Environment Variables:
        LEADINTEL_ENV: Environment name (development, staging, production, test)
        LEADINTEL_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        # Load all configuration from environment
        config = LeadIntelConfig()

        # Override specific settings
        config = LeadIntelConfig(
            mortgage=MortgageRulesConfig(stress_test_floor=5.5),
            tags=TaggingConfig(bracket_table="compact"),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="LEADINTEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment settings
    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Nested configuration
    mortgage: MortgageRulesConfig = Field(default_factory=MortgageRulesConfig)
    tags: TaggingConfig = Field(default_factory=TaggingConfig)

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

    def configure_logging(self) -> None:
        """Install a structlog logger that drops events below log_level."""
        level = getattr(logging, self.log_level)
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(level),
        )
