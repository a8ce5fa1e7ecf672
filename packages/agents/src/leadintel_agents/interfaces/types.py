"""Argument and payload types for the lead intelligence tools.

Arguments arrive from the dispatcher as camelCase JSON; payloads go back
the same way. Each tool has one argument model and one payload model:

1. estimate_mortgage (MortgageEstimateArguments -> MortgageEstimatePayload)
2. capture_preferences (LeadArguments -> LeadCapturePayload)
3. capture_seller (SellerArguments -> LeadCapturePayload)
4. qualify_lead (QualifyLeadArguments -> LeadCapturePayload)
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from leadintel_core.models import (
    AffordabilityInput,
    EngagementCounters,
    LeadPreferences,
    LeadQuality,
    ScoringVariant,
)
from leadintel_core.mortgage_rules import DEFAULT_CONTRACT_RATE

_CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


# =============================================================================
# ARGUMENTS
# =============================================================================


class MortgageEstimateArguments(BaseModel):
    """Arguments for the mortgage estimate tool."""

    model_config = _CAMEL_CONFIG

    annual_income: float = Field(
        description="Total annual household income before taxes (e.g. 150000)"
    )
    down_payment: float = Field(description="Amount saved for down payment")
    monthly_debts: float = Field(
        default=0.0,
        description="Monthly debt payments (car, loans, credit cards)",
    )
    current_mortgage_rate: float = Field(
        default=DEFAULT_CONTRACT_RATE,
        description="Current mortgage rate estimate in percent",
    )

    def to_input(self) -> AffordabilityInput:
        """Convert to solver input."""
        return AffordabilityInput(
            annual_income=self.annual_income,
            down_payment=self.down_payment,
            monthly_debts=self.monthly_debts,
            contract_rate=self.current_mortgage_rate,
        )


class LeadArguments(LeadPreferences):
    """Preference capture arguments: preferences plus contact and usage signals."""

    has_phone: bool = False
    search_count: int = Field(default=0, ge=0)
    viewed_listing_count: int = Field(default=0, ge=0)

    def to_engagement(self) -> EngagementCounters:
        """Tool usage counters for tagging."""
        return EngagementCounters(
            search_count=self.search_count,
            viewed_listing_count=self.viewed_listing_count,
        )


class SellerArguments(LeadArguments):
    """Seller capture arguments."""

    already_listed: bool = Field(
        default=False,
        description="Whether the property is already listed with another agent",
    )


class QualifyLeadArguments(LeadArguments):
    """Full qualification arguments. Financials are optional."""

    annual_income: Optional[float] = None
    down_payment: Optional[float] = None
    monthly_debts: float = 0.0
    current_mortgage_rate: float = DEFAULT_CONTRACT_RATE

    def mortgage_arguments(self) -> Optional[MortgageEstimateArguments]:
        """Estimate arguments, or None when income or down payment is missing."""
        if self.annual_income is None or self.down_payment is None:
            return None
        return MortgageEstimateArguments(
            annual_income=self.annual_income,
            down_payment=self.down_payment,
            monthly_debts=self.monthly_debts,
            current_mortgage_rate=self.current_mortgage_rate,
        )


# =============================================================================
# PAYLOADS
# =============================================================================


class SearchSuggestion(BaseModel):
    """Follow-up property search offered after an estimate."""

    model_config = _CAMEL_CONFIG

    max_price: float
    message: str


class MortgageEstimatePayload(BaseModel):
    """Successful mortgage estimate, ready for the estimate card."""

    model_config = _CAMEL_CONFIG

    display_type: str = "mortgage-card"
    estimate: dict[str, Any] = Field(description="camelCase affordability result")
    formatted_summary: str
    search_suggestion: SearchSuggestion
    crm_data: dict[str, Any] = Field(
        default_factory=dict,
        description="Fields forwarded to the CRM record",
    )


class LeadCapturePayload(BaseModel):
    """Scored and tagged lead."""

    model_config = _CAMEL_CONFIG

    lead_quality: LeadQuality
    scoring_variant: ScoringVariant
    score: Optional[int] = Field(
        default=None,
        description="Weighted point total (weighted variant only)",
    )
    tags: list[str] = Field(default_factory=list)
    summary: str
    next_step: Optional[str] = Field(
        default=None,
        description="What the assistant should do next",
    )
    estimate: Optional[dict[str, Any]] = None


__all__ = [
    "MortgageEstimateArguments",
    "LeadArguments",
    "SellerArguments",
    "QualifyLeadArguments",
    "SearchSuggestion",
    "MortgageEstimatePayload",
    "LeadCapturePayload",
]
