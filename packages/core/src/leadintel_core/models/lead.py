"""Lead models: closed vocabularies, scoring signals, and captured preferences.

Timelines, lead types and property types are closed enums so that both
scoring variants and the budget bracket tables only ever see known values.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMERATIONS
# =============================================================================


class LeadQuality(str, Enum):
    """Lead priority tier. Recomputed on every evaluation, never stored."""

    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class Timeline(str, Enum):
    """When a buyer or seller intends to act.

    Buyer and seller call sites use different subsets; both share this type.
    """

    IMMEDIATE = "immediate"
    ASAP = "asap"
    ONE_TO_THREE_MONTHS = "1-3-months"
    THREE_MONTHS = "3-months"
    THREE_TO_SIX_MONTHS = "3-6-months"
    SIX_MONTHS = "6-months"
    TWELVE_MONTHS = "12-months"
    JUST_BROWSING = "just-browsing"
    JUST_EXPLORING = "just-exploring"

    @classmethod
    def parse(cls, value: Any) -> Optional["Timeline"]:
        """Parse a timeline leniently (case, whitespace, legacy aliases).

        Returns None for empty values and raises ValueError for unknown ones.
        """
        if value is None or isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if not key:
            return None
        return cls(_TIMELINE_ALIASES.get(key, key))


_TIMELINE_ALIASES = {
    "3months": Timeline.THREE_MONTHS.value,
    "6months": Timeline.SIX_MONTHS.value,
}


class LeadType(str, Enum):
    """Kind of lead, as recorded on the CRM contact."""

    BUYER = "buyer"
    SELLER = "seller"
    INVESTOR = "investor"
    GENERAL = "general"


class PropertyType(str, Enum):
    """Property types offered by the chat tools."""

    DETACHED = "detached"
    SEMI_DETACHED = "semi-detached"
    TOWNHOUSE = "townhouse"
    CONDO = "condo"


class ScoringVariant(str, Enum):
    """Lead scoring algorithm, selected by call site."""

    WEIGHTED = "weighted"  # rich signals, points based
    TIMELINE = "timeline"  # preference capture, precedence based
    SELLER = "seller"  # seller capture


# =============================================================================
# VALIDATION HELPERS
# =============================================================================


def _clean_factors(value: Any) -> list[str]:
    """Strip urgency factors, drop blanks and repeats, keep first-seen order."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    seen: list[str] = []
    for factor in value:
        text = str(factor).strip()
        if text and text not in seen:
            seen.append(text)
    return seen


# =============================================================================
# SIGNALS AND PREFERENCES
# =============================================================================


class LeadSignals(BaseModel):
    """Signals captured during a conversation, consumed by the scorer."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    has_phone: bool = False
    pre_approved: bool = False
    timeline: Optional[Timeline] = None
    seller_timeline: Optional[Timeline] = None
    urgency_factors: list[str] = Field(
        default_factory=list,
        description="Free-text urgency reasons (relocating, lease ending, ...)",
    )
    first_time_buyer: bool = False
    has_mortgage_estimate: bool = False

    @field_validator("timeline", "seller_timeline", mode="before")
    @classmethod
    def parse_timeline(cls, v: Any) -> Optional[Timeline]:
        """Accept timelines in any case and with legacy aliases."""
        return Timeline.parse(v)

    @field_validator("urgency_factors", mode="before")
    @classmethod
    def clean_urgency_factors(cls, v: Any) -> list[str]:
        """Treat urgency factors as a set of non-blank strings."""
        return _clean_factors(v)


class LeadPreferences(BaseModel):
    """Preferences captured for a lead, consumed by the tag deriver."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "source": "sri-collective",
                    "leadType": "buyer",
                    "timeline": "3-months",
                    "preApproved": True,
                    "propertyTypes": ["condo"],
                    "budget": 900000,
                    "city": "Toronto",
                    "neighborhoods": ["Liberty Village"],
                    "urgencyFactors": ["lease ending"],
                }
            ]
        },
    )

    source: Optional[str] = Field(
        default=None,
        description="Specific source identifier, e.g. the website brand",
    )
    lead_type: Optional[LeadType] = None
    timeline: Optional[Timeline] = None
    seller_timeline: Optional[Timeline] = None
    pre_approved: bool = False
    first_time_buyer: bool = False
    property_types: list[PropertyType] = Field(default_factory=list)
    budget: Optional[float] = Field(
        default=None,
        description="Explicit target price or budget maximum",
    )
    city: Optional[str] = None
    neighborhoods: list[str] = Field(default_factory=list)
    urgency_factors: list[str] = Field(default_factory=list)

    @field_validator("timeline", "seller_timeline", mode="before")
    @classmethod
    def parse_timeline(cls, v: Any) -> Optional[Timeline]:
        """Accept timelines in any case and with legacy aliases."""
        return Timeline.parse(v)

    @field_validator("property_types", mode="before")
    @classmethod
    def parse_property_types(cls, v: Any) -> Any:
        """Lowercase free-text property types before enum validation."""
        if v is None:
            return []
        if isinstance(v, (str, PropertyType)):
            v = [v]
        return [
            item if isinstance(item, PropertyType) else str(item).strip().lower()
            for item in v
        ]

    @field_validator("urgency_factors", mode="before")
    @classmethod
    def clean_urgency_factors(cls, v: Any) -> list[str]:
        """Treat urgency factors as a set of non-blank strings."""
        return _clean_factors(v)

    def to_signals(
        self,
        has_phone: bool = False,
        has_mortgage_estimate: bool = False,
    ) -> LeadSignals:
        """Build scoring signals from these preferences.

        Args:
            has_phone: Whether a phone number was captured
            has_mortgage_estimate: Whether an affordability estimate exists

        Returns:
            LeadSignals carrying the shared fields
        """
        return LeadSignals(
            has_phone=has_phone,
            pre_approved=self.pre_approved,
            timeline=self.timeline,
            seller_timeline=self.seller_timeline,
            urgency_factors=self.urgency_factors,
            first_time_buyer=self.first_time_buyer,
            has_mortgage_estimate=has_mortgage_estimate,
        )


class EngagementCounters(BaseModel):
    """Tool usage counts for the current conversation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    search_count: int = Field(default=0, ge=0)
    viewed_listing_count: int = Field(default=0, ge=0)
