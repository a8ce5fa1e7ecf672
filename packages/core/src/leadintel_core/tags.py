"""CRM tag derivation.

Tags are built category by category in a fixed order. Within a category a
token appears once; the same token coming from two different categories is
kept twice.

Budget brackets come from one of two named tables. The standard table is
what the CRM sync writes; the compact table is what the property survey
form offers.
"""

import re
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from .models import AffordabilityResult, EngagementCounters, LeadPreferences, LeadQuality

logger = structlog.get_logger()

_WHITESPACE = re.compile(r"\s+")


def normalize_tag(value: str) -> str:
    """Lowercase, trim, and hyphenate internal whitespace runs.

    >>> normalize_tag("  Liberty   Village ")
    'liberty-village'
    """
    return _WHITESPACE.sub("-", str(value).strip()).lower()


# =============================================================================
# BUDGET BRACKETS
# =============================================================================


class BudgetBracketTable(str, Enum):
    """Named budget bracket vocabularies."""

    STANDARD = "standard"
    COMPACT = "compact"


# (exclusive upper bound, label); the last bracket has no upper bound
BracketRows = tuple[tuple[Optional[float], str], ...]

STANDARD_BRACKETS: BracketRows = (
    (500_000, "under-500k"),
    (750_000, "500k-750k"),
    (1_000_000, "750k-1m"),
    (1_500_000, "1m-1.5m"),
    (2_000_000, "1.5m-2m"),
    (None, "2m-plus"),
)

COMPACT_BRACKETS: BracketRows = (
    (500_000, "under-500k"),
    (750_000, "500k-750k"),
    (1_000_000, "750k-1m"),
    (2_000_000, "1m-2m"),
    (None, "2m-plus"),
)

BRACKET_TABLES: dict[BudgetBracketTable, BracketRows] = {
    BudgetBracketTable.STANDARD: STANDARD_BRACKETS,
    BudgetBracketTable.COMPACT: COMPACT_BRACKETS,
}


def budget_bracket(
    price: Optional[float],
    table: BudgetBracketTable = BudgetBracketTable.STANDARD,
) -> Optional[str]:
    """Look up the bracket label for a price.

    Args:
        price: Budget or home price
        table: Which bracket vocabulary to use

    Returns:
        The bracket label (e.g. "750k-1m"), or None for missing or
        non-positive prices
    """
    if price is None or not price > 0:
        return None
    for upper, label in BRACKET_TABLES[BudgetBracketTable(table)]:
        if upper is None or price < upper:
            return label
    # unreachable: every table ends with an open bracket
    raise AssertionError("bracket table has no open-ended top bracket")


# =============================================================================
# RULES
# =============================================================================


class TagCategory(str, Enum):
    """Tag categories, declared in output order."""

    SOURCE = "source"
    QUALITY = "quality"
    TIMELINE = "timeline"
    LEAD_TYPE = "lead-type"
    QUALIFICATION = "qualification"
    PROPERTY_TYPE = "property-type"
    BUDGET_BRACKET = "budget-bracket"
    LOCATION = "location"
    URGENCY = "urgency"
    ENGAGEMENT = "engagement"
    VIEWED_COUNT = "viewed-count"


class TagRules(BaseModel):
    """Tunable tagging vocabulary and thresholds."""

    model_config = ConfigDict(frozen=True)

    site_tag: str = Field(default="website", min_length=1)
    default_source: Optional[str] = Field(
        default=None,
        description="Source tag used when preferences carry none",
    )
    bracket_table: BudgetBracketTable = BudgetBracketTable.STANDARD
    budget_tag_prefix: str = "budget-"
    multiple_searches_threshold: int = Field(default=2, ge=1)
    moderate_engagement_threshold: int = Field(default=3, ge=1)
    high_engagement_threshold: int = Field(default=5, ge=1)


DEFAULT_TAG_RULES = TagRules()


# =============================================================================
# DERIVATION
# =============================================================================


def _add(bucket: list[str], value: Optional[str]) -> None:
    """Append a normalized tag unless blank or already in this category."""
    if value is None:
        return
    tag = normalize_tag(value)
    if tag and tag not in bucket:
        bucket.append(tag)


def derive_tags_by_category(
    preferences: LeadPreferences,
    quality: LeadQuality,
    engagement: Optional[EngagementCounters] = None,
    affordability: Optional[AffordabilityResult] = None,
    rules: TagRules = DEFAULT_TAG_RULES,
) -> dict[TagCategory, list[str]]:
    """Derive tags grouped by category.

    Every category is present in the returned dict, in output order, even
    when it contributes no tags.
    """
    engagement = engagement or EngagementCounters()
    tags: dict[TagCategory, list[str]] = {category: [] for category in TagCategory}

    # Source
    _add(tags[TagCategory.SOURCE], rules.site_tag)
    _add(tags[TagCategory.SOURCE], preferences.source or rules.default_source)

    # Quality
    _add(tags[TagCategory.QUALITY], f"{LeadQuality(quality).value}-lead")

    # Timeline
    if preferences.timeline is not None:
        _add(tags[TagCategory.TIMELINE], f"timeline-{preferences.timeline.value}")
    if preferences.seller_timeline is not None:
        _add(
            tags[TagCategory.TIMELINE],
            f"seller-timeline-{preferences.seller_timeline.value}",
        )

    # Lead type
    if preferences.lead_type is not None:
        _add(tags[TagCategory.LEAD_TYPE], preferences.lead_type.value)

    # Qualification
    qualification = tags[TagCategory.QUALIFICATION]
    if preferences.pre_approved:
        _add(qualification, "pre-approved")
    if preferences.first_time_buyer:
        _add(qualification, "first-time-buyer")
    if affordability is not None:
        _add(qualification, "mortgage-estimated")
        if affordability.requires_cmhc:
            _add(qualification, "cmhc-required")

    # Property types
    for property_type in preferences.property_types:
        _add(tags[TagCategory.PROPERTY_TYPE], property_type.value)

    # Budget bracket: explicit budget wins over the solver's price
    price = preferences.budget
    if (price is None or not price > 0) and affordability is not None:
        price = affordability.max_home_price
    label = budget_bracket(price, rules.bracket_table)
    if label is not None:
        _add(tags[TagCategory.BUDGET_BRACKET], f"{rules.budget_tag_prefix}{label}")

    # Location
    _add(tags[TagCategory.LOCATION], preferences.city)
    for neighborhood in preferences.neighborhoods:
        _add(tags[TagCategory.LOCATION], neighborhood)

    # Urgency
    for factor in preferences.urgency_factors:
        _add(tags[TagCategory.URGENCY], factor)

    # Engagement
    if engagement.search_count >= rules.multiple_searches_threshold:
        _add(tags[TagCategory.ENGAGEMENT], "multiple-searches")
    viewed = engagement.viewed_listing_count
    if viewed >= rules.high_engagement_threshold:
        _add(tags[TagCategory.ENGAGEMENT], "high-engagement")
    elif viewed >= rules.moderate_engagement_threshold:
        _add(tags[TagCategory.ENGAGEMENT], "moderate-engagement")

    # Viewed count
    if viewed > 0:
        _add(tags[TagCategory.VIEWED_COUNT], f"viewed-{viewed}-listings")

    return tags


def derive_tags(
    preferences: LeadPreferences,
    quality: LeadQuality,
    engagement: Optional[EngagementCounters] = None,
    affordability: Optional[AffordabilityResult] = None,
    rules: TagRules = DEFAULT_TAG_RULES,
) -> list[str]:
    """Derive the ordered CRM tag list for a lead.

    Args:
        preferences: Captured lead preferences
        quality: Scorer output
        engagement: Tool usage counters (optional)
        affordability: Solver result, used for qualification tags and as the
            budget fallback (optional)
        rules: Tagging vocabulary and thresholds

    Returns:
        Tags in category order. Deterministic for identical inputs.
    """
    by_category = derive_tags_by_category(
        preferences, quality, engagement, affordability, rules
    )
    tags = [tag for category_tags in by_category.values() for tag in category_tags]

    logger.debug(
        "tags_derived",
        tag_count=len(tags),
        categories=[category.value for category, values in by_category.items() if values],
    )
    return tags
