"""Display text for affordability estimates and agent-facing lead summaries."""

import math
from typing import Optional

from .models import AffordabilityResult, EngagementCounters, LeadPreferences, LeadType


def format_cad(amount: float) -> str:
    """Format a dollar amount with no cents, e.g. ``$1,234`` or ``-$50``."""
    rounded = math.floor(abs(amount) + 0.5)
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}${rounded:,}"


def format_affordability_summary(result: AffordabilityResult) -> str:
    """Build the multi-line estimate card text.

    Args:
        result: Solver result

    Returns:
        Lines for price, down payment, mortgage, CMHC (when required) and
        monthly payment
    """
    lines = [
        f"Max Home Price: {format_cad(result.max_home_price)}",
        f"Down Payment: {format_cad(result.down_payment)} "
        f"({math.floor(result.down_payment_percent + 0.5)}%)",
        f"Mortgage Amount: {format_cad(result.max_mortgage)}",
    ]
    if result.requires_cmhc:
        lines.append(f"CMHC Insurance: {format_cad(result.cmhc_premium)}")
    lines.append(f"Monthly Payment: {format_cad(result.monthly_payment)}")
    return "\n".join(lines)


def generate_conversation_summary(
    preferences: LeadPreferences,
    affordability: Optional[AffordabilityResult] = None,
    engagement: Optional[EngagementCounters] = None,
) -> str:
    """One-line summary of a lead for the agent reading the CRM record.

    Example: ``Looking to buy condo in Toronto (Liberty Village) budget
    ~$900K - first-time buyer, pre-approved``
    """
    parts: list[str] = []
    searched = engagement is not None and engagement.search_count > 0

    if preferences.lead_type == LeadType.SELLER:
        parts.append("Interested in selling")
    elif preferences.lead_type == LeadType.BUYER or affordability is not None or searched:
        parts.append("Looking to buy")

    if preferences.property_types:
        parts.append(preferences.property_types[0].value)

    if preferences.city:
        parts.append(f"in {preferences.city}")
    if preferences.neighborhoods:
        parts.append(f"({', '.join(preferences.neighborhoods[:2])})")

    budget = preferences.budget
    if not budget and affordability is not None:
        budget = affordability.max_home_price
    if budget and budget > 0:
        parts.append(f"budget ~${budget / 1000:.0f}K")

    flags: list[str] = []
    if preferences.first_time_buyer:
        flags.append("first-time buyer")
    if preferences.pre_approved:
        flags.append("pre-approved")
    if affordability is not None and affordability.requires_cmhc:
        flags.append("needs CMHC")
    if preferences.urgency_factors:
        flags.append(preferences.urgency_factors[0])
    if preferences.timeline is not None:
        flags.append(f"timeline: {preferences.timeline.value}")

    if flags:
        parts.append(f"- {', '.join(flags)}")

    return " ".join(parts) or "General inquiry"
