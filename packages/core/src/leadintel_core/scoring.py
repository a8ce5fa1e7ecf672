"""Lead quality scoring.

Three call sites score leads, each with its own rule set. They are kept as
separate named functions and are never blended:

- Weighted (``score_lead_weighted``): points from rich conversation signals.
- Timeline (``score_lead_by_timeline``): precedence rules used when
  buyer preferences are captured.
- Seller (``score_seller_lead``): precedence rules used when seller details
  are captured.

All functions are total: any LeadSignals value yields a LeadQuality.
"""

from typing import Callable

import structlog

from .models import LeadQuality, LeadSignals, ScoringVariant, Timeline

logger = structlog.get_logger()


# =============================================================================
# WEIGHTED SCORING
# =============================================================================

HOT_THRESHOLD = 5
WARM_THRESHOLD = 2

PHONE_POINTS = 3
PRE_APPROVED_POINTS = 3
FIRST_TIME_BUYER_POINTS = 1
MORTGAGE_ESTIMATE_POINTS = 1
MAX_URGENCY_POINTS = 2

TIMELINE_POINTS: dict[Timeline, int] = {
    Timeline.ASAP: 3,
    Timeline.IMMEDIATE: 3,
    Timeline.ONE_TO_THREE_MONTHS: 2,
    Timeline.THREE_MONTHS: 2,
    Timeline.THREE_TO_SIX_MONTHS: 1,
    Timeline.SIX_MONTHS: 1,
}


def weighted_lead_score(signals: LeadSignals) -> int:
    """Compute the weighted point total for a set of signals.

    Args:
        signals: Conversation signals

    Returns:
        Point total in the range 0-13
    """
    score = 0

    if signals.has_phone:
        score += PHONE_POINTS
    if signals.pre_approved:
        score += PRE_APPROVED_POINTS

    # Seller conversations only carry seller_timeline
    timeline = signals.timeline or signals.seller_timeline
    if timeline is not None:
        score += TIMELINE_POINTS.get(timeline, 0)

    score += min(len(signals.urgency_factors), MAX_URGENCY_POINTS)

    if signals.first_time_buyer:
        score += FIRST_TIME_BUYER_POINTS
    if signals.has_mortgage_estimate:
        score += MORTGAGE_ESTIMATE_POINTS

    return score


def quality_for_score(score: int) -> LeadQuality:
    """Map a weighted score to its tier."""
    if score >= HOT_THRESHOLD:
        return LeadQuality.HOT
    if score >= WARM_THRESHOLD:
        return LeadQuality.WARM
    return LeadQuality.COLD


def score_lead_weighted(signals: LeadSignals) -> LeadQuality:
    """Score a lead by summing signal points (hot at 5, warm at 2)."""
    return quality_for_score(weighted_lead_score(signals))


# =============================================================================
# PRECEDENCE SCORING
# =============================================================================

HOT_TIMELINES = frozenset({Timeline.IMMEDIATE, Timeline.THREE_MONTHS, Timeline.ASAP})
BROWSING_TIMELINES = frozenset({Timeline.JUST_BROWSING, Timeline.JUST_EXPLORING})

SELLER_HOT_TIMELINES = frozenset({Timeline.ASAP, Timeline.ONE_TO_THREE_MONTHS})
SELLER_COLD_TIMELINES = frozenset({Timeline.JUST_EXPLORING})


def score_lead_by_timeline(signals: LeadSignals) -> LeadQuality:
    """Score a buyer lead by timeline precedence.

    Rules, first match wins:
    1. Near-term timeline (immediate, 3 months, asap) is hot
    2. Any urgency factor is hot
    3. Pre-approval is warm
    4. Browsing timelines are cold
    5. Otherwise warm

    Urgency outranks a browsing timeline, so a browsing lead with an urgency
    factor is hot.
    """
    timeline = signals.timeline
    if timeline in HOT_TIMELINES:
        return LeadQuality.HOT
    if signals.urgency_factors:
        return LeadQuality.HOT
    if signals.pre_approved:
        return LeadQuality.WARM
    if timeline in BROWSING_TIMELINES:
        return LeadQuality.COLD
    return LeadQuality.WARM


def score_seller_lead(signals: LeadSignals) -> LeadQuality:
    """Score a seller lead from the seller timeline alone."""
    timeline = signals.seller_timeline or signals.timeline
    if timeline in SELLER_HOT_TIMELINES:
        return LeadQuality.HOT
    if timeline in SELLER_COLD_TIMELINES:
        return LeadQuality.COLD
    return LeadQuality.WARM


# =============================================================================
# DISPATCH
# =============================================================================

_SCORERS: dict[ScoringVariant, Callable[[LeadSignals], LeadQuality]] = {
    ScoringVariant.WEIGHTED: score_lead_weighted,
    ScoringVariant.TIMELINE: score_lead_by_timeline,
    ScoringVariant.SELLER: score_seller_lead,
}


def score_lead_quality(
    signals: LeadSignals,
    variant: ScoringVariant = ScoringVariant.WEIGHTED,
) -> LeadQuality:
    """Score a lead with the variant for the calling site.

    Args:
        signals: Conversation signals
        variant: Which rule set to apply

    Returns:
        The lead's quality tier
    """
    variant = ScoringVariant(variant)
    quality = _SCORERS[variant](signals)

    logger.debug(
        "lead_scored",
        variant=variant.value,
        quality=quality.value,
        urgency_count=len(signals.urgency_factors),
    )
    return quality
