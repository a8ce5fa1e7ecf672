"""Tool handlers exposing the lead intelligence engine to a chat dispatcher.

Each handler takes the raw JSON-like arguments of one tool call, runs the
engine, and returns a ToolResult. Handlers never raise for bad arguments or
bad user input; those come back as error results whose message can be shown
to the user unchanged. Configuration problems do raise (ConfigurationError).

Usage:
    from leadintel_agents.tools import run_tool

    result = run_tool("estimate_mortgage", {"annualIncome": 120000, "downPayment": 100000})
    reply = result.to_payload()
"""

from typing import Any, Callable, Optional

import structlog
from pydantic import ValidationError

from leadintel_core.affordability import solve_affordability
from leadintel_core.models import (
    AffordabilityErrorKind,
    AffordabilityResult,
    AffordabilityValidationFailure,
    LeadQuality,
    LeadType,
    ScoringVariant,
    Timeline,
    dump_estimate,
)
from leadintel_core.scoring import score_lead_quality, weighted_lead_score
from leadintel_core.summary import (
    format_affordability_summary,
    format_cad,
    generate_conversation_summary,
)
from leadintel_core.tags import derive_tags

from .config import LeadIntelConfig
from .interfaces.base import FallbackAction, ToolResult
from .interfaces.types import (
    LeadArguments,
    LeadCapturePayload,
    MortgageEstimateArguments,
    MortgageEstimatePayload,
    QualifyLeadArguments,
    SearchSuggestion,
    SellerArguments,
)

logger = structlog.get_logger()

INVALID_ARGUMENTS_MESSAGE = (
    "I couldn't read some of those details. Could you double-check them for me?"
)

# Failure kinds where a person should take over
HANDOFF_KINDS = frozenset({AffordabilityErrorKind.DEBTS_EXCEED_INCOME})

BUYER_NEXT_STEP = "Show 3 matching listings before asking for contact info"
SELLER_HOT_NEXT_STEP = "Ask for contact info immediately"
SELLER_NEXT_STEP = "Offer free market analysis to capture contact"


# =============================================================================
# HELPERS
# =============================================================================


def _invalid_arguments(tool_name: str, error: ValidationError) -> ToolResult[Any]:
    """Turn a pydantic validation error into a displayable error result."""
    problems = [
        {"field": ".".join(str(part) for part in err["loc"]), "problem": err["msg"]}
        for err in error.errors(include_url=False)
    ]
    logger.info("tool_arguments_invalid", tool=tool_name, error_count=len(problems))
    return ToolResult.error(
        INVALID_ARGUMENTS_MESSAGE,
        error_kind="invalid_arguments",
        details={"errors": problems},
        tool_name=tool_name,
    )


def _affordability_failure(
    tool_name: str,
    failure: AffordabilityValidationFailure,
) -> ToolResult[Any]:
    """Wrap a solver validation failure, adding a hand-off hint where needed."""
    return ToolResult.error(
        failure.message,
        error_kind=failure.kind.value,
        details={"field": failure.field},
        fallback_action=(
            FallbackAction.HANDOFF_TO_AGENT if failure.kind in HANDOFF_KINDS else None
        ),
        tool_name=tool_name,
    )


def _estimate_payload(
    args: MortgageEstimateArguments,
    result: AffordabilityResult,
) -> tuple[MortgageEstimatePayload, str]:
    """Build the estimate card payload and the chat message."""
    price = format_cad(result.max_home_price)
    summary = format_affordability_summary(result)
    search_message = f"Would you like me to search for properties under {price}?"

    payload = MortgageEstimatePayload(
        estimate=dump_estimate(result),
        formatted_summary=summary,
        search_suggestion=SearchSuggestion(
            max_price=result.max_home_price,
            message=search_message,
        ),
        crm_data={
            "mortgageEstimate": {
                "maxHomePrice": result.max_home_price,
                "downPayment": result.down_payment,
                "monthlyPayment": round(result.monthly_payment),
                "annualIncome": result.annual_income,
                "cmhcPremium": result.cmhc_premium,
            }
        },
    )
    message = (
        f"Great! Based on your income of {format_cad(args.annual_income)} and down "
        f"payment of {format_cad(args.down_payment)}, here's your affordability "
        f"estimate:\n\n{summary}\n\n"
        "This is an estimate only. I recommend speaking with a mortgage broker for "
        f"accurate pre-approval. {search_message}"
    )
    return payload, message


def _seller_message(args: SellerArguments) -> str:
    timeline = args.seller_timeline or args.timeline
    property_desc = args.property_types[0].value if args.property_types else "home"

    message = f"Thank you for sharing details about your {property_desc}. "
    if timeline in (Timeline.ASAP, Timeline.ONE_TO_THREE_MONTHS):
        message += (
            "Since you're looking to sell soon, one of our experienced listing agents "
            "would love to provide you with a free market analysis and discuss your "
            "options. "
        )
    elif timeline == Timeline.THREE_TO_SIX_MONTHS:
        message += (
            "With a few months to prepare, we can help you maximize your home's "
            "value before listing. "
        )
    else:
        message += (
            "It's smart to start planning early! We can provide market insights to "
            "help you decide when the time is right. "
        )

    if args.already_listed:
        message += (
            "\n\nI see your property is already listed. If you're not getting the "
            "results you expected, our team specializes in relisting strategies that "
            "get homes sold."
        )

    message += (
        "\n\nWould you like to schedule a free consultation with one of our listing "
        "specialists?"
    )
    return message


# =============================================================================
# TOOL HANDLERS
# =============================================================================


def estimate_mortgage(
    arguments: dict[str, Any],
    config: Optional[LeadIntelConfig] = None,
) -> ToolResult[MortgageEstimatePayload]:
    """Estimate the maximum affordable home price.

    Args:
        arguments: camelCase arguments (annualIncome, downPayment,
            monthlyDebts, currentMortgageRate)
        config: Configuration (default: loaded from the environment)

    Returns:
        ToolResult with a MortgageEstimatePayload, or an error result whose
        message is ready to show
    """
    tool_name = "estimate_mortgage"
    logger.info("tool_invoked", tool=tool_name)

    try:
        args = MortgageEstimateArguments.model_validate(arguments)
    except ValidationError as e:
        return _invalid_arguments(tool_name, e)

    config = config or LeadIntelConfig()
    outcome = solve_affordability(args.to_input(), config.mortgage.to_rules())
    if isinstance(outcome, AffordabilityValidationFailure):
        return _affordability_failure(tool_name, outcome)

    payload, message = _estimate_payload(args, outcome)
    return ToolResult.success(
        payload,
        message=message,
        tool_name=tool_name,
        warnings=outcome.warnings,
        metadata={"rules_version": outcome.rules_version},
    )


def capture_preferences(
    arguments: dict[str, Any],
    config: Optional[LeadIntelConfig] = None,
) -> ToolResult[LeadCapturePayload]:
    """Capture buyer preferences, score them by timeline, and derive tags."""
    tool_name = "capture_preferences"
    logger.info("tool_invoked", tool=tool_name)

    try:
        args = LeadArguments.model_validate(arguments)
    except ValidationError as e:
        return _invalid_arguments(tool_name, e)

    config = config or LeadIntelConfig()
    signals = args.to_signals(has_phone=args.has_phone)
    quality = score_lead_quality(signals, ScoringVariant.TIMELINE)
    engagement = args.to_engagement()

    payload = LeadCapturePayload(
        lead_quality=quality,
        scoring_variant=ScoringVariant.TIMELINE,
        tags=derive_tags(args, quality, engagement, rules=config.tags.to_rules()),
        summary=generate_conversation_summary(args, engagement=engagement),
        next_step=BUYER_NEXT_STEP,
    )
    return ToolResult.success(
        payload,
        message="Preferences captured successfully",
        tool_name=tool_name,
    )


def capture_seller(
    arguments: dict[str, Any],
    config: Optional[LeadIntelConfig] = None,
) -> ToolResult[LeadCapturePayload]:
    """Capture a seller lead and score it by the seller timeline."""
    tool_name = "capture_seller"
    logger.info("tool_invoked", tool=tool_name)

    try:
        args = SellerArguments.model_validate(arguments)
    except ValidationError as e:
        return _invalid_arguments(tool_name, e)

    config = config or LeadIntelConfig()
    args = args.model_copy(update={"lead_type": LeadType.SELLER})
    signals = args.to_signals(has_phone=args.has_phone)
    quality = score_lead_quality(signals, ScoringVariant.SELLER)
    engagement = args.to_engagement()

    payload = LeadCapturePayload(
        lead_quality=quality,
        scoring_variant=ScoringVariant.SELLER,
        tags=derive_tags(args, quality, engagement, rules=config.tags.to_rules()),
        summary=generate_conversation_summary(args, engagement=engagement),
        next_step=SELLER_HOT_NEXT_STEP if quality == LeadQuality.HOT else SELLER_NEXT_STEP,
    )
    return ToolResult.success(payload, message=_seller_message(args), tool_name=tool_name)


def qualify_lead(
    arguments: dict[str, Any],
    config: Optional[LeadIntelConfig] = None,
) -> ToolResult[LeadCapturePayload]:
    """Run the full flow: optional estimate, weighted score, tags, summary.

    The estimate runs only when both annualIncome and downPayment are given.
    An estimate that fails validation fails the whole call, so the user sees
    the solver's message instead of a score built without it.
    """
    tool_name = "qualify_lead"
    logger.info("tool_invoked", tool=tool_name)

    try:
        args = QualifyLeadArguments.model_validate(arguments)
    except ValidationError as e:
        return _invalid_arguments(tool_name, e)

    config = config or LeadIntelConfig()

    affordability: Optional[AffordabilityResult] = None
    mortgage_args = args.mortgage_arguments()
    if mortgage_args is not None:
        outcome = solve_affordability(mortgage_args.to_input(), config.mortgage.to_rules())
        if isinstance(outcome, AffordabilityValidationFailure):
            return _affordability_failure(tool_name, outcome)
        affordability = outcome

    signals = args.to_signals(
        has_phone=args.has_phone,
        has_mortgage_estimate=affordability is not None,
    )
    quality = score_lead_quality(signals, ScoringVariant.WEIGHTED)
    engagement = args.to_engagement()

    payload = LeadCapturePayload(
        lead_quality=quality,
        scoring_variant=ScoringVariant.WEIGHTED,
        score=weighted_lead_score(signals),
        tags=derive_tags(
            args,
            quality,
            engagement,
            affordability,
            rules=config.tags.to_rules(),
        ),
        summary=generate_conversation_summary(args, affordability, engagement),
        estimate=dump_estimate(affordability) if affordability is not None else None,
    )
    return ToolResult.success(
        payload,
        message=f"Lead qualified as {quality.value}",
        tool_name=tool_name,
        warnings=affordability.warnings if affordability is not None else [],
    )


# =============================================================================
# REGISTRY
# =============================================================================


class FunctionTool:
    """Adapts a handler function to ToolProtocol."""

    def __init__(
        self,
        name: str,
        description: str,
        handler: Callable[..., ToolResult[Any]],
        config: Optional[LeadIntelConfig] = None,
    ):
        self.name = name
        self.description = description
        self._handler = handler
        self._config = config

    def run(self, arguments: dict[str, Any]) -> ToolResult[Any]:
        return self._handler(arguments, self._config)

    def __repr__(self) -> str:
        return f"FunctionTool(name={self.name!r})"


TOOL_DESCRIPTIONS: dict[str, tuple[str, Callable[..., ToolResult[Any]]]] = {
    "estimate_mortgage": (
        "Calculate the maximum affordable home price under Canadian GDS/TDS rules. "
        "Use when the user is not pre-approved or asks what they can afford.",
        estimate_mortgage,
    ),
    "capture_preferences": (
        "Capture buyer preferences (timeline, locations, property types, urgency) "
        "and score the lead.",
        capture_preferences,
    ),
    "capture_seller": (
        "Capture seller details and qualify their intent by selling timeline.",
        capture_seller,
    ),
    "qualify_lead": (
        "Score a lead from all captured signals and derive its CRM tags.",
        qualify_lead,
    ),
}


def build_tools(config: Optional[LeadIntelConfig] = None) -> dict[str, FunctionTool]:
    """Build every tool, bound to one configuration."""
    return {
        name: FunctionTool(name, description, handler, config)
        for name, (description, handler) in TOOL_DESCRIPTIONS.items()
    }


def run_tool(
    name: str,
    arguments: dict[str, Any],
    config: Optional[LeadIntelConfig] = None,
) -> ToolResult[Any]:
    """Dispatch a tool call by name.

    Unknown tool names return an error result rather than raising.
    """
    entry = TOOL_DESCRIPTIONS.get(name)
    if entry is None:
        logger.warning("tool_unknown", tool=name)
        return ToolResult.error(
            f"Unknown tool: {name}",
            error_kind="unknown_tool",
            tool_name=name,
        )
    _, handler = entry
    return handler(arguments, config)
