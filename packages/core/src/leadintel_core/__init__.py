"""LeadIntel Core - Affordability, lead scoring and CRM tagging."""

__version__ = "0.1.0"

from .affordability import solve_affordability
from .calculators import (
    calculate_cmhc_premium,
    calculate_required_income,
    calculate_stress_test,
)
from .exceptions import AffordabilityValidationError, ConfigurationError, LeadIntelError
from .models import (
    AffordabilityInput,
    AffordabilityResult,
    AffordabilityValidationFailure,
    EngagementCounters,
    LeadPreferences,
    LeadQuality,
    LeadSignals,
    ScoringVariant,
)
from .mortgage_rules import DEFAULT_RULES, MortgageRules
from .scoring import score_lead_quality
from .summary import format_affordability_summary, generate_conversation_summary
from .tags import DEFAULT_TAG_RULES, BudgetBracketTable, TagRules, budget_bracket, derive_tags

__all__ = [
    "solve_affordability",
    "calculate_required_income",
    "calculate_stress_test",
    "calculate_cmhc_premium",
    "score_lead_quality",
    "derive_tags",
    "budget_bracket",
    "format_affordability_summary",
    "generate_conversation_summary",
    "AffordabilityInput",
    "AffordabilityResult",
    "AffordabilityValidationFailure",
    "EngagementCounters",
    "LeadPreferences",
    "LeadQuality",
    "LeadSignals",
    "ScoringVariant",
    "MortgageRules",
    "DEFAULT_RULES",
    "TagRules",
    "DEFAULT_TAG_RULES",
    "BudgetBracketTable",
    "LeadIntelError",
    "AffordabilityValidationError",
    "ConfigurationError",
]
