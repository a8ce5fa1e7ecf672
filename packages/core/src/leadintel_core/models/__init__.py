"""Value objects for leadintel-core.

This package provides:
- Affordability solver input, result and validation failure (affordability.py)
- Lead vocabularies, scoring signals and captured preferences (lead.py)
- Required income, stress test and CMHC calculator models (qualification.py)
"""

from leadintel_core.models.affordability import (
    AffordabilityErrorKind,
    AffordabilityInput,
    AffordabilityOutcome,
    AffordabilityResult,
    AffordabilityValidationFailure,
    dump_estimate,
    unwrap_affordability,
)
from leadintel_core.models.lead import (
    EngagementCounters,
    LeadPreferences,
    LeadQuality,
    LeadSignals,
    LeadType,
    PropertyType,
    ScoringVariant,
    Timeline,
)
from leadintel_core.models.qualification import (
    CmhcInput,
    CmhcResult,
    RequiredIncomeInput,
    RequiredIncomeResult,
    StressTestInput,
    StressTestResult,
)

__all__ = [
    # Affordability
    "AffordabilityErrorKind",
    "AffordabilityInput",
    "AffordabilityOutcome",
    "AffordabilityResult",
    "AffordabilityValidationFailure",
    "dump_estimate",
    "unwrap_affordability",
    # Lead
    "EngagementCounters",
    "LeadPreferences",
    "LeadQuality",
    "LeadSignals",
    "LeadType",
    "PropertyType",
    "ScoringVariant",
    "Timeline",
    # Qualification calculators
    "CmhcInput",
    "CmhcResult",
    "RequiredIncomeInput",
    "RequiredIncomeResult",
    "StressTestInput",
    "StressTestResult",
]
