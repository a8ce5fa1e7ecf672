"""LeadIntel Agents - Configuration and chat tool adapters for the lead engine."""

from leadintel_agents.config import (
    LeadIntelConfig,
    MortgageRulesConfig,
    TaggingConfig,
)
from leadintel_agents.tools import (
    build_tools,
    capture_preferences,
    capture_seller,
    estimate_mortgage,
    qualify_lead,
    run_tool,
)

__version__ = "0.1.0"

__all__ = [
    "LeadIntelConfig",
    "MortgageRulesConfig",
    "TaggingConfig",
    "build_tools",
    "capture_preferences",
    "capture_seller",
    "estimate_mortgage",
    "qualify_lead",
    "run_tool",
]
