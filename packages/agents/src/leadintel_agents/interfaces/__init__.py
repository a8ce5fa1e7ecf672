"""Framework-agnostic tool interfaces.

This package defines the result wrapper and protocol that every tool
handler satisfies, plus the argument and payload models for each tool.
Nothing here imports a chat or LLM framework.

Available Interfaces:
    ToolProtocol: The protocol for all tool implementations
    ToolResult: Standardized result wrapper for tool outputs
    ToolStatus: Enum for result status codes
    FallbackAction: Enum for suggested follow-ups after a failure

Tool Data Types:
    MortgageEstimateArguments / MortgageEstimatePayload
    LeadArguments, SellerArguments, QualifyLeadArguments / LeadCapturePayload
"""

from leadintel_agents.interfaces.base import (
    # Type variables
    ResultT,
    # Enumerations
    FallbackAction,
    ToolStatus,
    # Result models
    ToolResult,
    # Protocols
    ToolProtocol,
)

from leadintel_agents.interfaces.types import (
    # Arguments
    MortgageEstimateArguments,
    LeadArguments,
    SellerArguments,
    QualifyLeadArguments,
    # Payloads
    SearchSuggestion,
    MortgageEstimatePayload,
    LeadCapturePayload,
)

__all__ = [
    # Type variables
    "ResultT",
    # Enumerations
    "FallbackAction",
    "ToolStatus",
    # Result models
    "ToolResult",
    # Protocols
    "ToolProtocol",
    # Arguments
    "MortgageEstimateArguments",
    "LeadArguments",
    "SellerArguments",
    "QualifyLeadArguments",
    # Payloads
    "SearchSuggestion",
    "MortgageEstimatePayload",
    "LeadCapturePayload",
]
