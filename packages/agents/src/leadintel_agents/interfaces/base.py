"""Framework-agnostic tool interfaces for LeadIntel.

This module defines the contract between the lead intelligence engine and
whatever conversational tool dispatcher calls it. The dispatcher sends
JSON-like arguments and receives a ToolResult it can serialize as-is.

Design Goals:
- Framework independence: No imports from any LLM or chat framework
- Duck typing: Any class with matching attributes and methods is compatible
- Displayable failures: Errors carry a message meant for the end user

Example Usage:
    ```python
    from leadintel_agents.interfaces.base import ToolProtocol, ToolResult

    class EchoTool:
        name = "echo"
        description = "Repeats its arguments."

        def run(self, arguments: dict) -> ToolResult:
            return ToolResult.success(arguments, message="Done.")

    # EchoTool is compatible with ToolProtocol without inheriting from it
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, Field


# =============================================================================
# TYPE VARIABLES
# =============================================================================

ResultT = TypeVar("ResultT")
"""Type variable for result data types."""


# =============================================================================
# ENUMERATIONS
# =============================================================================

class ToolStatus(str, Enum):
    """Status codes for tool results."""

    SUCCESS = "success"
    """Tool completed successfully."""

    ERROR = "error"
    """Tool could not complete; ``message`` explains why."""


class FallbackAction(str, Enum):
    """Follow-up the dispatcher should offer after a failure."""

    HANDOFF_TO_AGENT = "handoff-to-agent"
    """Offer to connect the user with a human agent."""


# =============================================================================
# RESULT MODELS
# =============================================================================

class ToolResult(BaseModel, Generic[ResultT]):
    """Standardized wrapper for tool results.

    Attributes:
        status: success or error
        data: The payload, typed according to the tool
        message: Text for the end user, shown unchanged
        error_kind: Machine-readable failure kind when status is ERROR
        error_details: Additional error context
        fallback_action: Suggested follow-up after a failure
        warnings: Non-fatal notes from the engine
        tool_name: Name of the tool that produced this result
        metadata: Additional context about the call

    Example:
        ```python
        result = ToolResult.error(
            "Down payment cannot be negative.",
            error_kind="negative_down_payment",
            tool_name="estimate_mortgage",
        )
        ```
    """

    status: ToolStatus = Field(
        default=ToolStatus.SUCCESS,
        description="Execution status of the tool"
    )
    data: Optional[Any] = Field(
        default=None,
        description="The result payload"
    )
    message: Optional[str] = Field(
        default=None,
        description="User-facing message"
    )
    error_kind: Optional[str] = Field(
        default=None,
        description="Failure kind if status is ERROR"
    )
    error_details: Optional[dict[str, Any]] = Field(
        default=None,
        description="Additional error context and details"
    )
    fallback_action: Optional[FallbackAction] = Field(
        default=None,
        description="Suggested follow-up after a failure"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-fatal warnings from the engine"
    )
    tool_name: Optional[str] = Field(
        default=None,
        description="Name of the tool that produced this result"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata about the call"
    )

    @property
    def is_success(self) -> bool:
        """Check if the result indicates success."""
        return self.status == ToolStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        """Check if the result indicates an error occurred."""
        return self.status == ToolStatus.ERROR

    @property
    def has_warnings(self) -> bool:
        """Check if any warnings were generated."""
        return len(self.warnings) > 0

    @classmethod
    def success(
        cls,
        data: Any,
        *,
        message: Optional[str] = None,
        tool_name: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
        warnings: Optional[list[str]] = None,
    ) -> ToolResult[Any]:
        """Create a successful result with the given data.

        Args:
            data: The result payload
            message: User-facing message
            tool_name: Name of the tool
            metadata: Additional metadata
            warnings: Any warnings to include

        Returns:
            A ToolResult with SUCCESS status
        """
        return cls(
            status=ToolStatus.SUCCESS,
            data=data,
            message=message,
            tool_name=tool_name,
            metadata=metadata or {},
            warnings=warnings or [],
        )

    @classmethod
    def error(
        cls,
        message: str,
        *,
        error_kind: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        fallback_action: Optional[FallbackAction] = None,
        tool_name: Optional[str] = None,
    ) -> ToolResult[Any]:
        """Create an error result with the given message.

        Args:
            message: User-facing error message
            error_kind: Machine-readable failure kind
            details: Additional error context
            fallback_action: Suggested follow-up
            tool_name: Name of the tool

        Returns:
            A ToolResult with ERROR status
        """
        return cls(
            status=ToolStatus.ERROR,
            message=message,
            error_kind=error_kind,
            error_details=details,
            fallback_action=fallback_action,
            tool_name=tool_name,
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize into the JSON object returned to the dispatcher."""
        payload: dict[str, Any] = {
            "success": self.is_success,
            "message": self.message,
        }
        if self.data is not None:
            data = self.data
            if isinstance(data, BaseModel):
                data = data.model_dump(mode="json", by_alias=True)
            payload.update(data)
        if self.is_error:
            payload["error"] = self.error_kind
            if self.fallback_action is not None:
                payload["fallbackAction"] = self.fallback_action.value
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        return payload


# =============================================================================
# TOOL PROTOCOL
# =============================================================================

@runtime_checkable
class ToolProtocol(Protocol):
    """Protocol defining the contract for all tool implementations.

    - ``name``: Identifier the dispatcher routes on
    - ``description``: Text shown to the model when choosing tools
    - ``run()``: Executes the tool on raw arguments

    Notes:
        - ``run()`` should NOT raise for bad arguments or bad user input.
          Those are returned as ToolResult with ERROR status.
    """

    name: str
    description: str

    def run(self, arguments: dict[str, Any]) -> ToolResult[Any]:
        """Execute the tool.

        Args:
            arguments: JSON-like arguments from the dispatcher

        Returns:
            ToolResult containing the payload or a displayable error
        """
        ...


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    # Type variables
    "ResultT",
    # Enumerations
    "ToolStatus",
    "FallbackAction",
    # Result models
    "ToolResult",
    # Protocols
    "ToolProtocol",
]
