"""Custom exceptions for the lead intelligence engine.

The engine itself reports input problems as returned values (see
``AffordabilityValidationFailure``). These exceptions exist for callers that
prefer raising, and for configuration problems that cannot be recovered at
runtime. All exceptions inherit from LeadIntelError.

Example:
    try:
        result = unwrap_affordability(solve_affordability(inputs))
    except AffordabilityValidationError as e:
        if e.recoverable:
            # Ask the user to correct the value
            reply(e.message)
        else:
            raise
    except LeadIntelError as e:
        logger.error("lead_intel_failed", error=str(e))
"""

from typing import Any, Optional


class LeadIntelError(Exception):
    """Base exception for all lead intelligence errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise LeadIntelError("Something went wrong", details={"code": 500})
        LeadIntelError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize LeadIntelError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be fixed by the caller, for
                example by asking the user for corrected input.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class AffordabilityValidationError(LeadIntelError):
    """Error raised when affordability inputs fail validation.

    The solver never raises this itself. It is produced from a returned
    failure by ``AffordabilityValidationFailure.to_exception()``.

    Attributes:
        kind: Machine-readable failure kind (e.g. "invalid_income").
        field: The input field that failed validation.
        value: The rejected value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise AffordabilityValidationError(
        ...     "Down payment cannot be negative.",
        ...     kind="negative_down_payment",
        ...     field="down_payment",
        ...     value=-1,
        ...     constraint="down_payment >= 0",
        ... )
        AffordabilityValidationError: Down payment cannot be negative.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize AffordabilityValidationError.

        Args:
            message: Display-ready error description.
            kind: Machine-readable failure kind.
            field: The name of the input field that failed validation.
            value: The rejected value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the user can fix the input. Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.kind = kind
        self.field = field
        self.value = value
        self.constraint = constraint

        if kind:
            self.details["kind"] = kind
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ConfigurationError(LeadIntelError):
    """Error raised when configuration is invalid or missing.

    Configuration errors are typically fatal and require administrator
    intervention.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Engagement thresholds out of order",
        ...     config_key="LEADINTEL_TAGS_HIGH_ENGAGEMENT_THRESHOLD",
        ...     expected="greater than the moderate threshold",
        ... )
        ConfigurationError: Engagement thresholds out of order
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "LeadIntelError",
    "AffordabilityValidationError",
    "ConfigurationError",
]
