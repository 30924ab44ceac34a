"""
Domain exceptions for the Fateweaver resolution engine.

Purpose
-------
Define the structured exception hierarchy for resolution logic. The engine
entry points coerce bad numbers and fall back on empty pools instead of
raising, so these exceptions are reserved for the strict validators used at
the collaborator boundary (catalog loading, elixir lookup, mode parsing) and
for callers that explicitly opt into strictness.

Design Notes
------------
- All domain exceptions inherit from `FateweaverDomainException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict-like)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `is_retryable`: whether the operation can be retried
  - `error_code`: short, stable identifier for programmatic use
- Helper functions (`get_error_severity`, `should_alert`) centralize common
  exception handling patterns.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging and alerting."""

    DEBUG = "debug"  # Expected, not concerning
    INFO = "info"  # Normal operation (e.g., validation failures)
    WARNING = "warning"  # Concerning but handled
    ERROR = "error"  # Unexpected errors requiring attention
    CRITICAL = "critical"  # System-level failures requiring immediate action


class FateweaverDomainException(Exception):
    """
    Base exception for all Fateweaver domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error (dict-like)
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling

    Example:
        >>> raise FateweaverDomainException(
        ...     "Resolution failed",
        ...     {"reason": "catalog unavailable"}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.is_retryable: bool = (
            is_retryable if is_retryable is not None else self.DEFAULT_RETRYABLE
        )
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}, "
            f"is_retryable={self.is_retryable!r}"
            ")"
        )


class InvalidInputError(FateweaverDomainException):
    """
    Raised by strict validators when an input cannot be coerced.

    The resolution functions themselves never raise this; they coerce
    missing or negative stats to 0 and clamp rolls. It is raised where a
    caller asks for something that has no sensible fallback, such as an
    unknown elixir name or an unknown resolution mode.

    Args:
        field: Name of the offending input
        value: The value that was rejected
        reason: Explanation of why it was rejected
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid {field} {value!r}: {reason}",
            details={
                "field": field,
                "value": repr(value),
                "reason": reason,
            },
            error_code=f"INVALID_{field.upper()}",
        )


class EmptyCandidatePoolError(FateweaverDomainException):
    """
    Raised when a caller requires a pick from a pool that has none.

    The default selectors return an empty pool or the "No Encounter"
    sentinel; `require_candidate` raises this for callers that treat an empty
    pool as a content bug.

    Args:
        pool: Name of the pool (e.g., "loot", "monsters")
        context: Optional structured context (tier, job, region)
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING
    DEFAULT_RETRYABLE = False

    def __init__(self, pool: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.pool = pool
        super().__init__(
            f"No candidates available in {pool} pool",
            details={"pool": pool, **(context or {})},
            error_code="EMPTY_CANDIDATE_POOL",
        )


# Utility functions for exception handling patterns


def get_error_severity(exc: Exception) -> ErrorSeverity:
    """
    Get the severity level of an exception for logging.

    Args:
        exc: Exception to check

    Returns:
        ErrorSeverity level.
    """
    if isinstance(exc, FateweaverDomainException):
        return exc.severity
    return ErrorSeverity.ERROR


def should_alert(exc: Exception) -> bool:
    """True if the exception severity is ERROR or CRITICAL."""
    severity = get_error_severity(exc)
    return severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)


__all__ = [
    "ErrorSeverity",
    "FateweaverDomainException",
    "InvalidInputError",
    "EmptyCandidatePoolError",
    "get_error_severity",
    "should_alert",
]
