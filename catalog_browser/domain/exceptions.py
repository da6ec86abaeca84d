"""Domain exceptions.

All browsing-level errors. None of them is fatal to the host process:
the controller turns query failures into an error state, the address
parser falls back to defaults, and preference storage errors are
swallowed by the persistence layer.
"""

from typing import Any


class BrowsingError(Exception):
    """Base class for all browsing exceptions.

    All browsing errors inherit from this class to allow catching
    them at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize browsing error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(BrowsingError):
    """Raised when the page controller attempts an invalid status change."""

    def __init__(
        self,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            current_state: Current load status.
            target_state: Attempted target status.
            allowed_transitions: Statuses reachable from the current one.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition page state from '{current_state}' "
            f"to '{target_state}'. Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Criteria Errors
# ============================================================================


class InvalidCriteriaError(BrowsingError):
    """Raised when a filter value falls outside its allowed domain."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        """Initialize invalid criteria error.

        Args:
            field: Name of the offending criteria field.
            value: The rejected value.
            reason: Explanation of why the value is invalid.
        """
        super().__init__(
            f"Invalid {field} {value!r}: {reason}",
            details={"field": field, "value": value, "reason": reason},
        )


# ============================================================================
# Query Errors
# ============================================================================


class QueryExecutionError(BrowsingError):
    """Raised by a product store when a query cannot be executed.

    Stores wrap driver and transport errors in this type so the page
    controller only has to handle one failure channel.
    """

    def __init__(
        self,
        source: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize query execution error.

        Args:
            source: Store that failed (e.g., "sql", "rest").
            message: Description of the failure.
            status_code: Upstream HTTP status, when there is one.
        """
        super().__init__(
            f"[{source}] {message}",
            details={"source": source, "status_code": status_code},
        )
        self.source = source
        self.status_code = status_code
