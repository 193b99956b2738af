"""Custom exceptions for the Billflow engine.

This module provides a hierarchy of exception classes for consistent error
handling across the billing core. All exceptions inherit from BillingError,
making it easy to catch all engine-specific errors.

Example:
    try:
        lifecycle.ensure_editable(quote)
    except DocumentLocked as e:
        # Surface as a user-visible rejection
        return {"error": e.message, "status": e.status}
    except BillingError as e:
        logger.error("billing_operation_failed", error=str(e))
"""

from typing import Any, Optional


class BillingError(Exception):
    """Base exception for all Billflow errors.

    This is the root of the exception hierarchy. Catching this exception
    will catch all engine-specific errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise BillingError("Something went wrong", details={"code": 500})
        BillingError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize BillingError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                user correction or an alternative approach. Defaults to False.
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


class ValidationError(BillingError):
    """Error raised when input data fails validation.

    Raised for malformed input such as a negative quantity or rate, a
    missing required date, or a payment that exceeds the balance due.
    Values are never silently corrected, except for the documented
    half-up rounding of money to two decimal places.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Quantity must not be negative",
        ...     field="quantity",
        ...     value="-2",
        ...     constraint=">= 0",
        ... )
        ValidationError: Quantity must not be negative
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class DocumentLocked(BillingError):
    """Error raised when a document cannot be edited or moved.

    Raised when an edit, delete, conversion or status transition is
    attempted on a quote or invoice whose current status does not allow
    it. This is a user-visible rejection, not an internal failure.

    Attributes:
        document_id: Identifier of the locked document (if known).
        status: The status that blocked the action.
        action: The action that was attempted (e.g. "edit", "transition").

    Example:
        >>> raise DocumentLocked(
        ...     "Only draft quotes can be edited",
        ...     document_id="q-1",
        ...     status="ACCEPTED",
        ...     action="edit",
        ... )
        DocumentLocked: Only draft quotes can be edited
    """

    def __init__(
        self,
        message: str,
        *,
        document_id: Optional[str] = None,
        status: Optional[str] = None,
        action: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize DocumentLocked.

        Args:
            message: Human-readable error description.
            document_id: Identifier of the quote or invoice.
            status: The current status that blocked the action.
            action: The attempted action.
            details: Optional dictionary with additional context.
            recoverable: Defaults to False; the document's status has to
                change through a legal transition first.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.document_id = document_id
        self.status = status
        self.action = action

        if document_id:
            self.details["document_id"] = document_id
        if status:
            self.details["status"] = status
        if action:
            self.details["action"] = action


class PartialComputationFailure(BillingError):
    """Error recorded when one entity of a batch could not be computed.

    Raised (and normally caught) during batch reconciliation when the
    lookup of one project's related documents fails or times out. The
    batch substitutes zeroed metrics for that entity, logs the failure
    and carries on.

    Attributes:
        entity_id: Identifier of the project or document that failed.
        cause: Text of the underlying error.
    """

    def __init__(
        self,
        message: str,
        *,
        entity_id: Optional[str] = None,
        cause: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.entity_id = entity_id
        self.cause = cause

        if entity_id:
            self.details["entity_id"] = entity_id
        if cause:
            self.details["cause"] = cause


class ConfigurationError(BillingError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
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
    "BillingError",
    "ValidationError",
    "DocumentLocked",
    "PartialComputationFailure",
    "ConfigurationError",
]
