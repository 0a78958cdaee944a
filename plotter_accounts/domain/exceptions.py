"""Domain exceptions for plotter-accounts.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. The CLI
layer maps them to "Operation failed: <message>" output.
"""

from typing import Any


class PlotterAccountsException(Exception):
    """Base exception for all plotter-accounts errors.

    All custom exceptions inherit from this class so the command layer can
    report them uniformly using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. record_type, key).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(PlotterAccountsException):
    """Raised when input validation fails (e.g. empty username, no prefixes)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundException(PlotterAccountsException):
    """Raised when a requested account or tag definition does not exist."""

    def __init__(self, record_type: str, key: str) -> None:
        """Initialize with record type and key.

        Args:
            record_type: 'account' or 'tag definition'.
            key: Username or tag name that was not found.
        """
        super().__init__(
            f"{record_type} not found: {key}",
            "NOT_FOUND",
            {"record_type": record_type, "key": key},
        )


class AlreadyExistsException(PlotterAccountsException):
    """Raised when creating a record whose key is already taken."""

    def __init__(self, record_type: str, key: str) -> None:
        super().__init__(
            "Already exists",
            "ALREADY_EXISTS",
            {"record_type": record_type, "key": key},
        )


class ConflictException(PlotterAccountsException):
    """Raised when a conditional write lost a race with another writer.

    The caller should re-read and retry; nothing in this package retries.
    """

    def __init__(self, record_type: str, key: str) -> None:
        super().__init__(
            "Transaction for atomic update failed; try again",
            "CONFLICT",
            {"record_type": record_type, "key": key},
        )


class InvalidOperationException(PlotterAccountsException):
    """Raised for semantically forbidden mutations.

    Examples: revoking only the public tag, removing a tag's last prefix,
    modifying or deleting the reserved all tag.
    """

    def __init__(self, message: str, **details_extra: Any) -> None:
        """Initialize with message and optional context.

        Args:
            message: Explanation shown to the operator.
            **details_extra: Optional keys merged into details (e.g. tag).
        """
        super().__init__(message, "INVALID_OPERATION", dict(details_extra))
