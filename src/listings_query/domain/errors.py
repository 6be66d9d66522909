"""Domain error classes.

Protocol-agnostic errors that represent business failures.
These errors are translated to appropriate formats (HTTP, GraphQL, gRPC) by protocol adapters.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Protocol-agnostic. Contains business error information that
    can be translated to HTTP, GraphQL, or gRPC formats.
    """

    # Default error code (can be used as i18n key)
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message (default locale)
            **context: Additional context for error (e.g., field names, values)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Business rule validation error.

    Examples:
        - Unknown market/type selector
        - Cross-field constraint violations

    Protocol mappings:
        - REST: 422 Unprocessable Entity
        - GraphQL: 200 OK with errors array
        - gRPC: INVALID_ARGUMENT (3)
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: List of field-specific errors, each with 'field' and 'message'
                   Example: [{"field": "market", "message": "Unknown market"}]
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class InternalError(DomainError):
    """Internal domain error (unexpected conditions).

    Should be logged for investigation.

    Protocol mappings:
        - REST: 500 Internal Server Error
        - GraphQL: 200 OK with errors array (generic message)
        - gRPC: INTERNAL (13)
    """

    error_code: str = "INTERNAL_ERROR"


class UnrecognizedKindError(ValidationError):
    """The market/type selector does not name a known listing kind.

    Raised before any query object is built.

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "UNRECOGNIZED_KIND"

    def __init__(self, kind: Any, normalized: str | None = None, field: str = "market") -> None:
        super().__init__(
            f"Listing kind '{normalized if normalized is not None else kind}' does not exist",
            errors=[
                {
                    "field": field,
                    "message": "Must be one of: listing, all, advisor, cpa",
                    "code": "UNRECOGNIZED_KIND",
                }
            ],
            kind=kind,
            normalized=normalized,
        )


class UnrecognizedVariantError(InternalError):
    """A query object carries no discriminant the filter pipeline knows.

    This is a wiring bug (bad override or factory), never a client error.

    Protocol mappings:
        - REST: 500 Internal Server Error
    """

    error_code: str = "UNRECOGNIZED_VARIANT"

    def __init__(self, variant: str) -> None:
        super().__init__(f"Listings query variant '{variant}' does not exist", variant=variant)
