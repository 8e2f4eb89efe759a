"""
Custom exception classes for the Ascent Finance API.

Services raise these; the handlers in ``src.core.handlers`` turn them into
the failure envelope ``{"success": false, "error", "code"[, "details"]}``.

Exception hierarchy:
    AppException (base, 500)
    ├── AuthenticationError (401)
    │   ├── InvalidCredentialsError
    │   └── InvalidTokenError
    ├── AuthorizationError (403)
    │   ├── InsufficientPermissionsError
    │   └── ForbiddenError
    ├── NotFoundError (404)
    ├── AlreadyExistsError (409)
    ├── ConflictError (409)
    ├── ValidationError (400)
    │   ├── InvalidInputError
    │   └── AlreadyMemberError
    ├── MethodNotAllowedError (405)
    ├── RateLimitExceededError (429)
    ├── FeatureNotImplementedError (501)
    ├── ExternalServiceError (502 or the mapped upstream status)
    └── DependencyFailureError (503)
        ├── DatabaseUnavailableError
        └── IntegrationNotConfiguredError

Each class declares its status, machine code and default message as class
attributes; constructors only take what varies per raise site.
"""

from typing import Any


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    Attributes:
        status_code: HTTP status code for the error
        error_code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error details
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Failure envelope for this error."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        return body


# =============================================================================
# 401 / 403
# =============================================================================


class AuthenticationError(AppException):
    """Caller identity could not be established."""

    status_code = 401
    error_code = "AUTHENTICATION_FAILED"
    default_message = "Authentication failed"


class InvalidCredentialsError(AuthenticationError):
    """Unknown e-mail and wrong password share this message on purpose."""

    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class InvalidTokenError(AuthenticationError):
    error_code = "INVALID_TOKEN"
    default_message = "Invalid or expired token"


class AuthorizationError(AppException):
    status_code = 403
    error_code = "AUTHORIZATION_FAILED"
    default_message = "Access forbidden"


class InsufficientPermissionsError(AuthorizationError):
    """A feature permission or member role is missing."""

    error_code = "INSUFFICIENT_PERMISSIONS"
    default_message = "Insufficient permissions to perform this action"


class ForbiddenError(AuthorizationError):
    """The record exists but lies outside the caller's owner scope."""

    error_code = "FORBIDDEN"
    default_message = "This action is forbidden"


# =============================================================================
# 404 / 409
# =============================================================================


class NotFoundError(AppException):
    """
    A requested resource does not exist (or is hidden from the caller).

    ``NotFoundError("Note")`` reads "Note not found"; pass ``message`` for
    anything else.
    """

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(
        self,
        resource: str = "Resource",
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or f"{resource} not found", details)


class AlreadyExistsError(AppException):
    status_code = 409
    error_code = "ALREADY_EXISTS"

    def __init__(
        self,
        resource: str = "Resource",
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or f"{resource} already exists", details)


class ConflictError(AppException):
    status_code = 409
    error_code = "CONFLICT"
    default_message = "Resource conflict"


# =============================================================================
# 400
# =============================================================================


class ValidationError(AppException):
    """
    Client input rejected.

    Schema failures carry the aggregated message built by
    ``format_validation_errors``.
    """

    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class InvalidInputError(ValidationError):
    """A single named field (query parameter or body key) is missing or wrong."""

    error_code = "INVALID_INPUT"

    def __init__(
        self,
        field: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None:
            message = f"Invalid input for field: {field}" if field else "Invalid input"
        super().__init__(message, details)


class AlreadyMemberError(ValidationError):
    """The invited e-mail already has a member row in the workspace."""

    error_code = "ALREADY_MEMBER"
    default_message = "User is already a member or invited"


# =============================================================================
# 405 / 429 / 501
# =============================================================================


class MethodNotAllowedError(AppException):
    """A calendar action was called with the wrong HTTP method."""

    status_code = 405
    error_code = "METHOD_NOT_ALLOWED"

    def __init__(self, required_method: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"{required_method} method required", details)


class RateLimitExceededError(AppException):
    status_code = 429
    error_code = "RATE_LIMIT_EXCEEDED"
    default_message = "Too many requests. Please try again later."

    def __init__(
        self,
        message: str | None = None,
        retry_after: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if retry_after:
            details = {**(details or {}), "retry_after": retry_after}
        super().__init__(message, details)


class FeatureNotImplementedError(AppException):
    """Endpoint exists in the API surface but has no backend."""

    status_code = 501
    error_code = "NOT_IMPLEMENTED"
    default_message = "This feature is not implemented"


# =============================================================================
# 502 / 503
# =============================================================================


class ExternalServiceError(AppException):
    """
    A third-party API call failed.

    The status is the one mapped for the upstream failure: 401 for an
    invalid external token, 403 for a missing scope, 404 for a missing
    upstream resource, 502 otherwise. ``service`` lands in ``details``.
    """

    status_code = 502
    error_code = "EXTERNAL_SERVICE_ERROR"
    default_message = "External service request failed"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        service: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if service:
            details = {**(details or {}), "service": service}
        super().__init__(message, details, status_code=status_code)


class DependencyFailureError(AppException):
    """A required backing service is unavailable."""

    status_code = 503
    error_code = "DEPENDENCY_FAILURE"
    default_message = "A required service is unavailable. Please try again later."


class DatabaseUnavailableError(DependencyFailureError):
    error_code = "DATABASE_UNAVAILABLE"
    default_message = "Database connection failed. Please try again later."


class IntegrationNotConfiguredError(DependencyFailureError):
    """An integration was called without its credentials configured."""

    error_code = "INTEGRATION_NOT_CONFIGURED"
    default_message = "Integration is not configured"
