"""
Domain error taxonomy.

Every failure a request can end in is one of these exceptions. Handlers in
``schoolcounsel.main`` turn them into the JSON envelope
``{"success": false, "message": ..., "error": {"code": ..., "violations": [...]}}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Violation:
    """One failed field rule."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    code: str = "internal"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, violations: list[Violation] | None = None):
        self.message = message or self.default_message
        self.violations = list(violations or [])
        super().__init__(self.message)

    def to_error(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code}
        if self.violations:
            error["violations"] = [v.as_dict() for v in self.violations]
        return error


# ============================================================================
# 400 - request content
# ============================================================================


class ValidationError(ServiceError):
    """Payload failed one or more field or cross-field rules."""

    status_code = 400
    code = "validation_error"
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, violations: list[Violation] | None = None):
        if message is None and violations:
            message = "Validation failed: " + ", ".join(v.field for v in violations)
        super().__init__(message, violations)


class InvalidSection(ServiceError):
    status_code = 400
    code = "invalid_section"
    default_message = "Invalid section specified"


class Immutable(ServiceError):
    status_code = 400
    code = "immutable"
    default_message = "Cannot update a completed assessment"


class AlreadyCompleted(ServiceError):
    status_code = 400
    code = "already_completed"
    default_message = "Assessment is already completed"


class IncompleteMandatorySection(ServiceError):
    status_code = 400
    code = "incomplete_mandatory_section"
    default_message = (
        "Standardized Tests section is required and must have at least one test record"
    )


# ============================================================================
# 401 / 403 - identity and permissions
# ============================================================================


class Unauthenticated(ServiceError):
    """Missing, malformed or expired bearer token."""

    status_code = 401
    code = "unauthenticated"
    default_message = "Access denied. No token provided."


class InvalidCredentials(Unauthenticated):
    """Unknown identifier or wrong secret. Both cases share one message."""

    code = "invalid_credentials"
    default_message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = 403
    code = "forbidden"
    default_message = "Access denied. Insufficient permissions."


# ============================================================================
# 404 / 409 / 429
# ============================================================================


class NotFound(ServiceError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class Conflict(ServiceError):
    status_code = 409
    code = "conflict"
    default_message = "Resource state conflict"


class DuplicateIdentity(Conflict):
    code = "duplicate_identity"
    default_message = "Account already exists"


class RateLimited(ServiceError):
    status_code = 429
    code = "rate_limited"
    default_message = "Too many requests. Please try again later."

    def __init__(self, retry_after: int, message: str | None = None):
        self.retry_after = retry_after
        super().__init__(message)

    def to_error(self) -> dict[str, Any]:
        error = super().to_error()
        error["retryAfter"] = self.retry_after
        return error


class Internal(ServiceError):
    """Unexpected store or runtime failure."""
