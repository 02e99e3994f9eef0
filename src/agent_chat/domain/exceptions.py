"""
Exception hierarchy for the agent chat service.

Every exception carries an ``error_code`` (the error kind), an HTTP
``status_code``, a human-readable message and optional details. The
registered error handlers turn these into the response envelope, so
routes and services raise and never build error responses by hand.

Usage:
    from agent_chat.domain.exceptions import NotFoundOrForbidden, ValidationError

    raise ValidationError("Content cannot be empty", details={"field": "content"})
    raise NotFoundOrForbidden("Chat not found", details={"chat_id": chat_id})
"""

from typing import Any, Optional
from agent_chat.api.schemas.errors import ErrorCode


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        error_code: Machine-readable error code (from ErrorCode enum)
        status_code: HTTP status code (default: 500)
        message: Human-readable error message
        details: Optional dictionary with additional error context
        suggested_action: Optional user-friendly suggestion for resolution
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"
    default_suggested_action: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggested_action: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.suggested_action = suggested_action or self.default_suggested_action
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code.value}, "
            f"status_code={self.status_code}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        if self.suggested_action:
            result["suggested_action"] = self.suggested_action

        return result


# ========================================
# Validation Errors (400)
# ========================================


class ValidationError(AppError):
    """Request validation failed."""

    status_code = 400
    error_code = ErrorCode.VALIDATION_ERROR
    default_message = "Request validation failed"
    default_suggested_action = "Please check your input and try again"


class MissingField(ValidationError):
    """Required field is missing."""

    error_code = ErrorCode.MISSING_FIELD
    default_message = "Required field is missing"

    def __init__(self, field: str, **kwargs):
        super().__init__(
            message=kwargs.pop("message", f"{field} is required"),
            details={"field": field, **kwargs.pop("details", {})},
            **kwargs,
        )


# ========================================
# Authentication Errors (401)
# ========================================


class MissingIdentity(AppError):
    """No user id on the request."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED
    default_message = "User not authenticated"
    default_suggested_action = "Please sign in again"


# ========================================
# Authorization Errors (403)
# ========================================


class AccessDenied(AppError):
    """Caller may not perform this action."""

    status_code = 403
    error_code = ErrorCode.FORBIDDEN
    default_message = "Access to this resource is denied"


class EntitlementDenied(AccessDenied):
    """No usable entitlement for the requested agent."""

    error_code = ErrorCode.ENTITLEMENT_DENIED
    default_message = "No active subscription found for this agent"
    default_suggested_action = "Acquire or renew access to this agent"


# ========================================
# Not Found Errors (404)
# ========================================


class NotFound(AppError):
    """Resource not found."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"


class NotFoundOrForbidden(NotFound):
    """
    Resource is absent or belongs to someone else.

    Both cases answer identically so existence is never leaked.
    """

    error_code = ErrorCode.NOT_FOUND_OR_FORBIDDEN
    default_message = "Resource not found or access denied"


# ========================================
# Conflict Errors (409)
# ========================================


class AlreadyExists(AppError):
    """Resource already exists."""

    status_code = 409
    error_code = ErrorCode.DUPLICATE_RESOURCE
    default_message = "Resource already exists"


class DuplicateEntitlement(AlreadyExists):
    """An active, non-expired grant already exists for the pair."""

    error_code = ErrorCode.DUPLICATE_ENTITLEMENT
    default_message = "User already has an active subscription for this agent"


class ResourceInUse(AppError):
    """Resource is referenced by active records."""

    status_code = 409
    error_code = ErrorCode.RESOURCE_IN_USE
    default_message = "Resource is still in use"


# ========================================
# Business Rule Errors (422)
# ========================================


class InvalidReference(AppError):
    """A referenced entity is missing or inactive."""

    status_code = 422
    error_code = ErrorCode.INVALID_REFERENCE
    default_message = "Referenced resource does not exist or is inactive"


class InvalidUser(InvalidReference):
    """The acting user is missing or inactive."""

    error_code = ErrorCode.INVALID_USER
    default_message = "User not found or inactive"


# ========================================
# Server Errors (5xx)
# ========================================


class DatabaseError(AppError):
    """Database operation failed."""

    status_code = 500
    error_code = ErrorCode.DATABASE_ERROR
    default_message = "Database operation failed"


class ProviderError(AppError):
    """Upstream LLM call failed (network, auth, rate limit)."""

    status_code = 502
    error_code = ErrorCode.PROVIDER_ERROR
    default_message = "The language model provider request failed"
    default_suggested_action = "Please try again later"


class MissingCredential(AppError):
    """No API key configured for the resolved provider."""

    status_code = 503
    error_code = ErrorCode.MISSING_CREDENTIAL
    default_message = "Provider API key is not configured"
