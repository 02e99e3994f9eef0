"""Error response schemas and error codes."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorCode(str, Enum):
    """
    Machine-readable error kinds carried by every failed response.

    Handlers branch on these codes, never on message text.
    """

    # ===== Validation Errors (400) =====
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed (400)"""

    MISSING_FIELD = "MISSING_FIELD"
    """Required field is missing (400)"""

    # ===== Authentication Errors (401) =====
    UNAUTHORIZED = "UNAUTHORIZED"
    """Caller identity missing (401)"""

    # ===== Authorization Errors (403) =====
    FORBIDDEN = "FORBIDDEN"
    """Access forbidden (403)"""

    ENTITLEMENT_DENIED = "ENTITLEMENT_DENIED"
    """No active, non-expired entitlement for the agent (403)"""

    # ===== Not Found Errors (404) =====
    NOT_FOUND = "NOT_FOUND"
    """Resource not found (404)"""

    NOT_FOUND_OR_FORBIDDEN = "NOT_FOUND_OR_FORBIDDEN"
    """Resource absent or not owned by the caller (404)"""

    # ===== Conflict Errors (409) =====
    CONFLICT = "CONFLICT"
    """Resource conflict (409)"""

    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    """Resource already exists (409)"""

    DUPLICATE_ENTITLEMENT = "DUPLICATE_ENTITLEMENT"
    """An active, non-expired grant already exists (409)"""

    RESOURCE_IN_USE = "RESOURCE_IN_USE"
    """Resource is still referenced by active records (409)"""

    # ===== Business Rule Errors (422) =====
    INVALID_REFERENCE = "INVALID_REFERENCE"
    """Referenced entity missing or inactive (422)"""

    INVALID_USER = "INVALID_USER"
    """Caller's user record missing or inactive (422)"""

    # ===== Server Errors (500) =====
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Internal server error (500)"""

    DATABASE_ERROR = "DATABASE_ERROR"
    """Database operation failed (500)"""

    # ===== Upstream Errors (502/503) =====
    PROVIDER_ERROR = "PROVIDER_ERROR"
    """LLM provider call failed (502)"""

    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    """Provider API key not configured (503)"""


class FieldError(BaseModel):
    """Error information for a single request field."""

    model_config = {"str_strip_whitespace": True}

    field: str = Field(
        ...,
        description="Field name or path (e.g., 'content', 'body.chatId')",
        examples=["content", "body.chatId"]
    )
    message: str = Field(
        ...,
        description="Human-readable error message for this field",
        examples=["Field required", "Content cannot be empty"]
    )
    code: str | None = Field(
        default=None,
        description="Optional machine-readable error code for this field",
        examples=["MISSING", "STRING_TOO_SHORT"]
    )


class ErrorDetail(BaseModel):
    """
    Structured error information placed in the envelope's ``error`` slot.

    Example:
        ```python
        error = ErrorDetail(
            code=ErrorCode.ENTITLEMENT_DENIED,
            message="The subscription for this agent has expired",
            context={"agent_id": "agent-1"},
        )
        ```
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: ErrorCode = Field(
        ...,
        description="Machine-readable error code",
        examples=[ErrorCode.VALIDATION_ERROR, ErrorCode.NOT_FOUND_OR_FORBIDDEN]
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Content cannot be empty", "Chat not found"]
    )
    details: list[FieldError] | None = Field(
        default=None,
        description="Field-level error details (validation errors only)"
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context (resource ids, reasons)"
    )
    suggested_action: str | None = Field(
        default=None,
        description="What the caller can do to resolve the error"
    )

