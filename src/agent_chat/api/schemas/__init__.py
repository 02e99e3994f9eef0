"""Standard API response schemas and models."""

from agent_chat.api.schemas.base import ApiResponse, CamelModel
from agent_chat.api.schemas.errors import ErrorCode, ErrorDetail, FieldError

__all__ = [
    "ApiResponse",
    "CamelModel",
    "ErrorCode",
    "ErrorDetail",
    "FieldError",
]
