"""Response envelope shared by every endpoint."""
from typing import Generic, TypeVar, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from agent_chat.api.schemas.errors import ErrorDetail

# Type variable for generic response data
T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for API schemas: camelCase on the wire, snake_case in Python.

    Request bodies accept either spelling.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """
    Standard ``{success, message, data, error}`` envelope.

    Example Response:
        ```json
        {
            "success": true,
            "message": "Chat created",
            "data": {"id": "3f2c...", "title": "New Chat"},
            "error": null
        }
        ```
    """

    success: bool = Field(default=True, description="Whether the request succeeded")
    message: Optional[str] = Field(default=None, description="Human-readable summary")
    data: Optional[T] = Field(default=None, description="Response payload")
    error: Optional[ErrorDetail] = Field(default=None, description="Error details when success is false")
    request_id: Optional[str] = Field(default=None, description="Request identifier for tracing")
