"""
Request ID tracking middleware.

Every request gets an id for log correlation; a caller-supplied
X-Request-ID is honoured when it is a well-formed UUID4.
"""
import uuid
from contextvars import ContextVar
from typing import Any, Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

# Context variable for request ID (accessible in non-request contexts)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def is_valid_uuid(value: str) -> bool:
    """Return True when value is the canonical text of a UUID4."""
    try:
        uuid_obj = uuid.UUID(value, version=4)
        return str(uuid_obj) == value and uuid_obj.version == 4
    except (ValueError, AttributeError):
        return False


def get_request_id() -> Optional[str]:
    """Get current request ID from context."""
    return request_id_var.get(None)


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def add_request_id_to_log(
    logger: Any, method_name: str, event_dict: dict
) -> dict:
    """Structlog processor adding the current request id to log entries."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id

    return event_dict


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request id, stores it in request.state and the context
    variable, and echoes it back in the X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)

        if request_id and not is_valid_uuid(request_id):
            logger.warning(
                "Invalid X-Request-ID received, generating new one",
                invalid_id=request_id,
                client_ip=request.client.host if request.client else None
            )
            request_id = None

        request_id = request_id or str(uuid.uuid4())

        request.state.request_id = request_id
        set_request_id(request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        return response
