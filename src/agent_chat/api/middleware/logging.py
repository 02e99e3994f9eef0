"""
Request logging middleware with structured logging.

Logs method, path, caller, status code and duration for every request
except health checks.
"""
import time
from typing import Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from agent_chat.infrastructure.observability.logging import get_logger
from agent_chat.config.settings import get_settings


logger = get_logger(__name__)


# Health check paths to skip logging (reduce noise)
HEALTH_CHECK_PATHS: Set[str] = {
    "/health",
    "/health/ready",
}


def get_caller_context(request: Request, header: str, cookie: str) -> dict:
    """Extract the propagated user id, if any, for log context."""
    user_id = request.headers.get(header) or request.cookies.get(cookie)
    return {"user_id": user_id} if user_id else {}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured request/response logging with timing headers."""

    def __init__(self, app):
        super().__init__(app)
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()

        if request.url.path in HEALTH_CHECK_PATHS:
            return await call_next(request)

        log_context = {
            "method": request.method,
            "path": request.url.path,
            "query_params": str(request.query_params) if request.query_params else None,
            "client_ip": request.client.host if request.client else None,
            **get_caller_context(
                request, self.settings.user_id_header, self.settings.user_id_cookie
            ),
        }

        logger.info("Request received", **log_context)

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                "Request failed with exception",
                **log_context,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            raise

        duration = time.time() - start_time
        duration_ms = round(duration * 1000, 2)

        response_context = {
            **log_context,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }

        if response.status_code >= 500:
            logger.error("Request completed with error", **response_context)
        elif response.status_code >= 400:
            logger.warning("Request rejected", **response_context)
        else:
            logger.info("Request completed", **response_context)

        response.headers["X-Process-Time-Ms"] = str(duration_ms)

        return response
