"""
Error handlers turning exceptions into the response envelope.

Every failure leaves the API as
``{success: false, message, data: null, error: {code, message, ...}, requestId}``
with the HTTP status of the exception. Unknown exceptions only carry
their original text outside production.

Usage:
    from fastapi import FastAPI
    from agent_chat.api.middleware.errors import register_error_handlers

    app = FastAPI()
    register_error_handlers(app)
"""
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from agent_chat.api.schemas.base import ApiResponse
from agent_chat.api.schemas.errors import ErrorCode, ErrorDetail, FieldError
from agent_chat.config.settings import get_settings
from agent_chat.domain.exceptions import AppError
from agent_chat.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
}

FRIENDLY_VALIDATION_MESSAGES = {
    "missing": "This field is required",
    "string_type": "Must be a valid string",
    "int_parsing": "Must be a valid integer",
    "float_parsing": "Must be a valid number",
    "bool_parsing": "Must be true or false",
    "datetime_from_date_parsing": "Must be a valid date-time",
}


def _get_request_id(request: Request) -> str:
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id") or str(uuid.uuid4())


def _log_context(request: Request, request_id: str, status_code: int, error: Exception) -> dict[str, Any]:
    settings = get_settings()
    context = {
        "request_id": request_id,
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "error_type": type(error).__name__,
    }
    user_id = request.headers.get(settings.user_id_header) or request.cookies.get(settings.user_id_cookie)
    if user_id:
        context["user_id"] = user_id
    return context


def _create_error_response(
    error_code: ErrorCode,
    message: str,
    request_id: str,
    status_code: int,
    details: Optional[list[FieldError]] = None,
    context: Optional[dict[str, Any]] = None,
    suggested_action: Optional[str] = None,
    is_production: bool = False,
) -> JSONResponse:
    if is_production and status_code >= 500 and error_code == ErrorCode.INTERNAL_ERROR:
        message = "An internal error occurred. Please try again later."
        context = None

    envelope = ApiResponse[None](
        success=False,
        message=message,
        error=ErrorDetail(
            code=error_code,
            message=message,
            details=details,
            context=context,
            suggested_action=suggested_action,
        ),
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True, exclude_none=True) | {"data": None},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register envelope-producing handlers on the application."""
    settings = get_settings()

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        request_id = _get_request_id(request)
        log_context = _log_context(request, request_id, exc.status_code, exc)

        if exc.status_code >= 500:
            logger.error("Server error", error=exc.message, error_code=exc.error_code.value, **log_context)
        elif exc.status_code in (401, 403):
            logger.warning("Access refused", error=exc.message, error_code=exc.error_code.value, **log_context)
        else:
            logger.info("Client error", error=exc.message, error_code=exc.error_code.value, **log_context)

        return _create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            request_id=request_id,
            status_code=exc.status_code,
            context=exc.details or None,
            suggested_action=exc.suggested_action,
            is_production=settings.is_production,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = _get_request_id(request)

        field_errors = []
        for error in exc.errors():
            error_type = error.get("type", "")
            field_errors.append(
                FieldError(
                    field=".".join(str(loc) for loc in error.get("loc", [])),
                    message=FRIENDLY_VALIDATION_MESSAGES.get(error_type, error.get("msg", "Validation error")),
                    code=error_type.upper().replace(".", "_"),
                )
            )

        logger.info(
            "Request validation failed",
            field_count=len(field_errors),
            **_log_context(request, request_id, status.HTTP_400_BAD_REQUEST, exc),
        )

        return _create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            request_id=request_id,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=field_errors,
            suggested_action="Please check your input and ensure all required fields are provided correctly",
            is_production=settings.is_production,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        request_id = _get_request_id(request)
        return _create_error_response(
            error_code=HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR),
            message=str(exc.detail),
            request_id=request_id,
            status_code=exc.status_code,
            is_production=settings.is_production,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = _get_request_id(request)
        logger.error(
            "Unhandled exception",
            error=str(exc),
            exc_info=exc,
            **_log_context(request, request_id, status.HTTP_500_INTERNAL_SERVER_ERROR, exc),
        )

        error_message = "An unexpected error occurred"
        context = None
        if not settings.is_production:
            error_message = f"An unexpected error occurred: {exc}"
            context = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
            }

        return _create_error_response(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=error_message,
            request_id=request_id,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            context=context,
            suggested_action="Please try again later. If the problem persists, contact support",
            is_production=settings.is_production,
        )
