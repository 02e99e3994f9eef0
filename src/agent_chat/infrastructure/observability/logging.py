"""
Structured logging configuration.

Use `get_logger(__name__)` from this module rather than print() or
logging.getLogger(), and log events with key/value fields.
"""
from typing import Optional, Any
import re
import structlog
from agent_chat.config.settings import get_settings
from agent_chat.api.middleware.request_id import add_request_id_to_log


EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b')

# OpenAI (sk-...) and Groq (gsk_...) key shapes
API_KEY_PATTERN = re.compile(r'\b(?:sk-[A-Za-z0-9_-]{16,}|gsk_[A-Za-z0-9]{16,})\b')

SECRET_FIELD_NAMES = frozenset({
    "api_key",
    "openai_api_key",
    "groq_api_key",
    "authorization",
    "password",
    "database_url",
})


def mask_pii_value(value: str) -> str:
    """
    Mask email addresses in a string value.

    Example:
        >>> mask_pii_value("Contact john@example.com")
        'Contact ***@***'
    """
    if not isinstance(value, str):
        return value
    return EMAIL_PATTERN.sub('***@***', value)


def mask_secret_value(value: str) -> str:
    """Replace anything shaped like a provider API key."""
    if not isinstance(value, str):
        return value
    return API_KEY_PATTERN.sub('***', value)


def _mask(data: Any, masker) -> Any:
    if isinstance(data, str):
        return masker(data)
    if isinstance(data, dict):
        return {key: _mask(value, masker) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_mask(item, masker) for item in data]
    return data


def mask_secrets_processor(logger_obj: Any, method_name: str, event_dict: dict) -> dict:
    """Structlog processor removing credentials from log events."""
    masked = {}
    for key, value in event_dict.items():
        if key.lower() in SECRET_FIELD_NAMES and value:
            masked[key] = "***"
        else:
            masked[key] = _mask(value, mask_secret_value)
    return masked


def pii_masking_processor(logger_obj: Any, method_name: str, event_dict: dict) -> dict:
    """
    Structlog processor that masks PII in log events.

    Runs after merge_contextvars and before rendering.
    """
    settings = get_settings()
    if settings.log_pii_masking_enabled:
        return _mask(event_dict, mask_pii_value)
    return event_dict


def console_renderer_with_colors():
    return structlog.dev.ConsoleRenderer(
        colors=True,
        pad_event=25,
        exception_formatter=structlog.dev.plain_traceback,
    )


def json_renderer():
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """
    Configure structured logging with secret masking, PII protection and
    request id context; JSON output for production, colored console output
    otherwise.
    """
    settings = get_settings()

    if settings.log_format == "json":
        renderer = json_renderer()
    else:
        renderer = console_renderer_with_colors()

    processors = [
        # 1. Merge context variables
        structlog.contextvars.merge_contextvars,

        # 2. Add request ID
        add_request_id_to_log,

        # 3. Add log level and timestamp
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),

        # 4. Mask provider keys and PII
        mask_secrets_processor,
        pii_masking_processor,

        # 5. Stack info and exceptions
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,

        # 6. Final rendering (JSON or Console)
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance with structured logging support.

    Usage:
        >>> logger = get_logger(__name__)
        >>> logger.info("chat_created", chat_id="abc", agent_id="def")
    """
    return structlog.get_logger(name)
