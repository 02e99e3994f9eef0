# src/agent_chat/api/middleware/cors.py
from urllib.parse import urlparse

from agent_chat.config.settings import Settings
from agent_chat.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def get_cors_middleware_config(settings: Settings) -> dict:
    """
    Build CORSMiddleware kwargs from settings.

    The identity cookie only reaches the API when credentials are allowed,
    and browsers refuse credentials together with a wildcard origin, so
    ``*`` is dropped whenever credentials are enabled.

    Raises:
        ValueError: If an origin is not a scheme://host URL
    """
    allowed_origins = list(settings.cors_origins or [])

    if settings.environment in ("local", "dev") and not allowed_origins:
        allowed_origins = list(DEFAULT_DEV_ORIGINS)
        logger.info("CORS using default localhost origins", origins=allowed_origins)

    for origin in allowed_origins:
        if origin == "*":
            continue
        parsed = urlparse(origin)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(
                f"Invalid origin URL format: {origin}. "
                "Origins must include scheme and domain (e.g., 'http://localhost:3000')"
            )

    if "*" in allowed_origins and settings.cors_allow_credentials:
        logger.warning("CORS wildcard origin ignored because credentials are allowed")
        allowed_origins = [origin for origin in allowed_origins if origin != "*"]

    if settings.environment in ("staging", "prod") and not allowed_origins:
        logger.warning("CORS has no origins configured", environment=settings.environment)

    return {
        "allow_origins": allowed_origins,
        "allow_credentials": settings.cors_allow_credentials,
        "allow_methods": settings.cors_allow_methods,
        "allow_headers": settings.cors_allow_headers,
        "expose_headers": ["X-Request-ID", "X-User-Message-Id"],
        "max_age": settings.cors_max_age,
    }
