"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits.
Protects the upstream LLM budget against abuse.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from kalshorb.core.config import Settings, settings
from kalshorb.shared.errors.handlers import error_response

HTTP_429 = 429

_route_limits = {"chat": settings.rate_limit_chat}

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


def chat_rate_limit() -> str:
    """Return the limit currently applied to the advisor endpoint."""
    return _route_limits["chat"]


def configure_limiter(config: Settings) -> Limiter:
    """Apply the toggle and route limits from ``config`` to the limiter.

    Route limits are resolved per request, so the values set here take
    effect on routes decorated at import time.
    """
    limiter.enabled = config.rate_limit_enabled
    _route_limits["chat"] = config.rate_limit_chat
    return limiter


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with the API's error shape.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response.
    """
    return error_response(f"Rate limit exceeded: {exc.detail}", status_code=HTTP_429)
