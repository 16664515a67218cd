"""
CORS and content-type headers middleware.

Adds the configured CORS headers to every response and answers
preflight OPTIONS requests directly with HTTP 200.

No business logic. Pure cross-cutting concern.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from kalshorb.shared.errors.handlers import error_response

logger = logging.getLogger(__name__)


def cors_headers(allow_origin: str = "*") -> dict[str, str]:
    """Return the permissive CORS header set for browser clients."""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
        "Access-Control-Allow-Methods": "POST, GET, OPTIONS, PUT, DELETE, PATCH",
        "Access-Control-Max-Age": "86400",
        "Access-Control-Allow-Credentials": "false",
        "X-Content-Type-Options": "nosniff",
    }


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that applies a fixed header set to every response.

    Preflight requests never reach the routers. Unhandled exceptions
    are turned into the API error response here, so 500s carry the
    same headers as every other response.
    """

    def __init__(self, app: ASGIApp, headers: dict[str, str]) -> None:
        super().__init__(app)
        self._headers = dict(headers)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Short-circuit OPTIONS, otherwise add headers to the response."""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self._headers)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("Unexpected error: %s", type(exc).__name__)
            response = error_response("Internal server error")
        for header_name, header_value in self._headers.items():
            response.headers[header_name] = header_value
        return response
