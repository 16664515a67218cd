"""
Centralized error handlers for FastAPI.

Maps every surfaced failure to one response shape:
``{"error": {"code": "KALSHORB_ERROR", "message": ...}}`` with HTTP 500.
No stack traces or internal details are exposed to clients.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kalshorb.domain.advisor.errors import AdvisorError

logger = logging.getLogger(__name__)

ERROR_CODE = "KALSHORB_ERROR"
HTTP_500 = 500


def error_response(message: str, status_code: int = HTTP_500) -> JSONResponse:
    """Build the single JSON error response used by the API."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": ERROR_CODE, "message": message}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(AdvisorError)
    async def handle_advisor_error(
        _request: Request, exc: AdvisorError
    ) -> JSONResponse:
        """Handle request validation and unknown action errors."""
        logger.warning("Advisor request failed: %s", exc.message)
        return error_response(exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies."""
        logger.warning("Invalid request body: %d error(s)", len(exc.errors()))
        return error_response("Invalid request body")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return error_response("Internal server error")
