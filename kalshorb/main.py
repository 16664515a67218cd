"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (single KALSHORB_ERROR response shape)
- CORS headers middleware and rate limiting
- Logging configuration

No business logic belongs here.
"""

from typing import Optional

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from kalshorb.core.config import Settings, settings
from kalshorb.interfaces.advisor.dependencies import build_advisor_dispatcher
from kalshorb.interfaces.advisor.router import router as advisor_router
from kalshorb.interfaces.health import router as health_router
from kalshorb.shared.errors.handlers import register_error_handlers
from kalshorb.shared.logging import configure_logging
from kalshorb.shared.security.headers import CorsHeadersMiddleware, cors_headers
from kalshorb.shared.security.rate_limiting import (
    configure_limiter,
    rate_limit_exceeded_handler,
)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and middleware. The settings and
    the advisor dispatcher built from them are kept on ``app.state``.
    This is the composition root of the application.

    Args:
        config: Settings to use. Defaults to the environment-loaded settings.

    Returns:
        A fully configured FastAPI application instance.
    """
    config = config or settings
    configure_logging(level=config.log_level)

    app = FastAPI(
        title=config.project_name,
        version=config.version,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # --- Configuration and Dependencies ---
    app.state.settings = config
    app.state.advisor_dispatcher = build_advisor_dispatcher(config)

    # --- Rate Limiting ---
    app.state.limiter = configure_limiter(config)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- CORS Middleware ---
    app.add_middleware(
        CorsHeadersMiddleware, headers=cors_headers(config.cors_allow_origin)
    )

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(advisor_router, prefix="/api/v1")

    return app


app = create_app()
