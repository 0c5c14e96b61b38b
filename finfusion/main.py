"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (health and the wallet context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from finfusion.core.config import settings
from finfusion.interfaces.health import router as health_router
from finfusion.interfaces.wallet.dependencies import get_ledger
from finfusion.interfaces.wallet.router import router as wallet_router
from finfusion.shared.errors.handlers import register_error_handlers
from finfusion.shared.logging import configure_logging
from finfusion.shared.security.headers import SecurityHeadersMiddleware
from finfusion.shared.security.rate_limiting import (
    limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: release the ledger connection pool on shutdown."""
    logger.info("Backend: %s", settings.backend_base_url)
    yield
    if get_ledger.cache_info().currsize:
        await get_ledger().aclose()
        get_ledger.cache_clear()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(wallet_router, prefix="/api/v1")

    return app


app = create_app()
