"""
Rate limiting configuration and setup.

Uses slowapi to enforce rate limits. Routes without their own limit get
``settings.rate_limit_default`` through SlowAPIMiddleware.
Sign-in and sign-up get a tighter limit to slow down MPIN guessing.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from finfusion.core.config import settings

AUTH_RATE_LIMIT = "10/minute"

limiter = Limiter(
    key_func=get_remote_address, default_limits=[settings.rate_limit_default]
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with a clean JSON response.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a clear error message.
    """
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )
