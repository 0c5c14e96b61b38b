"""
Secure HTTP headers middleware.

Adds security-related headers to every response. Responses may carry
balances and transcripts, so they are also marked as non-cacheable.

No business logic. Pure cross-cutting concern.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'",
    "Cache-Control": "no-store",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds secure HTTP headers to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        for header_name, header_value in SECURE_HEADERS.items():
            response.headers[header_name] = header_value
        return response
