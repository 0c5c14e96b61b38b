"""
Centralized error handlers for FastAPI.

Maps wallet domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from finfusion.domain.wallet.errors import (
    InsufficientHoldingError,
    OperationError,
    OperationInProgressError,
    SessionNotFoundError,
    ValidationError,
    WalletDomainError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_409 = 409
HTTP_422 = 422
HTTP_500 = 500
HTTP_503 = 503


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle local precondition failures."""
        logger.info("Validation failed on field=%s", exc.field)
        return _error_response(HTTP_422, "Validation failed", exc.message)

    @app.exception_handler(InsufficientHoldingError)
    async def handle_insufficient_holding(
        _request: Request, exc: InsufficientHoldingError
    ) -> JSONResponse:
        """Handle sells that exceed the held quantity."""
        logger.info("Insufficient holding: %s", exc.symbol)
        return _error_response(HTTP_400, "Insufficient holding", exc.message)

    @app.exception_handler(OperationInProgressError)
    async def handle_in_progress(
        _request: Request, exc: OperationInProgressError
    ) -> JSONResponse:
        """Handle a second submission while one is in flight."""
        logger.warning("Concurrent %s rejected", exc.operation)
        return _error_response(HTTP_409, "Operation in progress", exc.message)

    @app.exception_handler(SessionNotFoundError)
    async def handle_session_not_found(
        _request: Request, exc: SessionNotFoundError
    ) -> JSONResponse:
        """Handle unknown or expired session identifiers."""
        logger.warning("Unknown session")
        return _error_response(HTTP_401, "Session not found")

    @app.exception_handler(OperationError)
    async def handle_operation_error(
        _request: Request, exc: OperationError
    ) -> JSONResponse:
        """Handle backend rejections and unreachable backends."""
        if exc.is_unreachable:
            logger.warning("Backend unreachable")
            return _error_response(HTTP_503, "Backend unreachable", "Network error. Try again.")
        logger.warning("Backend rejected request: %s", exc.message)
        return _error_response(HTTP_400, "Rejected by backend", exc.message)

    @app.exception_handler(WalletDomainError)
    async def handle_wallet_domain(
        _request: Request, exc: WalletDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled wallet domain errors."""
        logger.error("Unhandled wallet domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
