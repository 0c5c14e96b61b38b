"""
Domain-specific errors for the wallet bounded context.

All errors raised from the domain and application layers are defined here.
They are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from enum import Enum


class WalletDomainError(Exception):
    """Base error for all wallet domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(WalletDomainError):
    """Raised when a local precondition fails. Never reaches the network."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InsufficientHoldingError(WalletDomainError):
    """Raised when a sell asks for more shares than the holding has."""

    def __init__(self, symbol: str, requested: int, held: int) -> None:
        super().__init__(
            f"Insufficient holding for {symbol}: requested {requested}, held {held}"
        )
        self.symbol = symbol
        self.requested = requested
        self.held = held


class OperationErrorKind(Enum):
    """Failure classes of a remote ledger call."""

    REJECTED = "rejected"
    UNREACHABLE = "unreachable"


class OperationError(WalletDomainError):
    """Raised by the remote ledger client when a backend call fails.

    Attributes:
        kind: REJECTED when the backend answered with a non-success status,
            UNREACHABLE when no response was received.
        status_code: HTTP status of a rejection, None when unreachable.
    """

    def __init__(
        self,
        kind: OperationErrorKind,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @classmethod
    def rejected(cls, message: str, status_code: int | None = None) -> "OperationError":
        return cls(OperationErrorKind.REJECTED, message, status_code)

    @classmethod
    def unreachable(cls, message: str = "Backend unreachable") -> "OperationError":
        return cls(OperationErrorKind.UNREACHABLE, message)

    @property
    def is_unreachable(self) -> bool:
        return self.kind is OperationErrorKind.UNREACHABLE


class OperationInProgressError(WalletDomainError):
    """Raised when an executor is invoked while a submission is in flight."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"A {operation} is already being submitted")
        self.operation = operation


class SessionNotFoundError(WalletDomainError):
    """Raised when a session identifier does not match an active session."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id
