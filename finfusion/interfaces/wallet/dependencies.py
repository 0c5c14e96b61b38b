"""
Dependency injection for the wallet bounded context.

Provides FastAPI dependency functions that wire the ledger adapter into
executors and use cases via constructor injection, and keeps the
in-memory registry of open sessions. These are the composition root
for the wallet context.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from uuid import uuid4

from fastapi import Depends, Header

from finfusion.application.wallet.conversation import ContextAssembler, ConversationState
from finfusion.application.wallet.session import (
    AuthenticateUseCase,
    ExploreCompaniesUseCase,
    LoadPortfolioUseCase,
    RefreshBalanceUseCase,
    SignupUseCase,
)
from finfusion.application.wallet.trade import TradeExecutor
from finfusion.application.wallet.transfer import TransferExecutor
from finfusion.core.config import settings
from finfusion.domain.wallet.balance_animation import BalanceAnimator
from finfusion.domain.wallet.entities import SessionContext
from finfusion.domain.wallet.errors import SessionNotFoundError
from finfusion.infrastructure.wallet.ledger_client import LedgerClient

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"


@dataclass
class SessionHandle:
    """Everything one signed-in screen owns."""

    session: SessionContext
    transfers: TransferExecutor
    trades: TradeExecutor
    assistant: ContextAssembler


class SessionRegistry:
    """In-memory map of session id to SessionHandle."""

    def __init__(self) -> None:
        self._handles: dict[str, SessionHandle] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def open(self, session: SessionContext, ledger: LedgerClient) -> str:
        session_id = uuid4().hex
        self._handles[session_id] = SessionHandle(
            session=session,
            transfers=TransferExecutor(
                session,
                ledger,
                animator=BalanceAnimator(
                    duration_ms=settings.balance_animation_ms,
                    frames=settings.balance_animation_frames,
                ),
            ),
            trades=TradeExecutor(session, ledger),
            assistant=ContextAssembler(ConversationState(), ledger, ledger),
        )
        logger.info("Registered session for account=%s", session.account_id)
        return session_id

    def get(self, session_id: str) -> SessionHandle:
        handle = self._handles.get(session_id)
        if handle is None:
            raise SessionNotFoundError(session_id)
        return handle

    def close(self, session_id: str) -> None:
        """Forget a session; its transcript and executors go with it."""
        handle = self._handles.pop(session_id, None)
        if handle is None:
            raise SessionNotFoundError(session_id)
        logger.info("Closed session for account=%s", handle.session.account_id)


@lru_cache
def get_ledger() -> LedgerClient:
    """Build the process-wide ledger client from application settings."""
    return LedgerClient(
        base_url=settings.backend_base_url,
        relay_url=settings.assistant_relay_url,
        api_key=settings.assistant_api_key,
        api_key_header=settings.assistant_api_key_header,
        timeout=settings.request_timeout_seconds,
    )


@lru_cache
def get_registry() -> SessionRegistry:
    return SessionRegistry()


def get_session_handle(
    x_session_id: str = Header(..., alias=SESSION_HEADER),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionHandle:
    """Resolve the caller's session from the X-Session-Id header."""
    return registry.get(x_session_id)


def get_authenticate_use_case(
    ledger: LedgerClient = Depends(get_ledger),
) -> AuthenticateUseCase:
    return AuthenticateUseCase(ledger)


def get_signup_use_case(ledger: LedgerClient = Depends(get_ledger)) -> SignupUseCase:
    return SignupUseCase(ledger)


def get_refresh_balance_use_case(
    ledger: LedgerClient = Depends(get_ledger),
) -> RefreshBalanceUseCase:
    return RefreshBalanceUseCase(ledger)


def get_load_portfolio_use_case(
    ledger: LedgerClient = Depends(get_ledger),
) -> LoadPortfolioUseCase:
    return LoadPortfolioUseCase(ledger)


def get_explore_use_case(
    ledger: LedgerClient = Depends(get_ledger),
) -> ExploreCompaniesUseCase:
    return ExploreCompaniesUseCase(ledger)
