"""
Shared fixtures for the wallet test suite.

Ports are replaced with AsyncMock fakes; no network access is needed.
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from finfusion.domain.wallet.balance_animation import BalanceAnimator
from finfusion.domain.wallet.entities import Contact, Holding, SessionContext
from finfusion.domain.wallet.ports import AssistantRelayPort, LedgerPort

ACCOUNT = "9000000001"
PAYEE = Contact(mobile_number="9000000002", name="Bala")


def holding(symbol: str, quantity: int, price: str, name: str | None = None) -> Holding:
    """Build a holding whose total matches quantity * price."""
    return Holding(
        symbol=symbol,
        name=name or f"{symbol} Ltd",
        quantity=quantity,
        price_per_share=Decimal(price),
        total_value=Decimal(price) * quantity,
        sentiment="Neutral",
    )


@pytest.fixture
def make_holding():
    return holding


@pytest.fixture
def session() -> SessionContext:
    ctx = SessionContext.open(
        account_id=ACCOUNT,
        display_name="Asha",
        balance=Decimal("1000.00"),
        contacts=[PAYEE],
    )
    ctx.portfolio.replace([holding("TCS", 10, "100.00", name="Tata Consultancy")])
    return ctx


@pytest.fixture
def ledger() -> AsyncMock:
    return AsyncMock(spec=LedgerPort)


@pytest.fixture
def relay() -> AsyncMock:
    return AsyncMock(spec=AssistantRelayPort)


@pytest.fixture
def instant_animator() -> BalanceAnimator:
    return BalanceAnimator(duration_ms=0)
