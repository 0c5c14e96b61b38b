"""
Port interfaces (ABCs) for the wallet bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.

Every method either returns its typed result or raises
``OperationError`` (REJECTED or UNREACHABLE). Adapters never retry;
the caller decides.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from finfusion.domain.wallet.entities import (
    Company,
    Holding,
    LoginResult,
    SignupRequest,
    TradeReceipt,
    TradeRequest,
    TransferReceipt,
    TransferRequest,
)


class LedgerPort(ABC):
    """Port for the backend ledger: wallet, portfolio and account endpoints."""

    @abstractmethod
    async def transfer(self, request: TransferRequest) -> TransferReceipt:
        """Submit a peer-to-peer payment."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_balance(self, account_id: str) -> Decimal:
        """Return the authoritative wallet balance for an account."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_portfolio(self, account_id: str) -> list[Holding]:
        """Return the authoritative portfolio snapshot for an account."""
        raise NotImplementedError

    @abstractmethod
    async def submit_trade(self, request: TradeRequest) -> TradeReceipt:
        """Submit a buy or sell instruction."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_financial_summary(self, account_id: str) -> dict[str, Any]:
        """Return the financial summary document used as assistant context.

        Returns:
            JSON object with keys such as breakdown_of_cost, net_worth_value,
            portfolio_breakdown and performance_metrics.
        """
        raise NotImplementedError

    @abstractmethod
    async def login(self, mobile_number: str, mpin: str) -> LoginResult:
        """Authenticate and return the session snapshot."""
        raise NotImplementedError

    @abstractmethod
    async def signup(self, request: SignupRequest) -> str:
        """Register a new account and return the backend message."""
        raise NotImplementedError

    @abstractmethod
    async def explore(self) -> dict[str, list[Company]]:
        """Return the company catalog grouped by category name."""
        raise NotImplementedError


class AssistantRelayPort(ABC):
    """Port for the third-party inference webhook behind the assistant."""

    @abstractmethod
    async def relay_to_assistant(self, enriched_prompt: str) -> str:
        """Send an enriched prompt and return the assistant's reply text."""
        raise NotImplementedError
