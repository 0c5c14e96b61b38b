"""
Use cases around the signed-in session: sign-in, sign-up, and
refreshing the balance, portfolio and company catalog from the backend.

The backend is authoritative for all of them; each use case simply
adopts what it returns.
"""

import logging
from decimal import Decimal

from finfusion.application.wallet.validation import (
    MIN_PASSWORD_LENGTH,
    require_mpin,
    require_text,
)
from finfusion.domain.wallet.entities import (
    Company,
    Holding,
    SessionContext,
    SignupRequest,
)
from finfusion.domain.wallet.errors import ValidationError
from finfusion.domain.wallet.ports import LedgerPort

logger = logging.getLogger(__name__)


class AuthenticateUseCase:
    """Signs in with mobile number and MPIN and opens a SessionContext."""

    def __init__(self, ledger: LedgerPort) -> None:
        self._ledger = ledger

    async def execute(self, mobile_number: str, mpin: str) -> SessionContext:
        """Run the sign-in.

        Raises:
            ValidationError: If the number is empty or the MPIN malformed.
            OperationError: If the backend rejects or cannot be reached.
        """
        number = require_text(mobile_number, "mobile_number", "a mobile number")
        require_mpin(mpin)

        result = await self._ledger.login(number, mpin)
        logger.info(
            "Session opened for account=%s with %d contacts",
            result.account_id,
            len(result.contacts),
        )
        return SessionContext.open(
            account_id=result.account_id,
            display_name=result.display_name,
            balance=result.wallet_amount,
            contacts=result.contacts,
            recent_contacts=result.recent_contacts,
        )


class SignupUseCase:
    """Registers a new account."""

    def __init__(self, ledger: LedgerPort) -> None:
        self._ledger = ledger

    async def execute(self, request: SignupRequest) -> str:
        """Validate the registration form and submit it.

        Returns:
            The backend's confirmation message.
        """
        cleaned = SignupRequest(
            mobile_number=require_text(
                request.mobile_number, "mobile_number", "a mobile number"
            ),
            name=require_text(request.name, "name", "a name"),
            email=require_text(request.email, "email", "an email"),
            password=request.password,
            mpin=require_mpin(request.mpin),
        )
        if len(cleaned.password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )
        return await self._ledger.signup(cleaned)


class RefreshBalanceUseCase:
    """Adopts the backend wallet balance as confirmed and displayed."""

    def __init__(self, ledger: LedgerPort) -> None:
        self._ledger = ledger

    async def execute(self, session: SessionContext) -> Decimal:
        balance = await self._ledger.fetch_balance(session.account_id)
        session.reset_balance(balance)
        return balance


class LoadPortfolioUseCase:
    """Replaces the session portfolio with the backend snapshot."""

    def __init__(self, ledger: LedgerPort) -> None:
        self._ledger = ledger

    async def execute(self, session: SessionContext) -> list[Holding]:
        holdings = await self._ledger.fetch_portfolio(session.account_id)
        session.portfolio.replace(holdings)
        logger.info(
            "Loaded %d holdings for account=%s", len(holdings), session.account_id
        )
        return holdings


class ExploreCompaniesUseCase:
    """Returns the company catalog grouped by category."""

    def __init__(self, ledger: LedgerPort) -> None:
        self._ledger = ledger

    async def execute(self) -> dict[str, list[Company]]:
        return await self._ledger.explore()
