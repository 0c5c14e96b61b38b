"""
Tests for sign-in, sign-up and the refresh use cases.
"""

from decimal import Decimal

import pytest

from finfusion.application.wallet.session import (
    AuthenticateUseCase,
    ExploreCompaniesUseCase,
    LoadPortfolioUseCase,
    RefreshBalanceUseCase,
    SignupUseCase,
)
from finfusion.domain.wallet.entities import (
    Company,
    Contact,
    LoginResult,
    SignupRequest,
)
from finfusion.domain.wallet.errors import OperationError, ValidationError


class TestAuthenticate:
    """Tests for AuthenticateUseCase."""

    @pytest.mark.asyncio
    async def test_opens_settled_session(self, ledger) -> None:
        ledger.login.return_value = LoginResult(
            account_id="9000000001",
            display_name="Asha",
            wallet_amount=Decimal("1000.00"),
            contacts=[Contact("9000000002", "Bala")],
            recent_contacts=[],
        )

        session = await AuthenticateUseCase(ledger).execute(" 9000000001 ", "123456")

        ledger.login.assert_awaited_once_with("9000000001", "123456")
        assert session.display_name == "Asha"
        assert session.confirmed_balance == session.displayed_balance == Decimal("1000.00")
        assert session.find_contact("9000000002").name == "Bala"

    @pytest.mark.asyncio
    async def test_malformed_mpin_skips_backend(self, ledger) -> None:
        with pytest.raises(ValidationError):
            await AuthenticateUseCase(ledger).execute("9000000001", "12")
        ledger.login.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backend_rejection_propagates(self, ledger) -> None:
        ledger.login.side_effect = OperationError.rejected("Invalid login", 401)

        with pytest.raises(OperationError, match="Invalid login"):
            await AuthenticateUseCase(ledger).execute("9000000001", "123456")


class TestSignup:
    """Tests for SignupUseCase."""

    @pytest.mark.asyncio
    async def test_submits_cleaned_form(self, ledger) -> None:
        ledger.signup.return_value = "User created"

        message = await SignupUseCase(ledger).execute(
            SignupRequest(" 9 ", " Asha ", "a@b.c", "password1", "123456")
        )

        assert message == "User created"
        sent = ledger.signup.await_args.args[0]
        assert (sent.mobile_number, sent.name) == ("9", "Asha")

    @pytest.mark.asyncio
    async def test_short_password(self, ledger) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await SignupUseCase(ledger).execute(
                SignupRequest("9", "Asha", "a@b.c", "short", "123456")
            )
        assert exc_info.value.field == "password"
        ledger.signup.assert_not_awaited()


class TestRefresh:
    """Tests for balance, portfolio and explore refreshes."""

    @pytest.mark.asyncio
    async def test_refresh_balance_adopts_backend_value(self, session, ledger) -> None:
        ledger.fetch_balance.return_value = Decimal("750.00")

        assert await RefreshBalanceUseCase(ledger).execute(session) == Decimal("750.00")
        assert session.is_settled
        assert session.displayed_balance == Decimal("750.00")

    @pytest.mark.asyncio
    async def test_load_portfolio_replaces(self, session, ledger, make_holding) -> None:
        ledger.fetch_portfolio.return_value = [make_holding("INFY", 2, "1500")]

        await LoadPortfolioUseCase(ledger).execute(session)

        assert [h.symbol for h in session.portfolio] == ["INFY"]

    @pytest.mark.asyncio
    async def test_explore(self, ledger) -> None:
        catalog = {"IT": [Company("Infosys", "INFY")]}
        ledger.explore.return_value = catalog

        assert await ExploreCompaniesUseCase(ledger).execute() == catalog
