"""
Use case: Buy or sell shares in the session's simulated portfolio.

Input: side, symbol, company name, quantity and price per share.
Output: TradeOutcome
Side effects: On settlement, applies the fill to the matching holding,
    then re-fetches the portfolio and overwrites local state with it.
Failure cases: ValidationError, InsufficientHoldingError and
    OperationInProgressError (raised, nothing submitted); backend
    rejection or unreachable backend (FAILED outcome, no mutation).

Portfolio policy: optimistic-then-reconcile. A briefly stale portfolio
figure is acceptable, so the fill is reflected as soon as the backend
accepts it and the authoritative snapshot replaces it right after.
This is the opposite of the wallet transfer policy in ``transfer.py``.
"""

import logging
from typing import Any

from finfusion.application.wallet.dtos import TradeOutcome
from finfusion.application.wallet.validation import (
    parse_positive_decimal,
    parse_positive_int,
    require_text,
)
from finfusion.domain.wallet.entities import (
    OperationStatus,
    SessionContext,
    TradeRequest,
    TradeSide,
)
from finfusion.domain.wallet.errors import (
    InsufficientHoldingError,
    OperationError,
    OperationInProgressError,
    ValidationError,
)
from finfusion.domain.wallet.ports import LedgerPort

logger = logging.getLogger(__name__)

REJECTED_FALLBACK = "Trade could not be completed."
UNREACHABLE_MESSAGE = "Network error. Try again."


class TradeExecutor:
    """Validates and submits a buy or sell instruction.

    One executor belongs to one session screen and runs at most one
    submission at a time.
    """

    def __init__(self, session: SessionContext, ledger: LedgerPort) -> None:
        self._session = session
        self._ledger = ledger
        self.status = OperationStatus.IDLE

    async def execute(
        self,
        side: TradeSide | str,
        symbol: str,
        company_name: str,
        quantity: Any,
        price_per_share: Any,
    ) -> TradeOutcome:
        """Run the trade.

        Returns:
            A SETTLED or FAILED outcome.

        Raises:
            ValidationError: If the side, symbol, quantity or price is invalid.
            InsufficientHoldingError: If a sell exceeds the held quantity.
            OperationInProgressError: If a trade is already submitting.
        """
        if self.status is OperationStatus.SUBMITTING:
            raise OperationInProgressError("trade")

        request = self._build_request(
            side, symbol, company_name, quantity, price_per_share
        )
        portfolio = self._session.portfolio

        if request.side is TradeSide.SELL:
            held = portfolio.held_quantity(request.symbol)
            if request.quantity > held:
                raise InsufficientHoldingError(request.symbol, request.quantity, held)

        self.status = OperationStatus.SUBMITTING
        try:
            receipt = await self._ledger.submit_trade(request)
        except OperationError as exc:
            self.status = OperationStatus.FAILED
            message = UNREACHABLE_MESSAGE if exc.is_unreachable else (
                exc.message or REJECTED_FALLBACK
            )
            logger.warning(
                "Trade request_id=%s failed (%s): %s",
                request.request_id,
                exc.kind.value,
                message,
            )
            return TradeOutcome(
                status=OperationStatus.FAILED,
                side=request.side,
                symbol=request.symbol,
                message=message,
                error_kind=exc.kind,
            )
        except BaseException:
            self.status = OperationStatus.IDLE
            raise

        try:
            holding = portfolio.apply_fill(
                request.side,
                request.symbol,
                request.company_name,
                request.quantity,
                request.price_per_share,
            )
            reconciled = await self._reconcile()
        finally:
            self.status = OperationStatus.SETTLED

        if reconciled:
            holding = portfolio.get(request.symbol)

        verb = "Bought" if request.side is TradeSide.BUY else "Sold"
        return TradeOutcome(
            status=OperationStatus.SETTLED,
            side=request.side,
            symbol=request.symbol,
            message=receipt.message
            or f"{verb} {request.quantity} shares of {request.company_name}.",
            receipt=receipt,
            holding=holding,
            reconciled=reconciled,
        )

    async def _reconcile(self) -> bool:
        """Replace the local portfolio with the backend snapshot.

        Returns:
            False when the snapshot could not be fetched; the optimistic
            state is then kept until the next successful load.
        """
        try:
            snapshot = await self._ledger.fetch_portfolio(self._session.account_id)
        except OperationError as exc:
            logger.warning(
                "Portfolio reconciliation failed (%s): %s", exc.kind.value, exc.message
            )
            return False
        self._session.portfolio.replace(snapshot)
        return True

    def _build_request(
        self,
        side: TradeSide | str,
        symbol: str,
        company_name: str,
        quantity: Any,
        price_per_share: Any,
    ) -> TradeRequest:
        try:
            trade_side = side if isinstance(side, TradeSide) else TradeSide(str(side).lower())
        except ValueError as exc:
            raise ValidationError("Side must be buy or sell.", field="side") from exc
        symbol = require_text(symbol, "symbol", "a stock symbol")
        holding = self._session.portfolio.get(symbol)
        name = (company_name or "").strip() or (holding.name if holding else symbol)
        return TradeRequest(
            account_id=self._session.account_id,
            symbol=symbol,
            company_name=name,
            quantity=parse_positive_int(quantity, "quantity", "quantity"),
            price_per_share=parse_positive_decimal(
                price_per_share, "price_per_share", "a price per share"
            ),
            side=trade_side,
        )
