"""
Use case: Send money from the session's wallet to a contact.

Input: selected contact, amount, MPIN and category as typed by the user.
Output: TransferOutcome
Side effects: On settlement, debits the session's confirmed balance,
    animates the displayed balance to it and clears the transfer form.
Failure cases: ValidationError (raised, nothing submitted),
    OperationInProgressError (raised), backend rejection or
    unreachable backend (FAILED outcome, balance and form untouched).

Balance policy: confirm-then-update. Nothing is deducted locally until
the backend accepts the transfer, so the wallet is never shown as spent
for a payment that did not happen. Trades follow the opposite policy,
see ``trade.py``.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from finfusion.application.wallet.dtos import TransferOutcome
from finfusion.application.wallet.validation import (
    MONEY_PLACES,
    parse_positive_decimal,
    require_mpin,
    require_text,
)
from finfusion.domain.wallet.balance_animation import BalanceAnimator
from finfusion.domain.wallet.entities import (
    Contact,
    OperationStatus,
    SessionContext,
    TransferRequest,
)
from finfusion.domain.wallet.errors import (
    OperationError,
    OperationInProgressError,
    ValidationError,
)
from finfusion.domain.wallet.ports import LedgerPort

logger = logging.getLogger(__name__)

REJECTED_FALLBACK = "Failed to complete the transaction."
UNREACHABLE_MESSAGE = "Network error. Try again."


@dataclass
class TransferForm:
    """What the transfer screen currently holds."""

    selected_contact: Optional[Contact] = None
    amount: str = ""
    mpin: str = ""
    category: str = ""

    def clear(self) -> None:
        self.selected_contact = None
        self.amount = ""
        self.mpin = ""
        self.category = ""


class TransferExecutor:
    """Validates and submits a peer-to-peer payment.

    One executor belongs to one session screen. It runs at most one
    submission at a time and exposes its state machine through ``status``.
    """

    def __init__(
        self,
        session: SessionContext,
        ledger: LedgerPort,
        animator: Optional[BalanceAnimator] = None,
    ) -> None:
        self._session = session
        self._ledger = ledger
        self._animator = animator or BalanceAnimator()
        self.form = TransferForm()
        self.status = OperationStatus.IDLE

    async def execute(
        self,
        selected_contact: Optional[Contact],
        amount_input: str,
        mpin_input: str,
        category: str,
    ) -> TransferOutcome:
        """Run the transfer.

        Args:
            selected_contact: The payee, or None when nothing is selected.
            amount_input: Amount as typed.
            mpin_input: MPIN as typed.
            category: Spending category label.

        Returns:
            A SETTLED or FAILED outcome.

        Raises:
            ValidationError: If a precondition fails. No request is sent.
            OperationInProgressError: If a transfer is already submitting.
        """
        if self.status is OperationStatus.SUBMITTING:
            raise OperationInProgressError("transfer")

        self.form.selected_contact = selected_contact
        self.form.amount = amount_input
        self.form.mpin = mpin_input
        self.form.category = category

        request = self._build_request()

        self.status = OperationStatus.SUBMITTING
        try:
            receipt = await self._ledger.transfer(request)
        except OperationError as exc:
            self.status = OperationStatus.FAILED
            message = UNREACHABLE_MESSAGE if exc.is_unreachable else (
                exc.message or REJECTED_FALLBACK
            )
            logger.warning(
                "Transfer request_id=%s failed (%s): %s",
                request.request_id,
                exc.kind.value,
                message,
            )
            return TransferOutcome(
                status=OperationStatus.FAILED,
                message=message,
                error_kind=exc.kind,
            )
        except BaseException:
            self.status = OperationStatus.IDLE
            raise

        new_balance = self._session.debit(request.amount)
        try:
            await self._animator.animate(self._session)
        finally:
            self.status = OperationStatus.SETTLED
        self.form.clear()

        logger.info(
            "Transfer request_id=%s settled, transaction_id=%s",
            request.request_id,
            receipt.transaction_id,
        )
        payee = selected_contact.name if selected_contact else request.receiver_id
        return TransferOutcome(
            status=OperationStatus.SETTLED,
            message=f"₹{request.amount} sent successfully to {payee}.",
            receipt=receipt,
            new_balance=new_balance,
        )

    def _build_request(self) -> TransferRequest:
        form = self.form
        mpin = require_mpin(form.mpin)
        amount: Decimal = parse_positive_decimal(
            form.amount, "amount", "an amount", places=MONEY_PLACES
        )
        if form.selected_contact is None:
            raise ValidationError("Please select a contact.", field="contact")
        category = require_text(form.category, "category", "a category")
        return TransferRequest(
            sender_id=self._session.account_id,
            receiver_id=form.selected_contact.mobile_number,
            amount=amount,
            category=category,
            mpin=mpin,
        )
