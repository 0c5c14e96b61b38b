"""
Data Transfer Objects for the wallet application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with little or no behavior.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from finfusion.domain.wallet.entities import (
    ChatMessage,
    Company,
    Holding,
    OperationStatus,
    TradeReceipt,
    TradeSide,
    TransferReceipt,
)
from finfusion.domain.wallet.errors import OperationErrorKind


@dataclass(frozen=True)
class TransferOutcome:
    """Result of one transfer submission.

    Attributes:
        status: SETTLED or FAILED.
        message: Human-readable summary to show the user.
        receipt: Backend acknowledgement when settled.
        new_balance: Confirmed balance after settlement.
        error_kind: REJECTED or UNREACHABLE when failed.
    """

    status: OperationStatus
    message: str
    receipt: Optional[TransferReceipt] = None
    new_balance: Optional[Decimal] = None
    error_kind: Optional[OperationErrorKind] = None

    @property
    def settled(self) -> bool:
        return self.status is OperationStatus.SETTLED


@dataclass(frozen=True)
class TradeOutcome:
    """Result of one trade submission.

    Attributes:
        status: SETTLED or FAILED.
        side: Direction of the trade.
        symbol: Traded symbol.
        message: Human-readable summary to show the user.
        receipt: Backend acknowledgement when settled.
        holding: The holding after settlement (reconciled when possible).
        reconciled: True when the portfolio re-fetch succeeded.
        error_kind: REJECTED or UNREACHABLE when failed.
    """

    status: OperationStatus
    side: TradeSide
    symbol: str
    message: str
    receipt: Optional[TradeReceipt] = None
    holding: Optional[Holding] = None
    reconciled: bool = False
    error_kind: Optional[OperationErrorKind] = None

    @property
    def settled(self) -> bool:
        return self.status is OperationStatus.SETTLED


@dataclass(frozen=True)
class AssistantReply:
    """The assistant message appended for one question.

    Attributes:
        question: The user's message as appended to the transcript.
        reply: The assistant's message as appended to the transcript.
        fallback: True when the pipeline failed and the generic reply was used.
    """

    question: ChatMessage
    reply: ChatMessage
    fallback: bool = False


@dataclass(frozen=True)
class ChatTopic:
    """Subject of a topic-initiated question, e.g. a holding.

    Attributes:
        label: How the subject is named in the question.
        details: Extra context merged into the financial summary.
    """

    label: str
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_holding(cls, holding: Holding) -> "ChatTopic":
        return cls(
            label=f"my holding {holding.name} ({holding.symbol})",
            details={
                "symbol": holding.symbol,
                "name": holding.name,
                "quantity": holding.quantity,
                "price_per_share": str(holding.price_per_share),
                "total_value": str(holding.total_value),
                "sentiment": holding.sentiment,
            },
        )

    @classmethod
    def for_company(cls, company: Company) -> "ChatTopic":
        return cls(
            label=f"{company.company_name} ({company.ticker_symbol})",
            details={
                "company_name": company.company_name,
                "ticker_symbol": company.ticker_symbol,
                "information": company.information,
            },
        )
