"""
Pydantic schemas for wallet API request/response validation.

These schemas define the API contract between the UI shell and the core.
Business preconditions (MPIN format, positive amounts, held quantity)
are enforced by the executors, not here, so the same rules apply to
every caller.
"""

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from finfusion.application.wallet.dtos import AssistantReply, TradeOutcome, TransferOutcome
from finfusion.domain.wallet.entities import ChatMessage, Company, Contact, Holding

MOBILE_DESCRIPTION = "Mobile number identifying the account"
MAX_TEXT_LEN = 2000


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    backend: str
    open_sessions: int


class ErrorResponse(BaseModel):
    """Standard error body."""

    error: str
    detail: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class ContactItem(BaseModel):
    mobile_number: str
    name: str

    @classmethod
    def from_entity(cls, contact: Contact) -> "ContactItem":
        return cls(mobile_number=contact.mobile_number, name=contact.name)


class LoginRequest(BaseModel):
    """Request schema for sign-in.

    Attributes:
        mobile_number: Account mobile number.
        mpin: Six-digit MPIN.
    """

    mobile_number: str = Field(..., max_length=20, description=MOBILE_DESCRIPTION)
    mpin: str = Field(..., max_length=12, description="Six-digit MPIN")


class LoginResponse(BaseModel):
    """Response schema for sign-in. ``session_id`` goes in X-Session-Id."""

    session_id: str
    display_name: str
    balance: Decimal
    contacts: list[ContactItem]
    recent_contacts: list[ContactItem]


class SignupBody(BaseModel):
    mobile_number: str = Field(..., max_length=20, description=MOBILE_DESCRIPTION)
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    mpin: str = Field(..., max_length=12)


class BalanceResponse(BaseModel):
    confirmed_balance: Decimal
    displayed_balance: Decimal


class TransferBody(BaseModel):
    """Request schema for a wallet transfer.

    Amount and MPIN are taken as typed; the executor validates them.
    """

    receiver_mobile_number: Optional[str] = Field(
        default=None, max_length=20, description="Selected contact's mobile number"
    )
    amount: str = Field(..., max_length=32)
    mpin: str = Field(..., max_length=12)
    category: str = Field(..., max_length=64)


class TransferResponse(BaseModel):
    status: str
    message: str
    transaction_id: Optional[str] = None
    balance: BalanceResponse

    @classmethod
    def from_outcome(
        cls, outcome: TransferOutcome, balance: BalanceResponse
    ) -> "TransferResponse":
        return cls(
            status=outcome.status.value,
            message=outcome.message,
            transaction_id=outcome.receipt.transaction_id if outcome.receipt else None,
            balance=balance,
        )


class PricePointItem(BaseModel):
    timestamp: str
    price: Decimal


class HoldingItem(BaseModel):
    symbol: str
    name: str
    quantity: int
    price_per_share: Decimal
    total_value: Decimal
    sentiment: str
    price_history: dict[str, list[PricePointItem]]
    last_refreshed: Optional[str] = None
    time_zone: Optional[str] = None

    @classmethod
    def from_entity(cls, holding: Holding) -> "HoldingItem":
        return cls(
            symbol=holding.symbol,
            name=holding.name,
            quantity=holding.quantity,
            price_per_share=holding.price_per_share,
            total_value=holding.total_value,
            sentiment=holding.sentiment,
            price_history={
                period.value: [
                    PricePointItem(timestamp=p.timestamp, price=p.price) for p in points
                ]
                for period, points in holding.price_history.items()
            },
            last_refreshed=holding.last_refreshed,
            time_zone=holding.time_zone,
        )


class PortfolioResponse(BaseModel):
    holdings: list[HoldingItem]


class TradeBody(BaseModel):
    """Request schema for a buy or sell instruction."""

    side: Literal["buy", "sell"]
    symbol: str = Field(..., min_length=1, max_length=16)
    company_name: str = Field(default="", max_length=100)
    quantity: int
    price_per_share: Decimal


class TradeResponse(BaseModel):
    status: str
    side: str
    symbol: str
    message: str
    reconciled: bool
    holding: Optional[HoldingItem] = None

    @classmethod
    def from_outcome(cls, outcome: TradeOutcome) -> "TradeResponse":
        return cls(
            status=outcome.status.value,
            side=outcome.side.value,
            symbol=outcome.symbol,
            message=outcome.message,
            reconciled=outcome.reconciled,
            holding=HoldingItem.from_entity(outcome.holding) if outcome.holding else None,
        )


class CompanyItem(BaseModel):
    company_name: str
    ticker_symbol: str
    information: str

    @classmethod
    def from_entity(cls, company: Company) -> "CompanyItem":
        return cls(
            company_name=company.company_name,
            ticker_symbol=company.ticker_symbol,
            information=company.information,
        )


class ExploreResponse(BaseModel):
    categories: dict[str, list[CompanyItem]]


class AskBody(BaseModel):
    text: str = Field(..., max_length=MAX_TEXT_LEN)


class TopicBody(BaseModel):
    """Ask about one of the session's holdings."""

    symbol: str = Field(..., min_length=1, max_length=16)


class ChatMessageItem(BaseModel):
    id: int
    sender: str
    text: str

    @classmethod
    def from_entity(cls, message: ChatMessage) -> "ChatMessageItem":
        return cls(id=message.id, sender=message.sender.value, text=message.text)


class AssistantReplyResponse(BaseModel):
    question: ChatMessageItem
    reply: ChatMessageItem
    fallback: bool

    @classmethod
    def from_reply(cls, reply: AssistantReply) -> "AssistantReplyResponse":
        return cls(
            question=ChatMessageItem.from_entity(reply.question),
            reply=ChatMessageItem.from_entity(reply.reply),
            fallback=reply.fallback,
        )


class TranscriptResponse(BaseModel):
    messages: list[ChatMessageItem]
    awaiting_response: bool
