"""
Domain entities for the wallet bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
The backend ledger is the system of record; these objects hold the
client's view of it.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterator, Optional
from uuid import UUID, uuid4


class TradeSide(Enum):
    """Direction of a brokerage trade."""

    BUY = "buy"
    SELL = "sell"

    @property
    def sign(self) -> int:
        return 1 if self is TradeSide.BUY else -1


class PricePeriod(Enum):
    """Granularity of a holding's price history series."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class Sender(Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class OperationStatus(Enum):
    """Lifecycle of a value-moving submission.

    IDLE -> SUBMITTING -> SETTLED | FAILED
    """

    IDLE = "idle"
    SUBMITTING = "submitting"
    SETTLED = "settled"
    FAILED = "failed"


@dataclass(frozen=True)
class Contact:
    """A payee known to the backend. Keyed by mobile number."""

    mobile_number: str
    name: str


@dataclass(frozen=True)
class PricePoint:
    """One sample of a holding's price history."""

    timestamp: str
    price: Decimal


@dataclass
class Holding:
    """A position in the user's simulated brokerage portfolio.

    Mutated in place by the trade executor; a holding that reaches zero
    shares stays in the portfolio as a zero entry.
    """

    symbol: str
    name: str
    quantity: int
    price_per_share: Decimal
    total_value: Decimal
    sentiment: str = ""
    price_history: dict[PricePeriod, list[PricePoint]] = field(default_factory=dict)
    last_refreshed: Optional[str] = None
    time_zone: Optional[str] = None

    def apply_fill(self, side: TradeSide, quantity: int, price: Decimal) -> None:
        """Apply a settled trade as a signed delta.

        ``quantity`` and ``total_value`` move by ``quantity`` and
        ``quantity * price``; ``price_per_share`` is re-derived as the
        average, rounded to cents or the fill price's precision if finer.
        A holding that reaches zero shares keeps its last price and a
        zero total.
        """
        self.quantity += side.sign * quantity
        if self.quantity == 0:
            self.total_value = Decimal("0")
            return
        self.total_value += side.sign * quantity * price
        exponent = price.as_tuple().exponent
        places = min(exponent, -2) if isinstance(exponent, int) else -2
        self.price_per_share = (self.total_value / self.quantity).quantize(
            Decimal(1).scaleb(places)
        )


class Portfolio:
    """Ordered collection of holdings keyed by symbol."""

    def __init__(self, holdings: Optional[list[Holding]] = None) -> None:
        self._holdings: dict[str, Holding] = {}
        self.replace(holdings or [])

    def __iter__(self) -> Iterator[Holding]:
        return iter(self._holdings.values())

    def __len__(self) -> int:
        return len(self._holdings)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._holdings

    def get(self, symbol: str) -> Optional[Holding]:
        return self._holdings.get(symbol)

    def held_quantity(self, symbol: str) -> int:
        holding = self._holdings.get(symbol)
        return holding.quantity if holding is not None else 0

    def holdings(self) -> list[Holding]:
        return list(self._holdings.values())

    def replace(self, holdings: list[Holding]) -> None:
        """Overwrite local state with an authoritative snapshot."""
        self._holdings = {h.symbol: h for h in holdings}

    def apply_fill(
        self,
        side: TradeSide,
        symbol: str,
        company_name: str,
        quantity: int,
        price: Decimal,
    ) -> Holding:
        """Apply a settled trade to the matching holding.

        A buy of a symbol not yet held opens a new zero holding first.
        """
        holding = self._holdings.get(symbol)
        if holding is None:
            holding = Holding(
                symbol=symbol,
                name=company_name,
                quantity=0,
                price_per_share=price,
                total_value=Decimal("0"),
            )
            self._holdings[symbol] = holding
        holding.apply_fill(side, quantity, price)
        return holding


BalanceListener = Callable[["SessionContext"], None]


@dataclass
class SessionContext:
    """Identity and balance snapshot of the signed-in user.

    ``displayed_balance`` may lag ``confirmed_balance`` while the balance
    animation runs; once an operation resolves the two agree.
    """

    account_id: str
    display_name: str
    confirmed_balance: Decimal
    displayed_balance: Decimal
    contacts: list[Contact] = field(default_factory=list)
    recent_contacts: list[Contact] = field(default_factory=list)
    portfolio: Portfolio = field(default_factory=Portfolio)
    _listeners: list[BalanceListener] = field(
        default_factory=list, repr=False, compare=False
    )

    @classmethod
    def open(
        cls,
        account_id: str,
        display_name: str,
        balance: Decimal,
        contacts: Optional[list[Contact]] = None,
        recent_contacts: Optional[list[Contact]] = None,
    ) -> "SessionContext":
        return cls(
            account_id=account_id,
            display_name=display_name,
            confirmed_balance=balance,
            displayed_balance=balance,
            contacts=list(contacts or []),
            recent_contacts=list(recent_contacts or []),
        )

    @property
    def is_settled(self) -> bool:
        return self.displayed_balance == self.confirmed_balance

    def subscribe(self, listener: BalanceListener) -> None:
        """Register a callback invoked on every balance change."""
        self._listeners.append(listener)

    def debit(self, amount: Decimal) -> Decimal:
        """Record a confirmed outgoing transfer and return the new balance."""
        self.confirmed_balance -= amount
        self._notify()
        return self.confirmed_balance

    def show_balance(self, value: Decimal) -> None:
        self.displayed_balance = value
        self._notify()

    def reset_balance(self, value: Decimal) -> None:
        """Adopt an authoritative balance for both confirmed and displayed."""
        self.confirmed_balance = value
        self.displayed_balance = value
        self._notify()

    def find_contact(self, mobile_number: str) -> Optional[Contact]:
        for contact in (*self.contacts, *self.recent_contacts):
            if contact.mobile_number == mobile_number:
                return contact
        return None

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)


@dataclass(frozen=True)
class TransferRequest:
    """A single peer-to-peer payment submission. Never reused."""

    sender_id: str
    receiver_id: str
    amount: Decimal
    category: str
    mpin: str
    request_id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class TransferReceipt:
    """Backend acknowledgement of a transfer."""

    transaction_id: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class TradeRequest:
    """A single buy or sell instruction. Never reused."""

    account_id: str
    symbol: str
    company_name: str
    quantity: int
    price_per_share: Decimal
    side: TradeSide
    request_id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class TradeReceipt:
    """Backend acknowledgement of a trade."""

    message: Optional[str] = None


@dataclass(frozen=True)
class ChatMessage:
    """One entry of the assistant transcript. Immutable once appended."""

    id: int
    sender: Sender
    text: str


@dataclass(frozen=True)
class Company:
    """A listed company from the explore catalog."""

    company_name: str
    ticker_symbol: str
    information: str = ""


@dataclass(frozen=True)
class LoginResult:
    """Session snapshot returned by the backend at sign-in."""

    account_id: str
    display_name: str
    wallet_amount: Decimal
    contacts: list[Contact]
    recent_contacts: list[Contact]


@dataclass(frozen=True)
class SignupRequest:
    """New account registration details."""

    mobile_number: str
    name: str
    email: str
    password: str
    mpin: str
