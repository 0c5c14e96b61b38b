"""
Mapping between backend JSON documents and wallet domain entities.

The backend's portfolio records use display-style keys ("Number of Shares",
"Price Per Share", "ShowMore" -> "Graph" -> "Daily"...). Snake-case
variants are accepted too. Every parser raises ValueError on a record
it cannot interpret; the ledger client turns that into a rejection.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from finfusion.domain.wallet.entities import (
    Company,
    Contact,
    Holding,
    LoginResult,
    PricePeriod,
    PricePoint,
    SignupRequest,
    TradeRequest,
    TransferRequest,
)

_HISTORY_KEYS = {
    PricePeriod.DAY: ("Daily", "daily", "day"),
    PricePeriod.WEEK: ("Weekly", "weekly", "week"),
    PricePeriod.MONTH: ("Monthly", "monthly", "month"),
}


def parse_decimal(value: Any, field_name: str) -> Decimal:
    """Parse a JSON number or numeric string into a Decimal.

    Floats go through ``str`` so 0.1 stays 0.1.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field_name} is not a number: {value!r}")
    try:
        result = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation as exc:
        raise ValueError(f"{field_name} is not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"{field_name} is not finite: {value!r}")
    return result


def _pick(record: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _require(record: dict[str, Any], *keys: str) -> Any:
    value = _pick(record, *keys)
    if value is None:
        raise ValueError(f"Missing field {keys[0]!r}")
    return value


def contact_from_record(record: dict[str, Any]) -> Contact:
    return Contact(
        mobile_number=str(_require(record, "mobile_number")),
        name=str(_pick(record, "name", default="")),
    )


def _price_history(record: dict[str, Any]) -> dict[PricePeriod, list[PricePoint]]:
    show_more = _pick(record, "ShowMore", "show_more", default={}) or {}
    graph = _pick(show_more, "Graph", "graph", default={}) or {}
    history: dict[PricePeriod, list[PricePoint]] = {}
    for period, keys in _HISTORY_KEYS.items():
        entries = _pick(graph, *keys, default=[]) or []
        history[period] = [
            PricePoint(
                timestamp=str(_require(entry, "Time", "time", "timestamp")),
                price=parse_decimal(_require(entry, "Price", "price"), "Price"),
            )
            for entry in entries
        ]
    return history


def holding_from_record(record: dict[str, Any]) -> Holding:
    """Build a Holding from one element of the backend's portfolio list."""
    quantity = parse_decimal(
        _require(record, "Number of Shares", "number_of_shares", "quantity"),
        "Number of Shares",
    )
    if quantity != quantity.to_integral_value() or quantity < 0:
        raise ValueError(f"Share count must be a non-negative integer: {quantity}")

    price = parse_decimal(
        _require(record, "Price Per Share", "price_per_share"), "Price Per Share"
    )
    total_raw = _pick(record, "Total Price", "total_price", "total_value")
    total = (
        parse_decimal(total_raw, "Total Price")
        if total_raw is not None
        else price * int(quantity)
    )
    last_refreshed = _pick(record, "Last Refreshed", "last_refreshed")
    time_zone = _pick(record, "Time Zone", "time_zone")
    return Holding(
        symbol=str(_require(record, "Symbol", "symbol", "stock_symbol")),
        name=str(_pick(record, "Name", "name", "company_name", default="")),
        quantity=int(quantity),
        price_per_share=price,
        total_value=total,
        sentiment=str(_pick(record, "Market Sentiment", "market_sentiment", default="")),
        price_history=_price_history(record),
        last_refreshed=str(last_refreshed) if last_refreshed is not None else None,
        time_zone=str(time_zone) if time_zone is not None else None,
    )


def company_from_record(record: dict[str, Any]) -> Company:
    return Company(
        company_name=str(_require(record, "company_name")),
        ticker_symbol=str(_pick(record, "ticker_symbol", default="")),
        information=str(_pick(record, "information", default="")),
    )


def login_result_from_body(body: dict[str, Any], mobile_number: str) -> LoginResult:
    user = _require(body, "user")
    return LoginResult(
        account_id=mobile_number,
        display_name=str(_pick(user, "name", default="")),
        wallet_amount=parse_decimal(_require(user, "wallet_amount"), "wallet_amount"),
        contacts=[contact_from_record(c) for c in body.get("contacts") or []],
        recent_contacts=[
            contact_from_record(c) for c in body.get("recent_contacts") or []
        ],
    )


def transfer_payload(request: TransferRequest) -> dict[str, Any]:
    return {
        "sender_mobile_number": request.sender_id,
        "receiver_mobile_number": request.receiver_id,
        "amount": float(request.amount),
        "category": request.category,
        "mpin": request.mpin,
        "request_id": str(request.request_id),
    }


def trade_payload(request: TradeRequest) -> dict[str, Any]:
    return {
        "mobile_number": request.account_id,
        "stock_symbol": request.symbol,
        "company_name": request.company_name,
        "quantity": request.quantity,
        "price_per_share": float(request.price_per_share),
        "request_id": str(request.request_id),
    }


def signup_payload(request: SignupRequest) -> dict[str, Any]:
    return {
        "mobile_number": request.mobile_number,
        "name": request.name,
        "email": request.email,
        "password": request.password,
        "mpin": request.mpin,
    }


def backend_message(body: Any) -> Optional[str]:
    """Return the human-readable message a backend error body carries, if any."""
    if not isinstance(body, dict):
        return None
    message = _pick(body, "message", "detail", "error")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None
