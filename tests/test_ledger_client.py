"""
Tests for the remote ledger client adapter.

The backend is simulated with httpx.MockTransport. Each test checks the
request the client sends and how it maps the response or failure.
"""

import json
from decimal import Decimal

import httpx
import pytest

from finfusion.domain.wallet.entities import (
    PricePeriod,
    SignupRequest,
    TradeRequest,
    TradeSide,
    TransferRequest,
)
from finfusion.domain.wallet.errors import OperationError, OperationErrorKind
from finfusion.infrastructure.wallet.ledger_client import MALFORMED_RESPONSE, LedgerClient

BASE_URL = "https://ledger.test"
RELAY_URL = "https://relay.test/webhook"

PORTFOLIO_RECORD = {
    "Symbol": "TCS",
    "Name": "Tata Consultancy",
    "Number of Shares": 10,
    "Price Per Share": 3500.5,
    "Total Price": 35005.0,
    "Market Sentiment": "Bullish",
    "Last Refreshed": "2024-03-01",
    "Time Zone": "Asia/Kolkata",
    "ShowMore": {
        "Graph": {
            "Daily": [
                {"Time": "2024-03-01T09:15:00", "Price": 3490},
                {"Time": "2024-03-01T15:30:00", "Price": 3500.5},
            ],
            "Weekly": [{"Time": "2024-02-26", "Price": 3400}],
            "Monthly": [],
        }
    },
}


def _client(handler, api_key: str | None = "secret") -> LedgerClient:
    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return LedgerClient(
        base_url=BASE_URL, relay_url=RELAY_URL, api_key=api_key, client=http
    )


def _transfer_request() -> TransferRequest:
    return TransferRequest(
        sender_id="9000000001",
        receiver_id="9000000002",
        amount=Decimal("500.00"),
        category="Food",
        mpin="123456",
    )


class TestTransfer:
    """Tests for POST /transfer."""

    @pytest.mark.asyncio
    async def test_success_sends_payload_and_idempotency_key(self) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            captured["headers"] = request.headers
            return httpx.Response(200, json={"transaction_id": 42, "message": "Done"})

        request = _transfer_request()
        receipt = await _client(handler).transfer(request)

        assert captured["path"] == "/transfer"
        assert captured["body"]["sender_mobile_number"] == "9000000001"
        assert captured["body"]["receiver_mobile_number"] == "9000000002"
        assert captured["body"]["amount"] == 500.0
        assert captured["body"]["category"] == "Food"
        assert captured["body"]["request_id"] == str(request.request_id)
        assert captured["headers"]["Idempotency-Key"] == str(request.request_id)
        assert captured["headers"]["Content-Type"] == "application/json"
        assert receipt.transaction_id == "42"
        assert receipt.message == "Done"

    @pytest.mark.asyncio
    async def test_rejection_carries_backend_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Insufficient balance"})

        with pytest.raises(OperationError) as exc_info:
            await _client(handler).transfer(_transfer_request())

        assert exc_info.value.kind is OperationErrorKind.REJECTED
        assert exc_info.value.message == "Insufficient balance"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_rejection_without_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>bad gateway</html>")

        with pytest.raises(OperationError) as exc_info:
            await _client(handler).transfer(_transfer_request())

        assert exc_info.value.kind is OperationErrorKind.REJECTED
        assert exc_info.value.message == "Request failed with status 502"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")],
    )
    async def test_transport_failure_is_unreachable(self, error) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise error

        with pytest.raises(OperationError) as exc_info:
            await _client(handler).transfer(_transfer_request())

        assert exc_info.value.kind is OperationErrorKind.UNREACHABLE
        assert exc_info.value.status_code is None


class TestBalanceAndPortfolio:
    """Tests for wallet balance and portfolio reads."""

    @pytest.mark.asyncio
    async def test_fetch_balance(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/get_wallet_amount"
            assert json.loads(request.content) == {"mobile_number": "9000000001"}
            return httpx.Response(200, json={"wallet_amount": 1500.5})

        assert await _client(handler).fetch_balance("9000000001") == Decimal("1500.50")

    @pytest.mark.asyncio
    async def test_fetch_balance_missing_field_is_malformed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"balance": 1})

        with pytest.raises(OperationError, match=MALFORMED_RESPONSE):
            await _client(handler).fetch_balance("9000000001")

    @pytest.mark.asyncio
    async def test_fetch_portfolio_maps_backend_records(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/portfolio"
            return httpx.Response(200, json={"portfolio": [PORTFOLIO_RECORD]})

        [holding] = await _client(handler).fetch_portfolio("9000000001")

        assert holding.symbol == "TCS"
        assert holding.name == "Tata Consultancy"
        assert holding.quantity == 10
        assert holding.price_per_share == Decimal("3500.5")
        assert holding.total_value == Decimal("35005.0")
        assert holding.sentiment == "Bullish"
        assert holding.time_zone == "Asia/Kolkata"
        daily = holding.price_history[PricePeriod.DAY]
        assert [p.price for p in daily] == [Decimal("3490"), Decimal("3500.5")]
        assert len(holding.price_history[PricePeriod.WEEK]) == 1
        assert holding.price_history[PricePeriod.MONTH] == []

    @pytest.mark.asyncio
    async def test_total_defaults_to_quantity_times_price(self) -> None:
        record = {"symbol": "INFY", "quantity": 3, "price_per_share": "10.50"}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"portfolio": [record]})

        [holding] = await _client(handler).fetch_portfolio("1")
        assert holding.total_value == Decimal("31.50")

    @pytest.mark.asyncio
    async def test_missing_portfolio_is_empty(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        assert await _client(handler).fetch_portfolio("1") == []

    @pytest.mark.asyncio
    async def test_bad_record_is_malformed(self) -> None:
        record = {**PORTFOLIO_RECORD, "Number of Shares": 2.5}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"portfolio": [record]})

        with pytest.raises(OperationError) as exc_info:
            await _client(handler).fetch_portfolio("1")
        assert exc_info.value.message == MALFORMED_RESPONSE


class TestTrades:
    """Tests for /buy_stock and /sell_stock."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("side", "path"), [(TradeSide.BUY, "/buy_stock"), (TradeSide.SELL, "/sell_stock")]
    )
    async def test_routes_by_side(self, side, path) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": "Order placed"})

        request = TradeRequest(
            account_id="1",
            symbol="TCS",
            company_name="Tata Consultancy",
            quantity=3,
            price_per_share=Decimal("100.25"),
            side=side,
        )
        receipt = await _client(handler).submit_trade(request)

        assert captured["path"] == path
        assert captured["body"] == {
            "mobile_number": "1",
            "stock_symbol": "TCS",
            "company_name": "Tata Consultancy",
            "quantity": 3,
            "price_per_share": 100.25,
            "request_id": str(request.request_id),
        }
        assert receipt.message == "Order placed"


class TestAssistantEndpoints:
    """Tests for the financial summary and the inference relay."""

    @pytest.mark.asyncio
    async def test_financial_summary_returns_document(self) -> None:
        summary = {"net_worth_value": 12000, "breakdown_of_cost": {"Food": 300}}

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/financial-summary"
            return httpx.Response(200, json=summary)

        assert await _client(handler).fetch_financial_summary("1") == summary

    @pytest.mark.asyncio
    async def test_relay_sends_prompt_and_key(self) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["key"] = request.headers.get("x-api-key")
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"text": "You saved 20%."})

        reply = await _client(handler).relay_to_assistant("How much did I save?")

        assert captured["url"] == RELAY_URL
        assert captured["key"] == "secret"
        assert captured["body"] == {"payload": "How much did I save?"}
        assert reply == "You saved 20%."

    @pytest.mark.asyncio
    async def test_relay_without_key_sends_no_header(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert "x-api-key" not in request.headers
            return httpx.Response(200, json={"text": "ok"})

        assert await _client(handler, api_key=None).relay_to_assistant("hi") == "ok"

    @pytest.mark.asyncio
    async def test_relay_without_text_is_malformed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"answer": "?"})

        with pytest.raises(OperationError, match=MALFORMED_RESPONSE):
            await _client(handler).relay_to_assistant("hi")


class TestAccountEndpoints:
    """Tests for login, signup and explore."""

    @pytest.mark.asyncio
    async def test_login_builds_snapshot(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content) == {
                "mobile_number": "9000000001",
                "mpin": "123456",
            }
            return httpx.Response(
                200,
                json={
                    "user": {"name": "Asha", "wallet_amount": 1000},
                    "contacts": [{"mobile_number": "9000000002", "name": "Bala"}],
                    "recent_contacts": [],
                },
            )

        result = await _client(handler).login("9000000001", "123456")

        assert result.account_id == "9000000001"
        assert result.display_name == "Asha"
        assert result.wallet_amount == Decimal("1000")
        assert result.contacts[0].name == "Bala"
        assert result.recent_contacts == []

    @pytest.mark.asyncio
    async def test_login_rejected(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "Invalid login"})

        with pytest.raises(OperationError, match="Invalid login"):
            await _client(handler).login("9000000001", "000000")

    @pytest.mark.asyncio
    async def test_signup_returns_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content)["email"] == "a@b.c"
            return httpx.Response(201, json={"message": "User created"})

        request = SignupRequest("9", "Asha", "a@b.c", "password1", "123456")
        assert await _client(handler).signup(request) == "User created"

    @pytest.mark.asyncio
    async def test_explore_groups_companies(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/explore"
            return httpx.Response(
                200,
                json={
                    "categories": {
                        "IT": [
                            {
                                "company_name": "Infosys",
                                "ticker_symbol": "INFY",
                                "information": "Consulting",
                            }
                        ]
                    }
                },
            )

        catalog = await _client(handler).explore()
        assert catalog["IT"][0].ticker_symbol == "INFY"

    @pytest.mark.asyncio
    async def test_explore_without_categories(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": "none"})

        with pytest.raises(OperationError, match="Failed to fetch data."):
            await _client(handler).explore()
