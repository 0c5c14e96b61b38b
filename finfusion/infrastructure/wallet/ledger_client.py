"""
Adapter: Remote ledger backend and inference relay.

Implements LedgerPort and AssistantRelayPort over HTTP with httpx.
A thin request/response gateway: it translates typed requests into
backend calls and typed results, with no retries and no business logic.

Failure mapping:
    non-success status     -> OperationError(REJECTED, backend message)
    transport error/timeout -> OperationError(UNREACHABLE)
    unexpected body shape   -> OperationError(REJECTED, malformed response)
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

import httpx

from finfusion.domain.wallet.entities import (
    Company,
    Holding,
    LoginResult,
    SignupRequest,
    TradeReceipt,
    TradeRequest,
    TradeSide,
    TransferReceipt,
    TransferRequest,
)
from finfusion.domain.wallet.errors import OperationError
from finfusion.domain.wallet.ports import AssistantRelayPort, LedgerPort
from finfusion.infrastructure.wallet import payloads

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}
MALFORMED_RESPONSE = "Malformed response from backend"

TRADE_PATHS = {
    TradeSide.BUY: "/buy_stock",
    TradeSide.SELL: "/sell_stock",
}


class LedgerClient(LedgerPort, AssistantRelayPort):
    """HTTP gateway to the FinFusion backend.

    Args:
        base_url: Root URL of the ledger backend.
        relay_url: Absolute URL of the inference webhook.
        api_key: Key sent to the inference webhook, if any.
        api_key_header: Header that carries ``api_key``.
        timeout: Request timeout in seconds.
        client: Pre-built ``httpx.AsyncClient``; the caller then owns it.
    """

    def __init__(
        self,
        base_url: str,
        relay_url: str,
        api_key: Optional[str] = None,
        api_key_header: str = "x-api-key",
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._relay_url = relay_url
        self._api_key = api_key
        self._api_key_header = api_key_header
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout, headers=JSON_HEADERS
        )

    async def __aenter__(self) -> "LedgerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Wallet
    # ------------------------------------------------------------------

    async def transfer(self, request: TransferRequest) -> TransferReceipt:
        logger.info(
            "Submitting transfer request_id=%s to receiver=%s",
            request.request_id,
            request.receiver_id,
        )
        body = await self._post(
            "/transfer",
            payloads.transfer_payload(request),
            headers={"Idempotency-Key": str(request.request_id)},
        )
        transaction_id = body.get("transaction_id") if isinstance(body, dict) else None
        return TransferReceipt(
            transaction_id=str(transaction_id) if transaction_id is not None else None,
            message=payloads.backend_message(body),
        )

    async def fetch_balance(self, account_id: str) -> Decimal:
        body = await self._post("/get_wallet_amount", {"mobile_number": account_id})
        return self._parse(
            lambda: payloads.parse_decimal(body["wallet_amount"], "wallet_amount")
        )

    # ------------------------------------------------------------------
    # Brokerage
    # ------------------------------------------------------------------

    async def fetch_portfolio(self, account_id: str) -> list[Holding]:
        body = await self._post("/portfolio", {"mobile_number": account_id})
        return self._parse(
            lambda: [
                payloads.holding_from_record(record)
                for record in body.get("portfolio") or []
            ]
        )

    async def submit_trade(self, request: TradeRequest) -> TradeReceipt:
        logger.info(
            "Submitting %s of %d %s request_id=%s",
            request.side.value,
            request.quantity,
            request.symbol,
            request.request_id,
        )
        body = await self._post(
            TRADE_PATHS[request.side],
            payloads.trade_payload(request),
            headers={"Idempotency-Key": str(request.request_id)},
        )
        return TradeReceipt(message=payloads.backend_message(body))

    async def explore(self) -> dict[str, list[Company]]:
        body = await self._request("GET", "/explore")
        categories = body.get("categories") if isinstance(body, dict) else None
        if not isinstance(categories, dict):
            raise OperationError.rejected("Failed to fetch data.")
        return self._parse(
            lambda: {
                name: [payloads.company_from_record(c) for c in companies or []]
                for name, companies in categories.items()
            }
        )

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def login(self, mobile_number: str, mpin: str) -> LoginResult:
        body = await self._post(
            "/login", {"mobile_number": mobile_number, "mpin": mpin}
        )
        return self._parse(lambda: payloads.login_result_from_body(body, mobile_number))

    async def signup(self, request: SignupRequest) -> str:
        body = await self._post("/signup", payloads.signup_payload(request))
        return payloads.backend_message(body) or "Sign-up successful."

    # ------------------------------------------------------------------
    # Assistant
    # ------------------------------------------------------------------

    async def fetch_financial_summary(self, account_id: str) -> dict[str, Any]:
        body = await self._post("/financial-summary", {"mobile_number": account_id})
        if not isinstance(body, dict):
            raise OperationError.rejected(MALFORMED_RESPONSE)
        return body

    async def relay_to_assistant(self, enriched_prompt: str) -> str:
        headers = {}
        if self._api_key:
            headers[self._api_key_header] = self._api_key
        body = await self._post(
            self._relay_url, {"payload": enriched_prompt}, headers=headers
        )
        text = body.get("text") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise OperationError.rejected(MALFORMED_RESPONSE)
        return text

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        return await self._request("POST", url, payload, headers)

    async def _request(
        self,
        method: str,
        url: str,
        payload: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Perform one HTTP call and return the decoded JSON body.

        Raises:
            OperationError: REJECTED on non-success status,
                UNREACHABLE when no response arrives.
        """
        try:
            response = await self._client.request(
                method,
                url,
                json=payload,
                headers={**JSON_HEADERS, **(headers or {})},
            )
        except httpx.TransportError as exc:
            logger.warning("%s %s unreachable: %s", method, url, type(exc).__name__)
            raise OperationError.unreachable() from exc

        body = _decode(response)
        if not response.is_success:
            message = payloads.backend_message(body) or (
                f"Request failed with status {response.status_code}"
            )
            logger.warning(
                "%s %s rejected with status %d", method, url, response.status_code
            )
            raise OperationError.rejected(message, response.status_code)
        return body

    @staticmethod
    def _parse(build: Callable[[], T]) -> T:
        try:
            return build()
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.error("Could not parse backend response: %s", exc)
            raise OperationError.rejected(MALFORMED_RESPONSE) from exc


def _decode(response: httpx.Response) -> Any:
    """Return the JSON body, or None when the body is empty or not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
