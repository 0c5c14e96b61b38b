"""
FastAPI router for the wallet bounded context.

All routes delegate to executors and use cases. No business logic here.
Session-scoped routes resolve the caller's session from X-Session-Id.
Error mapping is handled by centralized error handlers; a FAILED
transfer or trade is an expected result and is returned with 200.
"""

from fastapi import APIRouter, Depends, Header, Request

from finfusion.application.wallet.dtos import ChatTopic
from finfusion.application.wallet.session import (
    AuthenticateUseCase,
    ExploreCompaniesUseCase,
    LoadPortfolioUseCase,
    RefreshBalanceUseCase,
    SignupUseCase,
)
from finfusion.domain.wallet.entities import SessionContext, SignupRequest
from finfusion.domain.wallet.errors import ValidationError
from finfusion.infrastructure.wallet.ledger_client import LedgerClient
from finfusion.interfaces.wallet.dependencies import (
    SESSION_HEADER,
    SessionHandle,
    SessionRegistry,
    get_authenticate_use_case,
    get_explore_use_case,
    get_ledger,
    get_load_portfolio_use_case,
    get_refresh_balance_use_case,
    get_registry,
    get_session_handle,
    get_signup_use_case,
)
from finfusion.interfaces.wallet.schemas import (
    AskBody,
    AssistantReplyResponse,
    BalanceResponse,
    ChatMessageItem,
    CompanyItem,
    ContactItem,
    ErrorResponse,
    ExploreResponse,
    HoldingItem,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PortfolioResponse,
    SignupBody,
    TopicBody,
    TradeBody,
    TradeResponse,
    TranscriptResponse,
    TransferBody,
    TransferResponse,
)
from finfusion.shared.security.rate_limiting import AUTH_RATE_LIMIT, limiter

router = APIRouter()


def _balance(session: SessionContext) -> BalanceResponse:
    return BalanceResponse(
        confirmed_balance=session.confirmed_balance,
        displayed_balance=session.displayed_balance,
    )


# ── Session ──────────────────────────────────────────────────────────


@router.post(
    "/session/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    tags=["session"],
    summary="Sign in",
)
@limiter.limit(AUTH_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    use_case: AuthenticateUseCase = Depends(get_authenticate_use_case),
    registry: SessionRegistry = Depends(get_registry),
    ledger: LedgerClient = Depends(get_ledger),
) -> LoginResponse:
    """Authenticate and open an in-memory session."""
    session = await use_case.execute(body.mobile_number, body.mpin)
    session_id = registry.open(session, ledger)
    return LoginResponse(
        session_id=session_id,
        display_name=session.display_name,
        balance=session.confirmed_balance,
        contacts=[ContactItem.from_entity(c) for c in session.contacts],
        recent_contacts=[ContactItem.from_entity(c) for c in session.recent_contacts],
    )


@router.post(
    "/session/signup",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    tags=["session"],
    summary="Sign up",
)
@limiter.limit(AUTH_RATE_LIMIT)
async def signup(
    request: Request,
    body: SignupBody,
    use_case: SignupUseCase = Depends(get_signup_use_case),
) -> MessageResponse:
    """Register a new account."""
    message = await use_case.execute(
        SignupRequest(
            mobile_number=body.mobile_number,
            name=body.name,
            email=body.email,
            password=body.password,
            mpin=body.mpin,
        )
    )
    return MessageResponse(message=message)


@router.post(
    "/session/logout",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["session"],
    summary="Sign out",
)
async def logout(
    x_session_id: str = Header(..., alias=SESSION_HEADER),
    registry: SessionRegistry = Depends(get_registry),
) -> MessageResponse:
    """Discard the session, its transcript and its executors."""
    registry.close(x_session_id)
    return MessageResponse(message="Signed out.")


# ── Wallet ───────────────────────────────────────────────────────────


@router.get(
    "/wallet/balance",
    response_model=BalanceResponse,
    tags=["wallet"],
    summary="Refresh wallet balance",
)
async def refresh_balance(
    handle: SessionHandle = Depends(get_session_handle),
    use_case: RefreshBalanceUseCase = Depends(get_refresh_balance_use_case),
) -> BalanceResponse:
    await use_case.execute(handle.session)
    return _balance(handle.session)


@router.post(
    "/wallet/transfers",
    response_model=TransferResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    tags=["wallet"],
    summary="Send money to a contact",
)
async def transfer(
    body: TransferBody,
    handle: SessionHandle = Depends(get_session_handle),
) -> TransferResponse:
    """Run the transfer executor for the selected contact."""
    contact = None
    if body.receiver_mobile_number:
        contact = handle.session.find_contact(body.receiver_mobile_number)
        if contact is None:
            raise ValidationError("Unknown contact.", field="receiver_mobile_number")
    outcome = await handle.transfers.execute(
        contact, body.amount, body.mpin, body.category
    )
    return TransferResponse.from_outcome(outcome, _balance(handle.session))


# ── Portfolio ────────────────────────────────────────────────────────


@router.get(
    "/portfolio",
    response_model=PortfolioResponse,
    tags=["portfolio"],
    summary="Load portfolio",
)
async def load_portfolio(
    handle: SessionHandle = Depends(get_session_handle),
    use_case: LoadPortfolioUseCase = Depends(get_load_portfolio_use_case),
) -> PortfolioResponse:
    holdings = await use_case.execute(handle.session)
    return PortfolioResponse(holdings=[HoldingItem.from_entity(h) for h in holdings])


@router.post(
    "/portfolio/trades",
    response_model=TradeResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    tags=["portfolio"],
    summary="Buy or sell shares",
)
async def trade(
    body: TradeBody,
    handle: SessionHandle = Depends(get_session_handle),
) -> TradeResponse:
    outcome = await handle.trades.execute(
        body.side, body.symbol, body.company_name, body.quantity, body.price_per_share
    )
    return TradeResponse.from_outcome(outcome)


@router.get(
    "/explore",
    response_model=ExploreResponse,
    tags=["portfolio"],
    summary="Browse companies by category",
)
async def explore(
    use_case: ExploreCompaniesUseCase = Depends(get_explore_use_case),
) -> ExploreResponse:
    catalog = await use_case.execute()
    return ExploreResponse(
        categories={
            name: [CompanyItem.from_entity(c) for c in companies]
            for name, companies in catalog.items()
        }
    )


# ── Assistant ────────────────────────────────────────────────────────


@router.post(
    "/assistant/messages",
    response_model=AssistantReplyResponse,
    responses={422: {"model": ErrorResponse}},
    tags=["assistant"],
    summary="Ask the assistant",
)
async def ask(
    body: AskBody,
    handle: SessionHandle = Depends(get_session_handle),
) -> AssistantReplyResponse:
    reply = await handle.assistant.ask(body.text, handle.session.account_id)
    return AssistantReplyResponse.from_reply(reply)


@router.post(
    "/assistant/topics",
    response_model=AssistantReplyResponse,
    responses={422: {"model": ErrorResponse}},
    tags=["assistant"],
    summary="Ask the assistant about a holding",
)
async def ask_about_holding(
    body: TopicBody,
    handle: SessionHandle = Depends(get_session_handle),
) -> AssistantReplyResponse:
    holding = handle.session.portfolio.get(body.symbol)
    if holding is None:
        raise ValidationError(f"No holding for {body.symbol}.", field="symbol")
    reply = await handle.assistant.ask_about(
        ChatTopic.for_holding(holding), handle.session.account_id
    )
    return AssistantReplyResponse.from_reply(reply)


@router.get(
    "/assistant/transcript",
    response_model=TranscriptResponse,
    tags=["assistant"],
    summary="Read the conversation transcript",
)
async def transcript(
    handle: SessionHandle = Depends(get_session_handle),
) -> TranscriptResponse:
    conversation = handle.assistant.conversation
    return TranscriptResponse(
        messages=[ChatMessageItem.from_entity(m) for m in conversation.messages],
        awaiting_response=conversation.awaiting_response,
    )
