"""
Health check router.

Liveness only: reports version, configured backend and open session
count. It never calls the backend, so a slow backend cannot fail probes.
"""

from fastapi import APIRouter, Depends

from finfusion.core.config import settings
from finfusion.interfaces.wallet.dependencies import SessionRegistry, get_registry
from finfusion.interfaces.wallet.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
def health_check(registry: SessionRegistry = Depends(get_registry)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=settings.version,
        backend=settings.backend_base_url,
        open_sessions=len(registry),
    )
