"""
Health Check Route

Liveness probe that also reports which network the server targets and
whether it can send transactions.
"""

from fastapi import APIRouter, Depends

from api.deps import get_runtime_config
from api.models.responses import HealthResponse
from core.config.runtime import RuntimeConfig


router = APIRouter(tags=["health"])


def _health(config: RuntimeConfig) -> HealthResponse:
    return HealthResponse(
        chain_id=config.network.chain_id,
        ledger_configured=config.ledger_configured,
    )


@router.get("/health", response_model=HealthResponse)
def health_check(config: RuntimeConfig = Depends(get_runtime_config)) -> HealthResponse:
    return _health(config)


@router.get("/", response_model=HealthResponse)
def root(config: RuntimeConfig = Depends(get_runtime_config)) -> HealthResponse:
    """Same as /health."""
    return _health(config)
