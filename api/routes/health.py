"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_credential_store, get_memo_service
from auth.credentials import CredentialStore
from core.errors import StorageUnavailable
from core.logging import get_logger
from manager.memo_service import MemoService


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Basic health check.

    Returns 200 if the service is running.
    Used by load balancers and orchestration systems.
    """
    return {
        "status": "healthy",
        "service": "memo-service",
    }


@router.get("/ready")
async def readiness_check(
    memo_service: MemoService = Depends(get_memo_service),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Readiness check.

    Returns 200 if both collections can be read, 503 otherwise.
    """
    checks = {}
    for name, store in (("users", credentials.users), ("memos", memo_service.memos)):
        try:
            await store.load_all()
            checks[name] = "ok"
        except StorageUnavailable as e:
            logger.warning("Readiness check failed", collection=name, error=str(e))
            checks[name] = "unavailable"

    ready = all(state == "ok" for state in checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "unavailable",
            "checks": checks,
        },
    )
