"""
Health check endpoints.
"""

from fastapi import APIRouter

from rabbit.api.deps import RouterDep
from rabbit.db import check_database_health

router = APIRouter()


@router.get("/api/health")
async def health_check() -> dict:
    """Basic health check."""
    return {"status": "healthy"}


@router.get("/api/ready")
async def readiness_check(ai_router: RouterDep) -> dict:
    """Readiness check - database connectivity and the active AI provider."""
    database_ok = await check_database_health()
    return {
        "status": "ready" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
        "ai_provider": ai_router.config.active_provider(),
    }
