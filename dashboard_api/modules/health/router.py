"""
Health Router - liveness and readiness checks.
These responses are never wrapped by the success interceptor.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from dashboard_api.core.db.engine import check_database_connection
from dashboard_api.core.response_interceptor import CustomAPIRoute, skip_interceptor

router = APIRouter(prefix="/health", tags=["health"], route_class=CustomAPIRoute)


@router.get("")
@skip_interceptor
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
@skip_interceptor
async def ready():
    """Readiness: the database answers a trivial query"""
    if await check_database_connection():
        return {"status": "ok", "database": "ok"}
    return JSONResponse(
        status_code=503,
        content={"status": "unavailable", "database": "error"},
    )
