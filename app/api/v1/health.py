"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter

from app.api.v1.auth import DbDep, SettingsDep
from app.core.database import check_db_connected
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: DbDep, settings: SettingsDep) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Unauthenticated; used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
    )
