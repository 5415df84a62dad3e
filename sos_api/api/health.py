"""Health check endpoint."""

from fastapi import APIRouter

from sos_api.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def get_health() -> HealthResponse:
    """
    Liveness only; does not touch the database so it stays cheap under load.
    Used by load balancers and monitoring.
    """
    return HealthResponse(status="ok")
