"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model.

    Example:
        >>> response = HealthResponse(status="ok")
        >>> response.status
        'ok'
    """

    status: str
    session: str | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application process is running",
)
async def health_check() -> HealthResponse:
    """Liveness probe.

    Always returns 200 OK to indicate the process is running.
    Does not check external dependencies or session state.
    """
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness probe",
    description="Check if the screen session has been created",
)
async def readiness_check(request: Request) -> HealthResponse:
    """Readiness probe.

    Reports the session phase once the lifespan hook has mounted it.
    Does NOT actively probe OpenWeatherMap (to avoid cascading failures).
    """
    session = getattr(request.app.state, "session", None)
    if session is None:
        return HealthResponse(status="starting")
    return HealthResponse(status="ok", session=session.state.kind)
