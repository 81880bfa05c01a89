"""Health check endpoint. No database access; used for liveness probes."""

from fastapi import APIRouter, Request

from course_advising.core.config import get_settings
from course_advising.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok status, version and the two-factor challenge store in use."""
    store = getattr(request.app.state, "challenge_store", None)
    return HealthResponse(
        version=get_settings().app_version,
        challenge_store=getattr(store, "backend", None),
    )
