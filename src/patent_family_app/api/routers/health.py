"""Health check endpoints."""

from fastapi import APIRouter

from patent_family_app.config.settings import get_settings
from patent_family_app.identifiers.corrector import canonicalize

router = APIRouter(tags=["health"])

PROBE_IDENTIFIER = "US 8125463 B2"
PROBE_CANONICAL = "US-8125463-B2"


@router.get("/healthz", summary="Liveness probe")
async def healthcheck() -> dict[str, str]:
    """Report environment and whether the identifier rules load and resolve."""
    settings = get_settings()
    normalizer = "ok" if canonicalize(PROBE_IDENTIFIER) == PROBE_CANONICAL else "degraded"
    return {"status": "ok", "environment": settings.environment, "normalizer": normalizer}
