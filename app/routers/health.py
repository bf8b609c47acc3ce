# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Unauthenticated probes for load balancers and the client's status banner:
#   /api/health         process up, environment and version
#   /api/health/ready   Supabase tables + storage reachable, integrations set
#   /api/health/live    process alive
# =============================================================================

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

APP_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Supabase connectivity, "healthy" or "unhealthy: <reason>"."""
    database: str
    storage: str


class IntegrationsResponse(BaseModel):
    """Which optional integrations have credentials configured."""
    calendar: bool
    docs: bool
    email: bool
    places: bool
    mapbox: bool


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    integrations: IntegrationsResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _probe(name: str, check: Callable[[], object]) -> str:
    try:
        check()
        return "healthy"
    except Exception as e:
        logger.warning(f"Readiness probe {name} failed: {e}")
        return f"unhealthy: {str(e)[:50]}"


def configured_integrations() -> IntegrationsResponse:
    google = settings.google_service_account_info is not None
    return IntegrationsResponse(
        calendar=google,
        docs=google,
        email=bool(settings.RESEND_API_KEY and settings.RESEND_FROM_EMAIL),
        places=bool(settings.GOOGLE_MAPS_API_KEY),
        mapbox=bool(settings.MAPBOX_ACCESS_TOKEN),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=APP_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check.

    Always answers 200. "degraded" means Supabase tables or storage could
    not be reached; missing integrations only show up under `integrations`.
    """
    from lib.supabase_client import SupabaseClient

    def ping_database():
        SupabaseClient.get_client().table("teams").select("id").limit(1).execute()

    def ping_storage():
        SupabaseClient.get_client().storage.list_buckets()

    checks = ChecksResponse(
        database=_probe("database", ping_database),
        storage=_probe("storage", ping_storage),
    )
    ready = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        integrations=configured_integrations(),
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(status="alive", timestamp=_now())
