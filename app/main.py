# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Shoot Planner API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ShootPlannerException,
    shoot_planner_exception_handler,
    supabase_exception_handler,
    validation_exception_handler,
)
from app.middleware import log_requests
from app.routers import (
    files,
    health,
    integrations,
    places,
    resources,
    shoot_items,
    shoots,
    tasks,
    team,
    user,
)
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup configuration and which integrations are available.
    """
    logger.info(f"Starting Shoot Planner API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if not settings.google_service_account_info:
        logger.warning("GOOGLE_SERVICE_ACCOUNT not set; calendar and docs export disabled")
    if not settings.RESEND_API_KEY:
        logger.warning("RESEND_API_KEY not set; reminder emails disabled")

    yield

    logger.info("Shutting down Shoot Planner API")


# Create FastAPI application
app = FastAPI(
    title="Shoot Planner API",
    description="""
## Cosplay Photo-Shoot Planning API

Plan shoots for your team: dates, locations, participants, equipment, props,
costumes and reference images. Every record belongs to a team and every
request is scoped to the caller's active team.

### Integrations

| Service | Use |
|---------|-----|
| **Google Calendar** | One event per shoot, created or updated in place |
| **Google Docs** | Printable shoot plan |
| **Resend** | Reminder emails to participants (queued) |
| **Google Places / Mapbox** | Location search |

### Authentication

Send the Supabase access token as `Authorization: Bearer <token>`, or
establish a cookie session with `POST /api/auth/session`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Token verification and cookie sessions"},
        {"name": "Shoots", "description": "Shoot CRUD and aggregated details"},
        {"name": "Shoot Items", "description": "Participants, references and linked resources"},
        {"name": "Integrations", "description": "Calendar, Docs and reminder emails"},
        {"name": "Resources", "description": "Team libraries of personnel, equipment, locations, props and costumes"},
        {"name": "Team", "description": "Active team and membership"},
        {"name": "User", "description": "Profile and team switching"},
        {"name": "Places", "description": "Location search"},
        {"name": "Files", "description": "Image uploads"},
        {"name": "Tasks", "description": "Background task status"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - cookies need credentials, so origins must be explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(log_requests)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ShootPlannerException)
async def handle_shoot_planner_exception(request: Request, exc: ShootPlannerException):
    """Handle custom Shoot Planner exceptions."""
    return await shoot_planner_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body/query validation failures as 400."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_exception(request: Request, exc: SupabaseClientError):
    """Handle database failures raised by the Supabase wrapper."""
    return await supabase_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) or "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api",
)

# Shoot endpoints. Order matters: the fixed sub-paths in shoots and
# integrations must be registered before /{shoot_id}/{kind} in shoot_items.
app.include_router(
    shoots.router,
    prefix="/api/shoots",
    tags=["Shoots"]
)

app.include_router(
    integrations.router,
    prefix="/api/shoots",
    tags=["Integrations"]
)

app.include_router(
    shoot_items.router,
    prefix="/api/shoots",
    tags=["Shoot Items"]
)

# Team resource libraries: /api/personnel, /api/equipment, ...
for kind, resource_router in resources.routers.items():
    app.include_router(
        resource_router,
        prefix=f"/api/{kind.value}",
        tags=["Resources"]
    )

# Team and user endpoints
app.include_router(
    team.router,
    prefix="/api/team",
    tags=["Team"]
)

app.include_router(
    user.router,
    prefix="/api/user",
    tags=["User"]
)

# Geocoding endpoints
app.include_router(
    places.router,
    prefix="/api",
    tags=["Places"]
)

# File upload endpoints
app.include_router(
    files.router,
    prefix="/api/files",
    tags=["Files"]
)

# Task status endpoints
app.include_router(
    tasks.router,
    prefix="/api/tasks",
    tags=["Tasks"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Shoot Planner API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development and settings.DEBUG,
    )
