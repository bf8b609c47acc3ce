# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for request validation
# - services/: Team-scoped CRUD and the Google/Resend/geocoding integrations
#
# Code in this package should NOT import from FastAPI routers or Celery.
# Services raise app.exceptions errors; the app layer renders them.
# =============================================================================
