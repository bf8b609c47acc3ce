# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Every service raises subclasses of ShootPlannerException; the handlers
# below render them as {"detail", "code", "suggestion"?, "details"?}.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


class ShootPlannerException(Exception):
    """
    Base exception for the Shoot Planner API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SHOOT_PLANNER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found
# =============================================================================

class ShootNotFoundError(ShootPlannerException):
    """Raised when a shoot doesn't exist or belongs to another team."""

    def __init__(self, shoot_id: str):
        super().__init__(
            message=f"Shoot not found: {shoot_id}",
            code="SHOOT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the shoot id is correct and belongs to your active team",
            details={"shoot_id": str(shoot_id)}
        )


class ResourceNotFoundError(ShootPlannerException):
    """Raised when a team resource (personnel, equipment, ...) doesn't exist."""

    def __init__(self, kind: str, resource_id: str):
        super().__init__(
            message=f"{kind.capitalize()} not found: {resource_id}",
            code=f"{kind.upper()}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {kind} id is correct and belongs to your active team",
            details={"kind": kind, "id": str(resource_id)}
        )


class AssociationNotFoundError(ShootPlannerException):
    """Raised when removing a shoot link that doesn't exist."""

    def __init__(self, kind: str, resource_id: str):
        super().__init__(
            message=f"{kind.capitalize()} {resource_id} is not linked to this shoot",
            code="ASSOCIATION_NOT_FOUND",
            status_code=404,
            details={"kind": kind, "id": str(resource_id)}
        )


class TeamNotFoundError(ShootPlannerException):
    """Raised when a team id doesn't exist."""

    def __init__(self, team_id: str):
        super().__init__(
            message=f"Team not found: {team_id}",
            code="TEAM_NOT_FOUND",
            status_code=404,
            details={"team_id": str(team_id)}
        )


class MemberNotFoundError(ShootPlannerException):
    """Raised when a team member id doesn't exist in the team."""

    def __init__(self, member_id: str):
        super().__init__(
            message=f"Team member not found: {member_id}",
            code="MEMBER_NOT_FOUND",
            status_code=404,
            suggestion="List members with GET /api/team/members",
            details={"member_id": str(member_id)}
        )


class ParticipantNotFoundError(ShootPlannerException):
    """Raised when a participant doesn't belong to the shoot."""

    def __init__(self, participant_id: str):
        super().__init__(
            message=f"Participant not found: {participant_id}",
            code="PARTICIPANT_NOT_FOUND",
            status_code=404,
            details={"participant_id": str(participant_id)}
        )


class ReferenceNotFoundError(ShootPlannerException):
    """Raised when a reference doesn't belong to the shoot."""

    def __init__(self, reference_id: str):
        super().__init__(
            message=f"Reference not found: {reference_id}",
            code="REFERENCE_NOT_FOUND",
            status_code=404,
            details={"reference_id": str(reference_id)}
        )


class UploadedFileNotFoundError(ShootPlannerException):
    """Raised when an uploaded file record doesn't exist in the team."""

    def __init__(self, file_id: str):
        super().__init__(
            message=f"File not found: {file_id}",
            code="FILE_NOT_FOUND",
            status_code=404,
            details={"file_id": str(file_id)}
        )


class ProfileNotFoundError(ShootPlannerException):
    """Raised when a user has no profile row."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"Profile not found for user: {user_id}",
            code="PROFILE_NOT_FOUND",
            status_code=404,
            suggestion="Sign in again so the profile is created",
            details={"user_id": str(user_id)}
        )


# =============================================================================
# Authorization
# =============================================================================

class NotTeamMemberError(ShootPlannerException):
    """Raised when the caller is not a member of the requested team."""

    def __init__(self, team_id: str):
        super().__init__(
            message="You are not a member of this team",
            code="NOT_TEAM_MEMBER",
            status_code=403,
            suggestion="Ask a team owner or admin to invite you",
            details={"team_id": str(team_id)}
        )


class InsufficientRoleError(ShootPlannerException):
    """Raised when the caller's team role is below what an action needs."""

    def __init__(self, required: str, actual: str | None = None):
        super().__init__(
            message=f"Requires {required} role or higher",
            code="INSUFFICIENT_ROLE",
            status_code=403,
            details={"required": required, "actual": actual}
        )


class MemberModificationError(ShootPlannerException):
    """Raised when a role change or removal is not permitted."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="MEMBER_MODIFICATION_FORBIDDEN",
            status_code=403,
        )


# =============================================================================
# Bad Requests
# =============================================================================

class BadRequestError(ShootPlannerException):
    """Generic 400 with a specific code."""

    def __init__(
        self,
        message: str,
        code: str = "BAD_REQUEST",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


class ShootHasNoDateError(BadRequestError):
    """Raised when a date-dependent action runs on an undated shoot."""

    def __init__(self, shoot_id: str):
        super().__init__(
            message="Shoot must have a date",
            code="SHOOT_HAS_NO_DATE",
            suggestion="Set the shoot date with PATCH /api/shoots/{id} first",
            details={"shoot_id": str(shoot_id)}
        )


class NoRecipientsError(BadRequestError):
    """Raised when no participant has an email address."""

    def __init__(self, shoot_id: str):
        super().__init__(
            message="No participants with email addresses",
            code="NO_RECIPIENTS",
            suggestion="Add an email to at least one participant",
            details={"shoot_id": str(shoot_id)}
        )


class InvalidFileTypeError(BadRequestError):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {content_type}",
            code="INVALID_FILE_TYPE",
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed}
        )


class FileTooLargeError(ShootPlannerException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


# =============================================================================
# Storage / Integrations
# =============================================================================

class StorageUploadError(ShootPlannerException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


class IntegrationNotConfiguredError(ShootPlannerException):
    """Raised when an optional integration has no credentials configured."""

    def __init__(self, service: str, env_var: str, reason: str | None = None):
        super().__init__(
            message=reason or f"{service} integration is not configured",
            code="INTEGRATION_NOT_CONFIGURED",
            status_code=503,
            suggestion=f"Set {env_var} in the server environment",
            details={"service": service, "env_var": env_var}
        )


class ExternalServiceError(ShootPlannerException):
    """Raised when an upstream API (Google, Mapbox, Resend) fails."""

    def __init__(self, service: str, error: str, upstream_status: int | None = None):
        details: dict[str, Any] = {"service": service, "error": error}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(
            message=f"{service} request failed: {error}",
            code="EXTERNAL_SERVICE_ERROR",
            status_code=502,
            suggestion="Try again later; the upstream service may be unavailable",
            details=details
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def shoot_planner_exception_handler(
    request: Request,
    exc: ShootPlannerException
) -> JSONResponse:
    """
    Convert ShootPlannerException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Flattens each error to {field, message}, dropping the "body"/"query"
    location prefix.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
        })

    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        }
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """Database failures become 500 with the wrapper's code."""
    logger.error(f"{request.method} {request.url.path} database error: {exc}")
    content: dict[str, Any] = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=500, content=content)
