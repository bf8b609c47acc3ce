# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes return user info and turn a client-side Supabase session
# into httpOnly cookies for the browser.
# =============================================================================

import logging
import time

from fastapi import APIRouter, Depends, Response

from app.auth.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_current_user,
    verify_access_token,
)
from app.auth.models import AuthUser, SessionRequest
from app.config import settings
from core.services.profile_service import ProfileService
from lib.casing import camel_keys

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30  # 30 days
DEFAULT_ACCESS_MAX_AGE = 60 * 60


@router.get("/me")
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Get the current authenticated user's profile.

    Returns:
        Profile row, or a minimal profile built from the token when the
        user has no profile row yet

    Raises:
        401: If not authenticated
    """
    profile = ProfileService.get_profile(user.id)
    if profile:
        return camel_keys(profile)

    return {
        "id": str(user.id),
        "userId": str(user.id),
        "email": user.email,
        "firstName": None,
        "lastName": None,
        "avatarUrl": None,
        "activeTeamId": None,
    }


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "userId": str(user.id),
        "email": user.email
    }


@router.post("/session")
async def create_session(body: SessionRequest, response: Response) -> dict:
    """
    Store a Supabase session in httpOnly cookies.

    Verifies the access token, makes sure the user has a profile row, then
    sets sb-access-token (until the token expires) and sb-refresh-token
    (30 days).

    Raises:
        400: Missing accessToken, refreshToken or expiresAt
        401: Access token invalid or expired
    """
    user = verify_access_token(body.access_token)
    profile = ProfileService.ensure_profile(user.id, user.email, user.metadata)

    access_max_age = body.expires_at - int(time.time())
    if access_max_age <= 0:
        access_max_age = DEFAULT_ACCESS_MAX_AGE

    cookie_options = {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "path": "/",
    }
    response.set_cookie(ACCESS_TOKEN_COOKIE, body.access_token, max_age=access_max_age, **cookie_options)
    response.set_cookie(REFRESH_TOKEN_COOKIE, body.refresh_token, max_age=REFRESH_COOKIE_MAX_AGE, **cookie_options)

    logger.info(f"Session cookies set for user: {user.id}")
    return {"success": True, "user": camel_keys(profile)}


@router.delete("/session")
async def clear_session(response: Response) -> dict:
    """Sign out: clear both session cookies."""
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(REFRESH_TOKEN_COOKIE, path="/")
    return {"success": True}
