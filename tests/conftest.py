# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the Supabase client for an in-memory fake
# - Issues HS256 tokens signed with the test JWT secret
# =============================================================================

import os
import time
import uuid

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-000")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:5173")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from lib.supabase_client import SupabaseClient
from tests.fakes import FakeSupabase


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def fake_db(monkeypatch):
    """In-memory Supabase used by every SupabaseClient call in the test."""
    db = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", db)
    return db


# =============================================================================
# Auth
# =============================================================================

@pytest.fixture
def make_token():
    """Factory for signed Supabase-style access tokens."""

    def _make(
        user_id: str | None = None,
        email: str | None = "ana@example.com",
        expires_in: int = 3600,
        **claims,
    ) -> str:
        payload = {
            "sub": user_id or str(uuid.uuid4()),
            "email": email,
            "aud": "authenticated",
            "role": "authenticated",
            "exp": int(time.time()) + expires_in,
            **claims,
        }
        return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def user_id():
    return str(uuid.uuid4())


@pytest.fixture
def auth_headers(make_token, user_id):
    """Bearer header for user_id, whose first name is Ana."""
    token = make_token(user_id, user_metadata={"first_name": "Ana"})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# API
# =============================================================================

@pytest.fixture
def client(fake_db):
    """
    TestClient over the real app and the fake database.

    Server exceptions are rendered as responses so 500 handling can be
    asserted.
    """
    from app.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def team_ctx(fake_db, user_id):
    """Active team context for user_id (creates the default team)."""
    from core.services.team_service import TeamService

    fake_db.add("user_profiles", {"user_id": user_id, "email": "ana@example.com", "first_name": "Ana"})
    return TeamService.resolve_active_team(user_id)
