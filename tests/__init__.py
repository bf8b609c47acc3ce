# =============================================================================
# tests/ - Test Suite
# =============================================================================
# Runs against an in-memory Supabase stand-in (fakes.py); Google, Resend,
# geocoding and Celery calls are mocked per test.
# - test_models.py / test_casing.py: schema validation and key conversion
# - test_*_service.py / test_resources.py: team-scoped CRUD
# - test_api.py / test_auth.py / test_files.py: HTTP endpoints
# - test_integrations.py / test_reminders.py / test_geocoding.py: outside services
#
# Run tests with: pytest
# =============================================================================
