# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - google_client.py: Service-account Google API client factory
# - casing.py: camelCase <-> snake_case key conversion
# - utils.py: Shared utilities (UUID normalization, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.casing import camel_keys, snake_keys, to_camel, to_snake
from lib.utils import normalize_uuid, parse_datetime, utc_now_iso

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Casing
    "camel_keys",
    "snake_keys",
    "to_camel",
    "to_snake",
    # Utils
    "normalize_uuid",
    "parse_datetime",
    "utc_now_iso",
]
