# =============================================================================
# lib/casing.py - Key Case Conversion
# =============================================================================
# Converts dictionary keys between camelCase (API/client side) and
# snake_case (database side).
#
# The client sends and expects camelCase, Supabase tables use snake_case.
# Conversion is recursive over dicts and lists; scalars pass through.
#
# Usage:
#   from lib.casing import snake_keys, camel_keys
#   row = snake_keys({"activeTeamId": "..."})   # {"active_team_id": "..."}
#   body = camel_keys(row)                      # {"activeTeamId": "..."}
# =============================================================================

import re
from typing import Any

_UPPER = re.compile(r"[A-Z]")
_UNDERSCORE_LOWER = re.compile(r"_([a-z0-9])")


def to_snake(key: str) -> str:
    """
    Convert a single camelCase key to snake_case.

    Already-snake keys are returned unchanged.

    Example:
        to_snake("instagramLinks") -> "instagram_links"
    """
    return _UPPER.sub(lambda m: f"_{m.group(0).lower()}", key)


def to_camel(key: str) -> str:
    """
    Convert a single snake_case key to camelCase.

    Example:
        to_camel("calendar_event_url") -> "calendarEventUrl"
    """
    return _UNDERSCORE_LOWER.sub(lambda m: m.group(1).upper(), key)


def snake_keys(value: Any) -> Any:
    """Recursively convert all dict keys in value to snake_case."""
    if isinstance(value, list):
        return [snake_keys(item) for item in value]
    if isinstance(value, dict):
        return {
            (to_snake(k) if isinstance(k, str) else k): snake_keys(v)
            for k, v in value.items()
        }
    return value


def camel_keys(value: Any) -> Any:
    """Recursively convert all dict keys in value to camelCase."""
    if isinstance(value, list):
        return [camel_keys(item) for item in value]
    if isinstance(value, dict):
        return {
            (to_camel(k) if isinstance(k, str) else k): camel_keys(v)
            for k, v in value.items()
        }
    return value
