# =============================================================================
# core/services/geocoding_service.py - Place Search (Google Places, Mapbox)
# =============================================================================
# Backs the location pickers. Two providers:
# - Google Places Autocomplete + Details (GOOGLE_MAPS_API_KEY)
# - Mapbox forward geocoding (MAPBOX_ACCESS_TOKEN)
#
# Provider responses are normalized to small snake_case dicts; the router
# turns them into camelCase.
# =============================================================================

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.config import settings
from app.exceptions import BadRequestError, ExternalServiceError, IntegrationNotConfiguredError

logger = logging.getLogger(__name__)

PLACES_AUTOCOMPLETE_URL = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
PLACES_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
MAPBOX_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"

REQUEST_TIMEOUT = 10
MAPBOX_MAX_LIMIT = 10

# Google "status" values that are not errors
_PLACES_OK = {"OK", "ZERO_RESULTS"}


def _get_json(service: str, url: str, params: dict[str, Any]) -> dict[str, Any]:
    """GET a provider endpoint and decode JSON, mapping failures to 502."""
    try:
        response = httpx.get(url, params=params, timeout=REQUEST_TIMEOUT)
    except httpx.HTTPError as e:
        raise ExternalServiceError(service, str(e))

    if response.status_code >= 400:
        raise ExternalServiceError(service, response.text[:200], upstream_status=response.status_code)

    try:
        return response.json()
    except ValueError as e:
        raise ExternalServiceError(service, f"Invalid JSON response: {e}")


def _require_query(query: str | None, name: str = "q") -> str:
    query = (query or "").strip()
    if not query:
        raise BadRequestError(f"Query parameter '{name}' is required", code="MISSING_QUERY")
    return query


def clamp_limit(limit: int | None, default: int = 5) -> int:
    """Mapbox accepts 1..10 results."""
    if limit is None:
        return default
    return max(1, min(MAPBOX_MAX_LIMIT, int(limit)))


class GeocodingService:
    """
    Service for place search.

    Example:
        GeocodingService.autocomplete("griffith observatory")
        GeocodingService.mapbox_geocode("Shibuya", limit=3)
    """

    @staticmethod
    def _google_key() -> str:
        if not settings.GOOGLE_MAPS_API_KEY:
            raise IntegrationNotConfiguredError("Google Places", env_var="GOOGLE_MAPS_API_KEY")
        return settings.GOOGLE_MAPS_API_KEY

    @staticmethod
    def _check_places_status(data: dict[str, Any]) -> None:
        status = data.get("status", "OK")
        if status not in _PLACES_OK:
            raise ExternalServiceError("Google Places", data.get("error_message") or status)

    @staticmethod
    def autocomplete(query: str | None) -> list[dict[str, Any]]:
        """
        Place predictions for a partial query.

        Returns:
            [{place_id, description, main_text, secondary_text}]
        """
        query = _require_query(query)
        data = _get_json("Google Places", PLACES_AUTOCOMPLETE_URL, {
            "input": query,
            "key": GeocodingService._google_key(),
        })
        GeocodingService._check_places_status(data)

        predictions = []
        for item in data.get("predictions", []):
            formatting = item.get("structured_formatting") or {}
            predictions.append({
                "place_id": item.get("place_id"),
                "description": item.get("description"),
                "main_text": formatting.get("main_text") or item.get("description"),
                "secondary_text": formatting.get("secondary_text"),
            })
        return predictions

    @staticmethod
    def place_details(place_id: str | None) -> dict[str, Any]:
        """
        Name, address and coordinates of a place.

        Returns:
            {place_id, name, address, latitude, longitude}
        """
        place_id = _require_query(place_id, name="placeId")
        data = _get_json("Google Places", PLACES_DETAILS_URL, {
            "place_id": place_id,
            "fields": "place_id,name,formatted_address,geometry",
            "key": GeocodingService._google_key(),
        })
        GeocodingService._check_places_status(data)

        result = data.get("result") or {}
        location = (result.get("geometry") or {}).get("location") or {}
        return {
            "place_id": result.get("place_id") or place_id,
            "name": result.get("name"),
            "address": result.get("formatted_address"),
            "latitude": location.get("lat"),
            "longitude": location.get("lng"),
        }

    @staticmethod
    def mapbox_geocode(query: str | None, limit: int | None = 5) -> list[dict[str, Any]]:
        """
        Forward-geocode a query with Mapbox.

        Returns:
            [{name, address, place_id, latitude, longitude}]
        """
        query = _require_query(query)
        if not settings.MAPBOX_ACCESS_TOKEN:
            raise IntegrationNotConfiguredError("Mapbox", env_var="MAPBOX_ACCESS_TOKEN")

        data = _get_json("Mapbox", MAPBOX_GEOCODE_URL.format(query=quote(query, safe="")), {
            "access_token": settings.MAPBOX_ACCESS_TOKEN,
            "limit": clamp_limit(limit),
        })

        results = []
        for feature in data.get("features", []):
            center = feature.get("center") or [None, None]
            results.append({
                "name": feature.get("text"),
                "address": feature.get("place_name"),
                "place_id": feature.get("id"),
                "latitude": center[1] if len(center) > 1 else None,
                "longitude": center[0] if center else None,
            })
        logger.debug(f"Mapbox returned {len(results)} results for {query!r}")
        return results
