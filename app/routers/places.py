# =============================================================================
# app/routers/places.py - Geocoding Endpoints
# =============================================================================
# Location search for the location picker:
#   GET /api/places/autocomplete?q=     Google Places predictions
#   GET /api/places/details?placeId=    Google Places details
#   GET /api/mapbox/geocode?q=&limit=   Mapbox forward geocoding
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import CurrentUser
from core.services.geocoding_service import GeocodingService
from lib.casing import camel_keys

router = APIRouter()


@router.get("/places/autocomplete")
async def places_autocomplete(
    user: CurrentUser,
    q: Annotated[str | None, Query(description="Partial place name or address")] = None,
):
    """
    Google Places predictions.

    Returns {predictions: [{placeId, description, mainText, secondaryText}]}.
    """
    return {"predictions": camel_keys(GeocodingService.autocomplete(q))}


@router.get("/places/details")
async def place_details(
    user: CurrentUser,
    place_id: Annotated[str | None, Query(alias="placeId", description="Google place id")] = None,
):
    """Returns {placeId, name, address, latitude, longitude}."""
    return camel_keys(GeocodingService.place_details(place_id))


@router.get("/mapbox/geocode")
async def mapbox_geocode(
    user: CurrentUser,
    q: Annotated[str | None, Query(description="Place name or address")] = None,
    limit: Annotated[int, Query(description="Result count, clamped to 1..10")] = 5,
):
    """Returns {results: [{name, address, placeId, latitude, longitude}]}."""
    return {"results": camel_keys(GeocodingService.mapbox_geocode(q, limit=limit))}
