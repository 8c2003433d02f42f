"""API route definitions for health, weather and suggestion endpoints."""

from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from src.api.dependencies import get_weather_service
from src.config import get_settings
from src.models.weather import Coordinates, LocationQuery, Suggestion
from src.models.widget import WeatherView
from src.services.view_service import render_weather_view
from src.services.weather_service import (
    WeatherService,
    WeatherServiceError,
    parse_location,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Status and timestamp in ISO8601 format
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/weather", response_model=WeatherView)
async def get_weather(
    city: Optional[str] = Query(None, description="Place name or 'lat, lon'"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    service: WeatherService = Depends(get_weather_service),
) -> WeatherView:
    """Current conditions, 5-day forecast and map view for one location.

    Address the location either by ``city`` or by both ``lat`` and ``lon``.
    Upstream failures are reported by the WeatherServiceError handler.
    """
    try:
        if city is not None and (lat is not None or lon is not None):
            raise ValueError("use either city or lat/lon, not both")
        if lat is not None and lon is not None:
            query = LocationQuery(coordinates=Coordinates(lat=lat, lon=lon))
        elif lat is not None or lon is not None:
            raise ValueError("lat and lon must be given together")
        else:
            query = parse_location(city or "")
    except (ValueError, ValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    report = await service.get_weather(query)
    return render_weather_view(report, get_settings())


@router.get("/suggestions", response_model=list[Suggestion])
async def get_suggestions(
    q: str = Query(..., description="Partial place name"),
    service: WeatherService = Depends(get_weather_service),
) -> list[Suggestion]:
    """Geocoding matches for a partial place name.

    Input shorter than the minimum length and lookup failures both yield
    an empty list.
    """
    settings = get_settings()
    if len(q) < settings.suggestion_min_length:
        return []

    try:
        return await service.search_locations(q, limit=settings.suggestion_limit)
    except WeatherServiceError as e:
        logger.warning(
            "suggestion_lookup_failed",
            query=q,
            error=str(e),
            error_type=type(e).__name__,
        )
        return []
