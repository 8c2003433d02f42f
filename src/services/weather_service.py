"""Weather service for OpenWeatherMap API integration."""

import asyncio
import re
import time
from datetime import datetime, timedelta, timezone

import httpx
import structlog
from pydantic import ValidationError

from src.config import get_settings
from src.models.weather import (
    Coordinates,
    CurrentWeather,
    ForecastEntry,
    LocationQuery,
    Suggestion,
    WeatherCondition,
    WeatherReport,
)

logger = structlog.get_logger(__name__)

# Coordinate pattern: "lat, lon" or "lat,lon"
COORDINATE_PATTERN = re.compile(r"^(-?\d+\.?\d*)\s*,\s*(-?\d+\.?\d*)$")

FETCH_ERROR_MESSAGE = "Failed to fetch weather data. Please try again."


class WeatherServiceError(Exception):
    """A weather or geocoding request failed."""

    user_message = FETCH_ERROR_MESSAGE


class LocationNotFoundError(WeatherServiceError):
    """The upstream API does not know the requested location."""


class WeatherApiError(WeatherServiceError):
    """Transport failure, unexpected status, or unusable response."""


def _parse_coordinates(location: str) -> tuple[float, float] | None:
    """Parse coordinates from location string.

    Returns (lat, lon) tuple if location is in coordinate format, None otherwise.
    """
    match = COORDINATE_PATTERN.match(location.strip())
    if match:
        return float(match.group(1)), float(match.group(2))
    return None


def parse_location(text: str) -> LocationQuery:
    """Build a location query from user input.

    "51.5, -0.12" becomes a coordinate query; anything else (including
    out-of-range coordinates) is looked up by name.

    Raises:
        ValueError: If text is empty
    """
    coords = _parse_coordinates(text)
    if coords:
        try:
            return LocationQuery(coordinates=Coordinates(lat=coords[0], lon=coords[1]))
        except ValidationError:
            logger.debug("coordinates_out_of_range", location=text)
    return LocationQuery(name=text)


def _parse_timestamp(item: dict, tz: timezone = timezone.utc) -> datetime:
    """Forecast item time from unix ``dt``, falling back to ``dt_txt`` (UTC).

    The result is expressed in ``tz``.
    """
    if "dt" in item:
        return datetime.fromtimestamp(item["dt"], tz=tz)
    return (
        datetime.strptime(item["dt_txt"], "%Y-%m-%d %H:%M:%S")
        .replace(tzinfo=timezone.utc)
        .astimezone(tz)
    )


def _parse_condition(item: dict) -> WeatherCondition:
    weather = (item.get("weather") or [{}])[0]
    return WeatherCondition(
        code=weather.get("icon", ""),
        description=weather.get("description", ""),
        main=weather.get("main", ""),
    )


class WeatherService:
    """Service for fetching weather, forecast and geocoding data from OpenWeatherMap."""

    def __init__(self):
        self.settings = get_settings()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.weather_api_timeout)
            )
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _call_api(self, url: str, params: dict) -> dict | list:
        """Call an OpenWeatherMap endpoint once.

        Args:
            url: Full endpoint URL
            params: Query parameters (credential is added here)

        Returns:
            Decoded JSON body

        Raises:
            LocationNotFoundError: On 404
            WeatherApiError: On missing credentials, transport errors,
                any other non-2xx status, or a non-JSON body
        """
        if not self.settings.openweathermap_api_key:
            logger.error("weather_api_key_missing")
            raise WeatherApiError("OpenWeatherMap API key is not configured")

        request_params = {**params, "appid": self.settings.openweathermap_api_key}
        client = await self._get_client()

        try:
            response = await client.get(url, params=request_params)
        except httpx.HTTPError as e:
            logger.error(
                "weather_api_error",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise WeatherApiError(str(e)) from e

        if response.status_code == 404:
            logger.debug("weather_location_not_found", url=url, params=params)
            raise LocationNotFoundError(f"Location not found: {params}")
        if response.status_code == 401:
            logger.error("weather_api_auth_error", url=url)
            raise WeatherApiError("OpenWeatherMap rejected the API key")
        if not 200 <= response.status_code < 300:
            logger.warning(
                "weather_api_bad_status",
                url=url,
                status_code=response.status_code,
            )
            raise WeatherApiError(f"Unexpected status {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            logger.error("weather_api_invalid_json", url=url, error=str(e))
            raise WeatherApiError("Response body is not JSON") from e

    async def get_current_weather(self, query: LocationQuery) -> CurrentWeather:
        """Get current weather for a location.

        Args:
            query: Place name or coordinates

        Returns:
            CurrentWeather in the configured unit system
        """
        data = await self._call_api(
            f"{self.settings.weather_api_base_url}/weather",
            {**query.params, "units": self.settings.weather_units},
        )

        try:
            main = data["main"]
            coord = data["coord"]
            wind = data.get("wind", {})

            return CurrentWeather(
                location=data.get("name") or str(query),
                coordinates=Coordinates(lat=coord["lat"], lon=coord["lon"]),
                temperature=main["temp"],
                feels_like=main.get("feels_like", main["temp"]),
                humidity=main.get("humidity", 0),
                wind_speed=wind.get("speed", 0),
                conditions=_parse_condition(data),
                timestamp=(
                    datetime.fromtimestamp(data["dt"], tz=timezone.utc)
                    if "dt" in data
                    else None
                ),
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(
                "weather_parse_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise WeatherApiError("Malformed current weather response") from e

    async def get_forecast(self, query: LocationQuery) -> list[ForecastEntry]:
        """Get the full 3-hour-step forecast for a location.

        Args:
            query: Place name or coordinates

        Returns:
            Forecast entries in upstream order, timestamps in the
            location's UTC offset when upstream reports one
        """
        data = await self._call_api(
            f"{self.settings.weather_api_base_url}/forecast",
            {**query.params, "units": self.settings.weather_units},
        )

        try:
            offset = (data.get("city") or {}).get("timezone", 0)
            tz = timezone(timedelta(seconds=offset))
            return [
                ForecastEntry(
                    timestamp=_parse_timestamp(item, tz),
                    temperature=item["main"]["temp"],
                    conditions=_parse_condition(item),
                )
                for item in data["list"]
            ]
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(
                "weather_forecast_parse_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise WeatherApiError("Malformed forecast response") from e

    async def get_weather(self, query: LocationQuery) -> WeatherReport:
        """Fetch current conditions and forecast concurrently.

        Both requests always run to completion; the report is returned only
        if both succeeded.

        Raises:
            WeatherServiceError: If either request failed
        """
        start_time = time.perf_counter()

        results = await asyncio.gather(
            self.get_current_weather(query),
            self.get_forecast(query),
            return_exceptions=True,
        )
        latency_ms = int((time.perf_counter() - start_time) * 1000)

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.warning(
                "weather_request_failed",
                location=str(query),
                latency_ms=latency_ms,
                error_types=[type(f).__name__ for f in failures],
            )
            raise failures[0]

        current, forecast = results
        logger.info(
            "weather_request_success",
            location=str(query),
            latency_ms=latency_ms,
            forecast_entries=len(forecast),
        )
        return WeatherReport(current=current, forecast=forecast)

    async def search_locations(
        self, text: str, limit: int | None = None
    ) -> list[Suggestion]:
        """Look up places matching a partial name.

        Args:
            text: Partial place name as typed
            limit: Maximum number of matches (defaults to settings)

        Returns:
            Suggestions in upstream order
        """
        if not text.strip():
            return []

        data = await self._call_api(
            f"{self.settings.geo_api_base_url}/direct",
            {"q": text, "limit": limit or self.settings.suggestion_limit},
        )

        try:
            suggestions = [Suggestion.model_validate(item) for item in data]
        except (TypeError, ValueError) as e:
            logger.error(
                "geocoding_parse_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise WeatherApiError("Malformed geocoding response") from e

        logger.debug("geocoding_success", query=text, results=len(suggestions))
        return suggestions
