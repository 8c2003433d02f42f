"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Set test environment variables before importing app
os.environ.setdefault("OPENWEATHERMAP_API_KEY", "test-api-key")

from src.config import Settings, get_settings
from src.models.weather import (
    Coordinates,
    CurrentWeather,
    ForecastEntry,
    Suggestion,
    WeatherCondition,
    WeatherReport,
)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def weather_settings() -> Settings:
    """Real settings with a test key and a short debounce."""
    return Settings(
        openweathermap_api_key="test-api-key",
        suggestion_debounce_seconds=0.05,
    )


@pytest.fixture
def current_weather_payload() -> dict:
    """OpenWeatherMap /weather response for London (metric)."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [
            {"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}
        ],
        "main": {
            "temp": 12.46,
            "feels_like": 11.82,
            "temp_min": 11.1,
            "temp_max": 13.5,
            "pressure": 1012,
            "humidity": 81,
        },
        "wind": {"speed": 4.63, "deg": 240},
        "dt": 1706800000,
        "name": "London",
    }


@pytest.fixture
def forecast_payload() -> dict:
    """OpenWeatherMap /forecast response: 40 entries 3 hours apart."""
    base_time = 1706800800
    icons = ["01d", "02d", "03d", "10d", "13d"]
    items = []
    for i in range(40):
        day = i // 8
        items.append(
            {
                "dt": base_time + i * 10800,
                "main": {"temp": 10.0 + day},
                "weather": [{"main": f"Day{day}", "icon": icons[day]}],
                "dt_txt": datetime.fromtimestamp(
                    base_time + i * 10800, tz=timezone.utc
                ).strftime("%Y-%m-%d %H:%M:%S"),
            }
        )
    return {"cod": "200", "cnt": 40, "list": items}


@pytest.fixture
def geocoding_payload() -> list:
    """OpenWeatherMap /geo/1.0/direct response for 'Spring'."""
    return [
        {
            "name": "Springfield",
            "local_names": {"en": "Springfield"},
            "lat": 39.7990,
            "lon": -89.6440,
            "country": "US",
            "state": "Illinois",
        },
        {
            "name": "Spring",
            "lat": 30.0799,
            "lon": -95.4172,
            "country": "US",
            "state": "Texas",
        },
        {"name": "Springe", "lat": 52.2086, "lon": 9.5546, "country": "DE"},
    ]


def make_report(
    location: str = "London",
    lat: float = 51.5085,
    lon: float = -0.1257,
    temperature: float = 12.46,
    entries: int = 40,
) -> WeatherReport:
    """Build a WeatherReport without going through the API."""
    start = datetime(2024, 2, 5, 12, tzinfo=timezone.utc)  # a Monday
    return WeatherReport(
        current=CurrentWeather(
            location=location,
            coordinates=Coordinates(lat=lat, lon=lon),
            temperature=temperature,
            feels_like=temperature - 1,
            humidity=81,
            wind_speed=4.63,
            conditions=WeatherCondition(code="10d", description="light rain", main="Rain"),
            timestamp=start,
        ),
        forecast=[
            ForecastEntry(
                timestamp=start + timedelta(hours=3 * i),
                temperature=10.0 + i // 8,
                conditions=WeatherCondition(code="02d", main="Clouds"),
            )
            for i in range(entries)
        ],
    )


@pytest.fixture
def report() -> WeatherReport:
    return make_report()


@pytest.fixture
def suggestions() -> list[Suggestion]:
    return [
        Suggestion(name="Springfield", country="US", state="Illinois", lat=39.799, lon=-89.644),
        Suggestion(name="Springe", country="DE", lat=52.2086, lon=9.5546),
    ]


@pytest.fixture
def mock_weather_service(report, suggestions) -> MagicMock:
    """WeatherService stand-in with successful async methods."""
    service = MagicMock()
    service.get_weather = AsyncMock(return_value=report)
    service.search_locations = AsyncMock(return_value=suggestions)
    service.close = AsyncMock()
    return service


@pytest.fixture
def mock_http_client() -> Generator[AsyncMock, None, None]:
    """httpx.AsyncClient stand-in; configure ``get`` per test."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.is_closed = False
        mock_client_class.return_value = mock_client
        yield mock_client


def json_response(payload, status_code: int = 200) -> MagicMock:
    """Mock httpx.Response with a JSON body."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@pytest.fixture
def report_factory():
    """Factory for WeatherReport objects with custom fields."""
    return make_report


@pytest.fixture
def response_factory():
    """Factory for mock httpx responses."""
    return json_response
