"""Integration tests for the weather and suggestion endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_weather_service
from src.main import app
from src.services.weather_service import (
    FETCH_ERROR_MESSAGE,
    LocationNotFoundError,
    WeatherApiError,
)


@pytest.fixture
def client(mock_weather_service):
    """TestClient with the weather service replaced by a mock."""
    app.dependency_overrides[get_weather_service] = lambda: mock_weather_service

    with TestClient(app) as tc:
        yield tc

    app.dependency_overrides.pop(get_weather_service, None)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Correlation-Id" in response.headers

    def test_correlation_id_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-Id": "abc-123"})

        assert response.headers["X-Correlation-Id"] == "abc-123"


class TestGetWeather:
    """Tests for GET /weather."""

    def test_by_city(self, client, mock_weather_service):
        response = client.get("/weather", params={"city": "London"})

        assert response.status_code == 200
        body = response.json()
        assert body["current"]["location"] == "London"
        assert body["current"]["temperature"] == "12°C"
        assert body["current"]["icon"] == "rain"
        assert len(body["forecast"]) == 5
        assert body["map"]["center"] == {"lat": 51.5085, "lon": -0.1257}
        assert body["map"]["zoom"] == 10

        query = mock_weather_service.get_weather.call_args.args[0]
        assert query.name == "London"

    def test_by_coordinates(self, client, mock_weather_service):
        response = client.get("/weather", params={"lat": 48.8566, "lon": 2.3522})

        assert response.status_code == 200
        query = mock_weather_service.get_weather.call_args.args[0]
        assert query.coordinates.as_tuple() == (48.8566, 2.3522)

    def test_zero_coordinates_are_valid(self, client, mock_weather_service):
        response = client.get("/weather", params={"lat": 0, "lon": 0})

        assert response.status_code == 200
        query = mock_weather_service.get_weather.call_args.args[0]
        assert query.coordinates.as_tuple() == (0.0, 0.0)

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"city": "  "},
            {"lat": 10},
            {"city": "London", "lat": 1, "lon": 2},
        ],
    )
    def test_bad_location_is_400(self, client, params, mock_weather_service):
        response = client.get("/weather", params=params)

        assert response.status_code == 400
        mock_weather_service.get_weather.assert_not_called()

    def test_out_of_range_latitude_is_400(self, client):
        response = client.get("/weather", params={"lat": 95, "lon": 0})

        assert response.status_code == 400
        assert "lat" in response.json()["detail"]

    @pytest.mark.parametrize("error", [LocationNotFoundError("nope"), WeatherApiError("down")])
    def test_upstream_failure_single_message(self, client, mock_weather_service, error):
        mock_weather_service.get_weather = AsyncMock(side_effect=error)

        response = client.get("/weather", params={"city": "Atlantis"})

        assert response.status_code == 502
        body = response.json()
        assert body["detail"] == FETCH_ERROR_MESSAGE
        assert "correlation_id" in body


class TestGetSuggestions:
    """Tests for GET /suggestions."""

    def test_returns_matches(self, client, mock_weather_service):
        response = client.get("/suggestions", params={"q": "Spring"})

        assert response.status_code == 200
        body = response.json()
        assert [s["name"] for s in body] == ["Springfield", "Springe"]
        assert body[0]["state"] == "Illinois"
        mock_weather_service.search_locations.assert_awaited_once_with("Spring", limit=5)

    def test_short_query_skips_lookup(self, client, mock_weather_service):
        response = client.get("/suggestions", params={"q": "S"})

        assert response.status_code == 200
        assert response.json() == []
        mock_weather_service.search_locations.assert_not_called()

    def test_failure_degrades_to_empty(self, client, mock_weather_service):
        mock_weather_service.search_locations = AsyncMock(side_effect=WeatherApiError("down"))

        response = client.get("/suggestions", params={"q": "Spring"})

        assert response.status_code == 200
        assert response.json() == []
