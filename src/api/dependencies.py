"""FastAPI dependencies."""

from starlette.requests import HTTPConnection

from src.services.weather_service import WeatherService


def get_weather_service(connection: HTTPConnection) -> WeatherService:
    """Shared WeatherService created at application startup.

    Works for both HTTP requests and WebSocket connections.
    """
    return connection.app.state.weather_service
