"""Services package exports."""

from src.services.debouncer import Debouncer
from src.services.icon_service import classify_icon
from src.services.logging_service import configure_logging, get_logger
from src.services.weather_service import (
    LocationNotFoundError,
    WeatherApiError,
    WeatherService,
    WeatherServiceError,
)
from src.services.widget_service import WeatherWidget, WidgetState

__all__ = [
    "Debouncer",
    "LocationNotFoundError",
    "WeatherApiError",
    "WeatherService",
    "WeatherServiceError",
    "WeatherWidget",
    "WidgetState",
    "classify_icon",
    "configure_logging",
    "get_logger",
]
