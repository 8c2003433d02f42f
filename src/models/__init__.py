"""Models package exports."""

from src.models.weather import (
    Coordinates,
    CurrentWeather,
    ForecastEntry,
    LocationQuery,
    Suggestion,
    WeatherCondition,
    WeatherReport,
)
from src.models.widget import (
    CompactWeatherView,
    CurrentWeatherView,
    ForecastDayView,
    MapView,
    WeatherIcon,
    WeatherView,
    WidgetEvent,
    WidgetSnapshot,
)

__all__ = [
    "CompactWeatherView",
    "Coordinates",
    "CurrentWeather",
    "CurrentWeatherView",
    "ForecastDayView",
    "ForecastEntry",
    "LocationQuery",
    "MapView",
    "Suggestion",
    "WeatherCondition",
    "WeatherIcon",
    "WeatherReport",
    "WeatherView",
    "WidgetEvent",
    "WidgetSnapshot",
]
