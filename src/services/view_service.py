"""Rendering of weather data into display-ready view models."""

import math

from src.config import Settings
from src.models.weather import Coordinates, CurrentWeather, ForecastEntry, WeatherReport
from src.models.widget import (
    CompactWeatherView,
    CurrentWeatherView,
    ForecastDayView,
    MapView,
    WeatherView,
)
from src.services.icon_service import classify_icon, icon_url

# (temperature symbol, wind unit) per OpenWeatherMap unit system
UNIT_LABELS = {
    "metric": ("°C", "m/s"),
    "imperial": ("°F", "mph"),
    "standard": ("K", "m/s"),
}

# Multiplier from the unit system's wind speed to km/h. The compact view
# converts before flooring rather than relabelling the raw value as km/h.
_KMH_FACTORS = {
    "metric": 3.6,
    "imperial": 1.609344,
    "standard": 3.6,
}


def _round_half_up(value: float) -> int:
    """Round to nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def _format_number(value: float) -> str:
    """Print the value exactly, without a trailing ".0": 4.0 -> '4'."""
    return str(value).removesuffix(".0")


def sample_daily_forecast(
    entries: list[ForecastEntry], days: int, stride: int
) -> list[ForecastEntry]:
    """Pick one entry per day from the fixed-interval forecast list.

    Upstream entries are 3 hours apart, so a stride of 8 yields one entry
    per day starting with the first.
    """
    return entries[::stride][:days]


def render_current(weather: CurrentWeather, settings: Settings) -> CurrentWeatherView:
    """Render current conditions."""
    temp_unit, wind_unit = UNIT_LABELS[settings.weather_units]
    code = weather.conditions.code
    return CurrentWeatherView(
        location=weather.location,
        temperature=f"{_round_half_up(weather.temperature)}{temp_unit}",
        feels_like=f"{_round_half_up(weather.feels_like)}{temp_unit}",
        humidity=f"{weather.humidity}%",
        wind=f"{_format_number(weather.wind_speed)} {wind_unit}",
        description=weather.conditions.description,
        icon=classify_icon(code),
        icon_url=icon_url(code, settings.weather_icon_base_url),
    )


def render_compact(weather: CurrentWeather, settings: Settings) -> CompactWeatherView:
    """Render current conditions for the minimal search box."""
    temp_unit, _ = UNIT_LABELS[settings.weather_units]
    wind_kmh = weather.wind_speed * _KMH_FACTORS[settings.weather_units]
    return CompactWeatherView(
        location=weather.location,
        temperature=f"{math.floor(weather.temperature)}{temp_unit.lower()}",
        humidity=f"{weather.humidity}%",
        wind=f"{math.floor(wind_kmh)}km/h",
        icon=classify_icon(weather.conditions.code),
    )


def render_forecast(
    entries: list[ForecastEntry], settings: Settings
) -> list[ForecastDayView]:
    """Render the sampled daily forecast."""
    temp_unit, _ = UNIT_LABELS[settings.weather_units]
    sampled = sample_daily_forecast(
        entries, settings.forecast_days, settings.forecast_stride
    )
    return [
        ForecastDayView(
            day=entry.timestamp.strftime("%a"),  # in the location's own offset
            temperature=f"{_round_half_up(entry.temperature)}{temp_unit}",
            label=entry.conditions.main or entry.conditions.description,
            icon=classify_icon(entry.conditions.code),
            icon_url=icon_url(entry.conditions.code, settings.weather_icon_base_url),
        )
        for entry in sampled
    ]


def render_map(center: Coordinates, settings: Settings) -> MapView:
    """Map viewport centered on a marker."""
    return MapView(
        center=center,
        zoom=settings.map_zoom,
        tile_url=settings.map_tile_url,
        attribution=settings.map_attribution,
    )


def render_weather_view(report: WeatherReport, settings: Settings) -> WeatherView:
    """Render a full weather report, map centered on its location."""
    return WeatherView(
        current=render_current(report.current, settings),
        forecast=render_forecast(report.forecast, settings),
        map=render_map(report.current.coordinates, settings),
    )
