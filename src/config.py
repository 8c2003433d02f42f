"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"

    # OpenWeatherMap API
    openweathermap_api_key: str = ""  # Required for weather and geocoding
    weather_api_base_url: str = "https://api.openweathermap.org/data/2.5"
    geo_api_base_url: str = "https://api.openweathermap.org/geo/1.0"
    weather_icon_base_url: str = "https://openweathermap.org/img/wn"
    weather_units: Literal["metric", "imperial", "standard"] = "metric"
    weather_api_timeout: int = 5  # 5 second timeout per request

    # Suggestions
    suggestion_debounce_seconds: float = 0.3  # Quiet period before lookup
    suggestion_min_length: int = 2
    suggestion_limit: int = 5

    # Forecast sampling (upstream returns 3-hour steps, 8 per day)
    forecast_days: int = 5
    forecast_stride: int = 8

    # Widget defaults
    default_city: str = "London"
    default_latitude: float = 51.5074
    default_longitude: float = -0.1278

    # Map
    map_zoom: int = 10
    map_tile_url: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    map_attribution: str = (
        '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
