"""View models and client events for the weather widget."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from src.models.weather import Coordinates, Suggestion


class WeatherIcon(str, Enum):
    """Display icon selected from a condition code."""

    CLEAR = "clear"
    CLOUD = "cloud"
    DRIZZLE = "drizzle"
    RAIN = "rain"
    SNOW = "snow"


class CurrentWeatherView(BaseModel):
    """Rendered current conditions."""

    location: str
    temperature: str = Field(..., description="Rounded temperature, e.g. '22°C'")
    feels_like: str
    humidity: str = Field(..., description="Humidity, e.g. '65%'")
    wind: str = Field(..., description="Wind speed with unit, e.g. '4.5 m/s'")
    description: str
    icon: WeatherIcon
    icon_url: str


class CompactWeatherView(BaseModel):
    """Rendered current conditions for the minimal search box widget."""

    location: str
    temperature: str = Field(..., description="Floored temperature, e.g. '22°c'")
    humidity: str
    wind: str = Field(..., description="Floored wind speed in km/h")
    icon: WeatherIcon


class ForecastDayView(BaseModel):
    """One sampled forecast day."""

    day: str = Field(..., description="Short weekday, e.g. 'Mon'")
    temperature: str
    label: str
    icon: WeatherIcon
    icon_url: str


class MapView(BaseModel):
    """Map marker and viewport."""

    center: Coordinates
    zoom: int
    tile_url: str
    attribution: str


class WeatherView(BaseModel):
    """Everything rendered after a successful weather fetch."""

    current: CurrentWeatherView
    forecast: list[ForecastDayView] = Field(default_factory=list)
    map: MapView


class WidgetSnapshot(BaseModel):
    """Full widget state pushed to clients after every change."""

    city: str
    loading: bool = False
    error: Optional[str] = None
    show_suggestions: bool = False
    suggestions: list[Suggestion] = Field(default_factory=list)
    current: Optional[CurrentWeatherView] = None
    compact: Optional[CompactWeatherView] = None
    forecast: list[ForecastDayView] = Field(default_factory=list)
    map: MapView


class WidgetEvent(BaseModel):
    """Message sent by a widget client over the socket."""

    type: Literal["input", "focus", "blur", "submit", "select"]
    text: Optional[str] = Field(None, description="New input text for 'input'")
    index: Optional[int] = Field(None, ge=0, description="Suggestion index for 'select'")
