"""Weather, forecast and geocoding data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinates(BaseModel):
    """A latitude/longitude pair."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in degrees")

    def as_tuple(self) -> tuple[float, float]:
        return self.lat, self.lon


class LocationQuery(BaseModel):
    """Location to fetch weather for.

    Exactly one of ``name`` or ``coordinates`` must be set.
    """

    name: Optional[str] = Field(None, description="Free-text place name")
    coordinates: Optional[Coordinates] = Field(None, description="Resolved position")

    @model_validator(mode="after")
    def exactly_one_form(self) -> "LocationQuery":
        """Require exactly one addressing form."""
        has_name = bool(self.name and self.name.strip())
        if has_name == (self.coordinates is not None):
            raise ValueError("exactly one of name or coordinates is required")
        return self

    @property
    def params(self) -> dict:
        """Query parameters addressing this location upstream."""
        if self.coordinates is not None:
            return {"lat": self.coordinates.lat, "lon": self.coordinates.lon}
        return {"q": self.name.strip()}

    def __str__(self) -> str:
        if self.coordinates is not None:
            return f"{self.coordinates.lat},{self.coordinates.lon}"
        return self.name.strip()


class Suggestion(BaseModel):
    """A geocoding match used to disambiguate a typed place name."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Place name")
    country: str = Field(..., description="ISO country code")
    state: Optional[str] = Field(None, description="Region or state, if any")
    lat: float = Field(..., description="Latitude")
    lon: float = Field(..., description="Longitude")

    @property
    def label(self) -> str:
        """Display label, e.g. "Springfield, Illinois, US"."""
        if self.state:
            return f"{self.name}, {self.state}, {self.country}"
        return f"{self.name}, {self.country}"

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(lat=self.lat, lon=self.lon)


class WeatherCondition(BaseModel):
    """Weather condition description."""

    code: str = Field(..., description="Condition (icon) code, e.g. '10d'")
    description: str = Field("", description="Condition text, e.g. 'light rain'")
    main: str = Field("", description="Condition group, e.g. 'Rain'")


class CurrentWeather(BaseModel):
    """Current weather conditions for a location."""

    location: str = Field(..., description="Location name")
    coordinates: Coordinates = Field(..., description="Location coordinates")
    temperature: float = Field(..., description="Temperature in configured units")
    feels_like: float = Field(..., description="Perceived temperature")
    humidity: int = Field(..., ge=0, le=100, description="Humidity percentage")
    wind_speed: float = Field(..., ge=0, description="Wind speed in configured units")
    conditions: WeatherCondition = Field(..., description="Weather conditions")
    timestamp: Optional[datetime] = Field(None, description="Observation time")


class ForecastEntry(BaseModel):
    """A single forecast step."""

    timestamp: datetime = Field(..., description="Forecast time in the location's UTC offset")
    temperature: float = Field(..., description="Temperature in configured units")
    conditions: WeatherCondition = Field(..., description="Expected conditions")


class WeatherReport(BaseModel):
    """Current conditions together with the full forecast list."""

    current: CurrentWeather
    forecast: list[ForecastEntry] = Field(default_factory=list)
