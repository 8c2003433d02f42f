"""Weather condition code to display icon mapping."""

from src.models.widget import WeatherIcon

# Checked in order; first matching prefix wins.
_ICON_PREFIXES: tuple[tuple[tuple[str, ...], WeatherIcon], ...] = (
    (("01",), WeatherIcon.CLEAR),
    (("02",), WeatherIcon.CLOUD),
    (("03", "04"), WeatherIcon.DRIZZLE),
    (("09", "10"), WeatherIcon.RAIN),
    (("13",), WeatherIcon.SNOW),
)


def classify_icon(code: str) -> WeatherIcon:
    """Select the display icon for an OpenWeatherMap condition code.

    Unrecognized codes fall back to clear.
    """
    for prefixes, icon in _ICON_PREFIXES:
        if code.startswith(prefixes):
            return icon
    return WeatherIcon.CLEAR


def icon_url(code: str, base_url: str) -> str:
    """URL of the upstream-hosted image for a condition code."""
    return f"{base_url}/{code}@2x.png"
