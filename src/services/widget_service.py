"""Weather widget state and controller.

The widget owns a single :class:`WidgetState`. Suggestion lookups and
weather fetches mutate it only through its setters, and every mutation
notifies subscribers so a view can re-render from a fresh snapshot.
"""

from typing import Callable, Optional

import structlog

from src.config import Settings, get_settings
from src.models.weather import (
    Coordinates,
    CurrentWeather,
    ForecastEntry,
    LocationQuery,
    Suggestion,
    WeatherReport,
)
from src.models.widget import CompactWeatherView, WidgetSnapshot
from src.services.debouncer import Debouncer
from src.services.view_service import (
    render_compact,
    render_current,
    render_forecast,
    render_map,
)
from src.services.weather_service import (
    FETCH_ERROR_MESSAGE,
    WeatherService,
    WeatherServiceError,
    parse_location,
)

logger = structlog.get_logger(__name__)

Listener = Callable[[], None]


class WidgetState:
    """Transient view state of one widget instance."""

    def __init__(self, city: str, map_center: Coordinates):
        self._city = city
        self._loading = False
        self._error: Optional[str] = None
        self._show_suggestions = False
        self._suggestions: list[Suggestion] = []
        self._weather: Optional[CurrentWeather] = None
        self._forecast: list[ForecastEntry] = []
        self._map_center = map_center
        self._listeners: list[Listener] = []

    @property
    def city(self) -> str:
        return self._city

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def show_suggestions(self) -> bool:
        return self._show_suggestions

    @property
    def suggestions(self) -> tuple[Suggestion, ...]:
        return tuple(self._suggestions)

    @property
    def weather(self) -> Optional[CurrentWeather]:
        return self._weather

    @property
    def forecast(self) -> tuple[ForecastEntry, ...]:
        return tuple(self._forecast)

    @property
    def map_center(self) -> Coordinates:
        return self._map_center

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def set_city(self, city: str) -> None:
        self._city = city
        self._notify()

    def set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._notify()

    def set_error(self, error: Optional[str]) -> None:
        self._error = error
        self._notify()

    def set_show_suggestions(self, show: bool) -> None:
        self._show_suggestions = show
        self._notify()

    def set_suggestions(self, suggestions: list[Suggestion]) -> None:
        """Replace the suggestion list wholesale."""
        self._suggestions = list(suggestions)
        self._notify()

    def set_report(self, report: WeatherReport) -> None:
        """Replace current conditions and forecast together."""
        self._weather = report.current
        self._forecast = list(report.forecast)
        self._notify()

    def recenter(self, center: Coordinates) -> None:
        self._map_center = center
        self._notify()


class WeatherWidget:
    """Search box with debounced suggestions, weather, forecast and map."""

    def __init__(
        self,
        service: WeatherService,
        settings: Settings | None = None,
        state: WidgetState | None = None,
    ):
        self.settings = settings or get_settings()
        self.service = service
        self.state = state or WidgetState(
            city=self.settings.default_city,
            map_center=Coordinates(
                lat=self.settings.default_latitude,
                lon=self.settings.default_longitude,
            ),
        )
        self._suggestion_debouncer = Debouncer(
            self.settings.suggestion_debounce_seconds, name="suggestions"
        )
        # Incremented per fetch; only the latest fetch may touch the state
        self._fetch_generation = 0

    @property
    def suggestions_pending(self) -> bool:
        return self._suggestion_debouncer.pending

    @property
    def visible_suggestions(self) -> list[Suggestion]:
        """Suggestions to show in the dropdown, empty while it is closed."""
        if not self.state.show_suggestions:
            return []
        return list(self.state.suggestions)

    async def start(self) -> None:
        """Show weather for the initial city."""
        await self.submit()

    def on_input(self, text: str) -> None:
        """Handle a change of the search text.

        Any pending lookup is cancelled. Text shorter than the minimum
        length clears the suggestions right away; otherwise a lookup for
        this exact text runs after the quiet period.
        """
        self.state.set_city(text)
        self.state.set_show_suggestions(True)
        self._suggestion_debouncer.cancel()

        if len(text) < self.settings.suggestion_min_length:
            self.state.set_suggestions([])
            return

        self._suggestion_debouncer.schedule(lambda: self._load_suggestions(text))

    async def _load_suggestions(self, text: str) -> None:
        try:
            suggestions = await self.service.search_locations(
                text, limit=self.settings.suggestion_limit
            )
        except WeatherServiceError as e:
            logger.warning(
                "suggestion_lookup_failed",
                query=text,
                error=str(e),
                error_type=type(e).__name__,
            )
            suggestions = []
        self.state.set_suggestions(suggestions)

    def focus(self) -> None:
        self.state.set_show_suggestions(True)

    def blur(self) -> None:
        self.state.set_show_suggestions(False)

    async def submit(self) -> None:
        """Fetch weather for the typed text."""
        self.state.set_show_suggestions(False)
        if not self.state.city.strip():
            logger.debug("widget_submit_empty")
            return
        await self.fetch_weather(parse_location(self.state.city))

    async def select_suggestion(self, index: int) -> None:
        """Fetch weather for a suggestion by its coordinates.

        Raises:
            IndexError: If the open dropdown has no suggestion at ``index``
        """
        suggestion = self.visible_suggestions[index]
        self._suggestion_debouncer.cancel()
        self.state.set_city(suggestion.label)
        self.state.set_show_suggestions(False)
        await self.fetch_weather(LocationQuery(coordinates=suggestion.coordinates))

    async def fetch_weather(self, query: LocationQuery) -> None:
        """Fetch and display weather and forecast for ``query``.

        On failure the previous weather stays on screen and the error
        message is shown instead. A fetch started while another is in
        flight supersedes it: the older result is discarded and loading
        stays set until the newest fetch settles.
        """
        self._fetch_generation += 1
        generation = self._fetch_generation
        self.state.set_loading(True)
        self.state.set_error(None)
        try:
            report = await self.service.get_weather(query)
        except WeatherServiceError as e:
            logger.warning(
                "widget_fetch_failed",
                location=str(query),
                error=str(e),
                error_type=type(e).__name__,
            )
            if generation == self._fetch_generation:
                self.state.set_error(FETCH_ERROR_MESSAGE)
        else:
            if generation == self._fetch_generation:
                self.state.set_report(report)
                self.state.recenter(report.current.coordinates)
        finally:
            if generation == self._fetch_generation:
                self.state.set_loading(False)
            else:
                logger.debug("widget_fetch_superseded", location=str(query))

    def snapshot(self) -> WidgetSnapshot:
        """Render the current state."""
        weather = self.state.weather
        return WidgetSnapshot(
            city=self.state.city,
            loading=self.state.loading,
            error=self.state.error,
            show_suggestions=self.state.show_suggestions,
            suggestions=self.visible_suggestions,
            current=render_current(weather, self.settings) if weather else None,
            compact=self.compact_view(),
            forecast=render_forecast(list(self.state.forecast), self.settings),
            map=render_map(self.state.map_center, self.settings),
        )

    def compact_view(self) -> CompactWeatherView | None:
        """Render the current conditions for the minimal search box."""
        if self.state.weather is None:
            return None
        return render_compact(self.state.weather, self.settings)

    async def close(self) -> None:
        """Tear down, cancelling any pending suggestion lookup."""
        await self._suggestion_debouncer.aclose()
        logger.debug("widget_closed")
