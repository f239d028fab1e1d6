"""Weather orchestrator: owns application state and sequences every fetch.

State moves Idle -> Loading -> (Ready | Failed). Snapshot and forecast are
committed together or not at all, and a failure keeps the last good
snapshot on screen. Each primary search takes a monotonically increasing
sequence number; when `search.discard_stale_responses` is on, a response
that arrives after a newer search started is dropped.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime

from weatherview.config.schema import AppConfig
from weatherview.ingest.geolocation import GeolocationResolver, IpGeolocationResolver
from weatherview.ingest.provider_client import ProviderClient
from weatherview.ingest.suggestion_fetcher import SuggestionFetcher
from weatherview.ingest.weather_fetcher import WeatherFetcher
from weatherview.models.common import Status
from weatherview.models.errors import (
    AppError,
    ErrorKind,
    GeolocationError,
    MalformedResponseError,
    MissingCredentialError,
    ProviderRequestError,
)
from weatherview.models.state import AppState
from weatherview.models.weather import CitySuggestion, GlobalHighlight, WeatherReport
from weatherview.scheduler import TaskScheduler
from weatherview.storage.history_store import HistoryStore, LocationConsent
from weatherview.storage.kv_store import Storage
from weatherview.view.clock import time_of_day
from weatherview.view.effects import particles_for
from weatherview.view.lifestyle import recommend
from weatherview.view.theme import select_palette

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
MALFORMED_ERROR_MESSAGE = (
    "An error occurred: the weather provider returned an unexpected response."
)
LOCATION_MESSAGES = {
    ErrorKind.UNSUPPORTED: (
        "Geolocation is not supported on this device. Please enter a city manually."
    ),
    ErrorKind.DENIED: "Location access was denied. Please enter a city manually.",
    ErrorKind.UNAVAILABLE: "Unable to get your location. Please enter a city manually.",
}

StateListener = Callable[[AppState], None]


def classify_fetch_error(exc: Exception, not_found_message: str) -> AppError:
    """Convert a fetch-layer exception into a user-facing AppError."""
    if isinstance(exc, MissingCredentialError):
        return AppError(ErrorKind.MISSING_CREDENTIAL, str(exc))
    if isinstance(exc, ProviderRequestError):
        if exc.is_not_found:
            return AppError(ErrorKind.NOT_FOUND, not_found_message)
        if exc.provider_message:
            return AppError(
                ErrorKind.PROVIDER_ERROR, f"An error occurred: {exc.provider_message}"
            )
    if isinstance(exc, MalformedResponseError):
        return AppError(ErrorKind.PROVIDER_ERROR, MALFORMED_ERROR_MESSAGE)
    return AppError(ErrorKind.PROVIDER_ERROR, GENERIC_ERROR_MESSAGE)


class WeatherOrchestrator:
    def __init__(
        self,
        config: AppConfig,
        storage: Storage,
        *,
        client: ProviderClient | None = None,
        weather: WeatherFetcher | None = None,
        suggestions: SuggestionFetcher | None = None,
        geolocation: GeolocationResolver | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config
        self.client = client or ProviderClient(config.provider)
        self.weather = weather or WeatherFetcher(
            self.client,
            forecast_stride=config.search.forecast_stride,
            forecast_days=config.search.forecast_days,
        )
        self.suggestions = suggestions or SuggestionFetcher(
            self.client,
            min_chars=config.search.suggestion_min_chars,
            limit=config.search.suggestion_limit,
        )
        self.geolocation = geolocation or IpGeolocationResolver(config.geolocation)
        self.history = HistoryStore(storage, limit=config.search.history_limit)
        self.consent = LocationConsent(storage)
        self.scheduler = TaskScheduler()
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now

        self._state = AppState()
        self._listeners: list[StateListener] = []
        self._search_seq = 0
        self._suggest_seq = 0
        self._commit(time_of_day=self._current_time_of_day())

    # --- Lifecycle ---

    async def start(self) -> None:
        """Load persisted state and schedule the background tasks."""
        display = self.config.display
        self._commit(
            history=tuple(self.history.load()),
            show_location_prompt=not self.consent.was_requested(),
            time_of_day=self._current_time_of_day(),
            show_splash=display.splash_seconds > 0,
        )
        self.scheduler.every(
            "clock-refresh", display.clock_refresh_seconds, self.refresh_time_of_day
        )
        if display.splash_seconds > 0:
            self.scheduler.after("splash", display.splash_seconds, self._hide_splash)
        self.scheduler.spawn("global-highlights", self.load_global_highlights)

    async def aclose(self) -> None:
        await self.scheduler.shutdown()
        await self.client.aclose()

    async def __aenter__(self) -> "WeatherOrchestrator":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # --- State access ---

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        self._listeners = [cb for cb in self._listeners if cb != listener]

    # --- Primary weather query ---

    async def search_by_name(self, city: str) -> bool:
        city = city.strip()
        if not city:
            logger.debug("Ignoring empty search")
            return False
        return await self._run_search(
            query=city,
            fetch=lambda: self.weather.fetch_by_name(city),
            not_found_message=(
                f'City "{city}" not found. Please check the spelling and try again.'
            ),
            use_provider_name=False,
        )

    async def search_by_coordinates(self, lat: float, lon: float) -> bool:
        return await self._run_search(
            query=f"{lat:.4f}, {lon:.4f}",
            fetch=lambda: self.weather.fetch_by_coordinates(lat, lon),
            not_found_message=f"No weather data found for {lat:.2f}, {lon:.2f}.",
            use_provider_name=True,
        )

    async def search_history_entry(self, city: str) -> bool:
        return await self.search_by_name(city)

    async def _run_search(
        self,
        query: str,
        fetch: Callable[[], Awaitable[WeatherReport]],
        not_found_message: str,
        use_provider_name: bool,
    ) -> bool:
        self._search_seq += 1
        seq = self._search_seq

        if not self.config.provider.api_key:
            error = classify_fetch_error(MissingCredentialError(), not_found_message)
            logger.error("Search %r not attempted: %s", query, error.message)
            self._commit(status=Status.FAILED, error=error, query=query)
            return False

        self._commit(status=Status.LOADING, error=None, query=query)
        logger.info("Searching weather for %r (request %d)", query, seq)

        try:
            report = await fetch()
        except Exception as exc:
            if self._is_stale(seq):
                logger.info("Discarding stale failure for request %d: %s", seq, exc)
                return False
            error = classify_fetch_error(exc, not_found_message)
            logger.warning(
                "Search %r failed (%s): %s", query, error.kind, exc,
            )
            self._commit(status=Status.FAILED, error=error)
            return False

        if self._is_stale(seq):
            logger.info(
                "Discarding stale response for request %d (latest is %d)",
                seq, self._search_seq,
            )
            return False

        name = report.snapshot.name if use_provider_name else query
        history = self.history.record(name)
        self._commit(
            status=Status.READY,
            error=None,
            query=name,
            snapshot=report.snapshot,
            forecast=report.forecast,
            history=tuple(history),
        )
        return True

    def _is_stale(self, seq: int) -> bool:
        return self.config.search.discard_stale_responses and seq != self._search_seq

    # --- Suggestions ---

    async def request_suggestions(self, partial: str) -> tuple[CitySuggestion, ...]:
        """Best-effort candidate lookup; failures just empty the list."""
        self._suggest_seq += 1
        seq = self._suggest_seq

        if len(partial) < self.config.search.suggestion_min_chars:
            self._commit(query=partial, suggestions=())
            return ()
        self._commit(query=partial)
        if not self.config.provider.api_key:
            self._commit(suggestions=())
            return ()

        try:
            found = tuple(await self.suggestions.suggest(partial))
        except Exception as exc:
            logger.warning("Suggestion lookup for %r failed: %s", partial, exc)
            found = ()

        if seq != self._suggest_seq:
            logger.debug("Dropping suggestions for superseded input %r", partial)
            return found
        self._commit(suggestions=found)
        return found

    async def select_suggestion(self, suggestion: CitySuggestion) -> bool:
        self._suggest_seq += 1
        self._commit(suggestions=(), query=suggestion.label)
        return await self.search_by_name(suggestion.label)

    # --- Global highlights ---

    async def load_global_highlights(self) -> tuple[GlobalHighlight, ...]:
        """Fetch every reference city in parallel; failed cities are omitted."""
        cities = self.config.highlight_cities
        if not self.config.provider.api_key:
            logger.error("Cannot load global highlights: API key is not set")
            return ()

        results = await asyncio.gather(
            *(self.weather.fetch_highlight(c) for c in cities),
            return_exceptions=True,
        )
        highlights = []
        for city, result in zip(cities, results):
            if isinstance(result, BaseException):
                logger.warning("Skipping highlight for %s: %s", city, result)
                continue
            highlights.append(result)

        logger.info("Loaded %d/%d global highlights", len(highlights), len(cities))
        self._commit(highlights=tuple(highlights))
        return self._state.highlights

    # --- Geolocation ---

    async def locate(self) -> bool:
        """Resolve the device position and search for it.

        The consent question is asked at most once per installation. Once
        an allow is recorded the resolver runs without prompting. A recorded
        refusal, or a settled question with no stored answer, fails as Denied
        without any lookup.
        """
        decided = self.consent.was_requested()
        if decided and not self.consent.allowed():
            logger.info("Location lookup skipped: access was not allowed earlier")
            self._record_location_decision(allowed=False)
            self._location_failed(ErrorKind.DENIED)
            return False

        ask = not decided
        try:
            coords = await self.geolocation.resolve(ask=ask)
        except Exception as exc:
            kind = exc.kind if isinstance(exc, GeolocationError) else ErrorKind.UNAVAILABLE
            logger.warning("Location lookup failed (%s): %s", kind, exc)
            self._record_location_decision(allowed=kind != ErrorKind.DENIED)
            self._location_failed(kind)
            return False

        self._record_location_decision(allowed=True)
        return await self.search_by_coordinates(coords.latitude, coords.longitude)

    def allow_location(self) -> None:
        """Record consent given up front, e.g. by a command-line flag."""
        self._record_location_decision(allowed=True)

    def decline_location(self) -> None:
        self._record_location_decision(allowed=False)

    def _record_location_decision(self, allowed: bool) -> None:
        self.consent.record(allowed)
        if self._state.show_location_prompt:
            self._commit(show_location_prompt=False)

    def _location_failed(self, kind: ErrorKind) -> None:
        message = LOCATION_MESSAGES.get(kind, LOCATION_MESSAGES[ErrorKind.UNAVAILABLE])
        self._commit(status=Status.FAILED, error=AppError(kind, message))

    # --- History ---

    def clear_history(self) -> None:
        self.history.clear()
        self._commit(history=())

    # --- Timers ---

    def refresh_time_of_day(self) -> None:
        current = self._current_time_of_day()
        if current != self._state.time_of_day:
            logger.info("Time of day changed to %s", current)
            self._commit(time_of_day=current)

    def _current_time_of_day(self):
        display = self.config.display
        return time_of_day(
            self.clock(), display.day_start_hour, display.night_start_hour
        )

    def _hide_splash(self) -> None:
        self._commit(show_splash=False)

    # --- Commit ---

    def _commit(self, **changes) -> AppState:
        """Apply changes, recompute derived view state, notify listeners."""
        old = self._state
        new = replace(old, **changes)

        derived: dict = {
            "palette": select_palette(new.condition, new.time_of_day),
            "recommendation": (
                recommend(
                    new.snapshot.temperature,
                    new.snapshot.condition,
                    new.snapshot.wind_speed,
                )
                if new.snapshot
                else None
            ),
        }
        if new.condition.lower() != old.condition.lower():
            derived["particles"] = particles_for(
                new.condition,
                self.rng,
                count=self.config.display.particle_count,
                cloud_count=self.config.display.cloud_count,
            )
        self._state = replace(new, **derived)

        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("State listener %r failed", listener)
        return self._state
