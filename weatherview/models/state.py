"""Immutable application state read by the presentation layer."""

from dataclasses import dataclass

from weatherview.models.common import Status, TimeOfDay
from weatherview.models.errors import AppError
from weatherview.models.weather import (
    CitySuggestion,
    ForecastEntry,
    GlobalHighlight,
    WeatherSnapshot,
)
from weatherview.view.effects import Particle
from weatherview.view.lifestyle import Recommendation
from weatherview.view.theme import DEFAULT_CONDITION, Palette


@dataclass(frozen=True)
class AppState:
    status: Status = Status.IDLE
    query: str = ""
    snapshot: WeatherSnapshot | None = None
    forecast: tuple[ForecastEntry, ...] = ()
    error: AppError | None = None
    history: tuple[str, ...] = ()
    suggestions: tuple[CitySuggestion, ...] = ()
    highlights: tuple[GlobalHighlight, ...] = ()
    time_of_day: TimeOfDay = TimeOfDay.DAY
    show_splash: bool = True
    show_location_prompt: bool = True
    # derived
    palette: Palette = Palette.CLEAR_DAY
    recommendation: Recommendation | None = None
    particles: tuple[Particle, ...] = ()

    @property
    def condition(self) -> str:
        return self.snapshot.condition if self.snapshot else DEFAULT_CONDITION

    @property
    def is_loading(self) -> bool:
        return self.status == Status.LOADING
