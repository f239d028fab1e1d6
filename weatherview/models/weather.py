"""Domain models for current conditions, forecasts, suggestions and highlights."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WeatherSnapshot:
    name: str
    country: str
    temperature: float  # °C
    feels_like: float
    humidity: float  # %
    pressure: float  # hPa
    wind_speed: float  # m/s
    wind_deg: float
    sunrise: datetime
    sunset: datetime
    condition: str  # e.g. "Clear", "Rain"
    description: str
    icon: str
    state: str | None = None
    utc_offset_seconds: int = 0


@dataclass(frozen=True)
class ForecastEntry:
    timestamp: datetime
    temperature: float
    condition: str
    description: str
    icon: str


@dataclass(frozen=True)
class WeatherReport:
    """Snapshot and forecast fetched together; always replaced as a pair."""

    snapshot: WeatherSnapshot
    forecast: tuple[ForecastEntry, ...]


@dataclass(frozen=True)
class CitySuggestion:
    name: str
    country: str
    latitude: float
    longitude: float
    state: str | None = None

    @property
    def label(self) -> str:
        return f"{self.name}, {self.country}"


@dataclass(frozen=True)
class GlobalHighlight:
    city: str
    temperature: int
    icon: str
    description: str


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float
