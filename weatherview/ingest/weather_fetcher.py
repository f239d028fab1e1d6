"""Weather fetcher: paired current-conditions + forecast retrieval and parsing."""

import asyncio
import logging

from pydantic import ValidationError

from weatherview.ingest.provider_client import ProviderClient
from weatherview.models.common import from_unix, round_half_up
from weatherview.models.errors import MalformedResponseError
from weatherview.models.provider import CurrentWeatherResponse, ForecastResponse
from weatherview.models.weather import (
    ForecastEntry,
    GlobalHighlight,
    WeatherReport,
    WeatherSnapshot,
)

logger = logging.getLogger(__name__)


class WeatherFetcher:
    def __init__(
        self,
        client: ProviderClient,
        forecast_stride: int = 8,
        forecast_days: int = 5,
    ):
        self.client = client
        self.forecast_stride = forecast_stride
        self.forecast_days = forecast_days

    async def fetch_by_name(self, city: str) -> WeatherReport:
        """Fetch current conditions and forecast for a city name concurrently.

        Both calls must succeed; either failure propagates and no partial
        report is built.
        """
        current, forecast = await asyncio.gather(
            self.client.current_by_city(city),
            self.client.forecast_by_city(city),
        )
        return self._build_report(current, forecast)

    async def fetch_by_coordinates(self, lat: float, lon: float) -> WeatherReport:
        current, forecast = await asyncio.gather(
            self.client.current_by_coordinates(lat, lon),
            self.client.forecast_by_coordinates(lat, lon),
        )
        return self._build_report(current, forecast)

    async def fetch_highlight(self, city: str) -> GlobalHighlight:
        raw = await self.client.current_by_city(city)
        snapshot = parse_snapshot(raw)
        return GlobalHighlight(
            city=snapshot.name,
            temperature=round_half_up(snapshot.temperature),
            icon=snapshot.icon,
            description=snapshot.description,
        )

    def _build_report(self, current: dict, forecast: dict) -> WeatherReport:
        return WeatherReport(
            snapshot=parse_snapshot(current),
            forecast=sample_forecast(
                forecast, stride=self.forecast_stride, limit=self.forecast_days
            ),
        )


def parse_snapshot(raw: dict) -> WeatherSnapshot:
    """Map a /weather payload into a WeatherSnapshot, rejecting bad shapes."""
    try:
        data = CurrentWeatherResponse.model_validate(raw)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Unexpected current-conditions shape: {e.error_count()} errors"
        ) from e

    condition = data.weather[0]
    return WeatherSnapshot(
        name=data.name,
        country=data.sys.country,
        state=data.sys.state,
        temperature=data.main.temp,
        feels_like=(
            data.main.feels_like if data.main.feels_like is not None else data.main.temp
        ),
        humidity=data.main.humidity,
        pressure=data.main.pressure or 0.0,
        wind_speed=data.wind.speed,
        wind_deg=data.wind.deg,
        sunrise=from_unix(data.sys.sunrise),
        sunset=from_unix(data.sys.sunset),
        condition=condition.main,
        description=condition.description,
        icon=condition.icon,
        utc_offset_seconds=data.timezone,
    )


def sample_forecast(
    raw: dict, stride: int = 8, limit: int = 5
) -> tuple[ForecastEntry, ...]:
    """Reduce a 3-hourly /forecast payload to one entry per day.

    Takes every `stride`-th sample starting at index 0 and keeps at most
    `limit` of them.
    """
    try:
        data = ForecastResponse.model_validate(raw)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Unexpected forecast shape: {e.error_count()} errors"
        ) from e

    entries = []
    for sample in data.samples[::stride][:limit]:
        condition = sample.weather[0]
        entries.append(
            ForecastEntry(
                timestamp=from_unix(sample.dt),
                temperature=sample.main.temp,
                condition=condition.main,
                description=condition.description,
                icon=condition.icon,
            )
        )
    return tuple(entries)
