"""Pydantic mappings of the weather provider's JSON payloads."""

from pydantic import BaseModel, Field

# =============================================================================
# Current conditions
# =============================================================================


class MainBlock(BaseModel):
    temp: float
    feels_like: float | None = None
    humidity: float
    pressure: float | None = None


class ConditionBlock(BaseModel):
    main: str
    description: str
    icon: str


class SysBlock(BaseModel):
    country: str = ""
    state: str | None = None
    sunrise: int
    sunset: int


class WindBlock(BaseModel):
    speed: float
    deg: float = 0.0


class CurrentWeatherResponse(BaseModel):
    """Direct mapping to the /weather response."""

    name: str
    main: MainBlock
    weather: list[ConditionBlock] = Field(min_length=1)
    sys: SysBlock
    wind: WindBlock
    timezone: int = 0


# =============================================================================
# Forecast
# =============================================================================


class ForecastMain(BaseModel):
    temp: float


class ForecastSample(BaseModel):
    dt: int
    main: ForecastMain
    weather: list[ConditionBlock] = Field(min_length=1)


class ForecastResponse(BaseModel):
    """Direct mapping to the /forecast response (3-hour samples)."""

    samples: list[ForecastSample] = Field(alias="list")


# =============================================================================
# Geocoding
# =============================================================================


class GeoCandidate(BaseModel):
    name: str
    country: str
    state: str | None = None
    lat: float
    lon: float
