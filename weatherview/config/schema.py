"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, model_validator

OPENWEATHERMAP_BASE_URL = "https://api.openweathermap.org/data/2.5"
OPENWEATHERMAP_GEO_URL = "https://api.openweathermap.org/geo/1.0"
OPENWEATHERMAP_ICON_URL = "https://openweathermap.org/img/wn"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = OPENWEATHERMAP_BASE_URL
    geo_base_url: str = OPENWEATHERMAP_GEO_URL
    icon_base_url: str = OPENWEATHERMAP_ICON_URL
    units: str = "metric"
    timeout: float = Field(default=10.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=0.5, ge=0.0)
    user_agent: str = "weatherview/0.1.0"


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    history_limit: int = Field(default=5, ge=1)
    suggestion_min_chars: int = Field(default=3, ge=1)
    suggestion_limit: int = Field(default=5, ge=1)
    forecast_stride: int = Field(default=8, ge=1)
    forecast_days: int = Field(default=5, ge=1)
    discard_stale_responses: bool = True


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    clock_refresh_seconds: float = Field(default=60.0, gt=0.0)
    splash_seconds: float = Field(default=3.0, ge=0.0)
    day_start_hour: int = Field(default=6, ge=0, le=23)
    night_start_hour: int = Field(default=18, ge=1, le=24)
    particle_count: int = Field(default=100, ge=0)
    cloud_count: int = Field(default=5, ge=0)

    @model_validator(mode="after")
    def _day_before_night(self) -> "DisplayConfig":
        if self.day_start_hour >= self.night_start_hour:
            raise ValueError("day_start_hour must be earlier than night_start_hour")
        return self


class GeolocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = True
    lookup_url: str = "https://ipapi.co/json/"
    timeout: float = Field(default=10.0, gt=0.0)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    search: SearchConfig = SearchConfig()
    display: DisplayConfig = DisplayConfig()
    geolocation: GeolocationConfig = GeolocationConfig()
    highlight_cities: list[str] = []
