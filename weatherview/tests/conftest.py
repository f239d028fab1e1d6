"""Shared test fixtures."""

import json
from datetime import datetime
from pathlib import Path

import pytest
import yaml

from weatherview.config.defaults import DEFAULT_HIGHLIGHT_CITIES
from weatherview.config.schema import AppConfig, ProviderConfig
from weatherview.storage.kv_store import MemoryStorage

TEST_BASE_URL = "https://test-owm.example.com/data/2.5"
TEST_GEO_URL = "https://test-owm.example.com/geo/1.0"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir: Path):
    def _load(name: str):
        with open(fixtures_dir / name) as f:
            return json.load(f)

    return _load


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        api_key="test-key",
        base_url=TEST_BASE_URL,
        geo_base_url=TEST_GEO_URL,
        max_retries=1,
        retry_base_delay=0.01,  # Fast retries in tests
    )


@pytest.fixture
def app_config(provider_config: ProviderConfig) -> AppConfig:
    return AppConfig(
        provider=provider_config,
        highlight_cities=list(DEFAULT_HIGHLIGHT_CITIES),
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def make_forecast():
    """Build a /forecast payload with `n` 3-hourly samples."""

    def _make(n: int, start: int = 1770724800) -> dict:
        conditions = ["Clear", "Clouds", "Rain"]
        return {
            "cod": "200",
            "cnt": n,
            "list": [
                {
                    "dt": start + i * 3 * 3600,
                    "main": {"temp": 10.0 + i},
                    "weather": [
                        {
                            "main": conditions[i % 3],
                            "description": conditions[i % 3].lower(),
                            "icon": f"{i % 3 + 1:02d}d",
                        }
                    ],
                }
                for i in range(n)
            ],
            "city": {"name": "London", "country": "GB"},
        }

    return _make


@pytest.fixture
def make_current():
    """Build a minimal /weather payload."""

    def _make(
        name: str = "London",
        temp: float = 18.0,
        condition: str = "Clouds",
        wind: float = 3.0,
        country: str = "GB",
    ) -> dict:
        return {
            "name": name,
            "main": {"temp": temp, "feels_like": temp - 1, "humidity": 60, "pressure": 1012},
            "weather": [
                {"main": condition, "description": condition.lower(), "icon": "03d"}
            ],
            "sys": {"country": country, "sunrise": 1770708120, "sunset": 1770743520},
            "wind": {"speed": wind, "deg": 180},
            "timezone": 0,
        }

    return _make


@pytest.fixture
def noon():
    return lambda: datetime(2026, 2, 10, 12, 0, 0)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"timeout": 5.0},
        "search": {"history_limit": 5},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
