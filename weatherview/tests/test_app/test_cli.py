"""Tests for CLI commands."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

import httpx
import pytest
import respx
import yaml

from weatherview.cli import main
from weatherview.config.loader import API_KEY_ENV
from weatherview.storage.database import connect

BASE = "https://test-owm.example.com/data/2.5"
GEO = "https://test-owm.example.com/geo/1.0"
LOOKUP = "https://test-ip.example.com/json/"


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "test.yaml"
    path.write_text(yaml.dump({
        "provider": {
            "api_key": "secret-key",
            "base_url": BASE,
            "geo_base_url": GEO,
            "max_retries": 0,
        },
        "geolocation": {"lookup_url": LOOKUP},
        "highlight_cities": ["London", "Tokyo"],
    }))
    return path


@pytest.fixture
def cli(config_path: Path, tmp_path: Path):
    db_path = str(tmp_path / "test.db")

    def _run(*args: str) -> int:
        return main(["--config", str(config_path), "--db", db_path, *args])

    return _run


class TestCLI:
    def test_no_command_returns_1(self, capsys):
        assert main([]) == 1

    def test_config_show_masks_key(self, cli, capsys):
        assert cli("config", "show") == 0
        out = capsys.readouterr().out
        assert "secret-key" not in out
        assert "***" in out

    def test_history_empty_then_cleared(self, cli, capsys):
        assert cli("history") == 0
        assert "No recent searches" in capsys.readouterr().out
        assert cli("history", "--clear") == 0
        assert "Search history cleared" in capsys.readouterr().out

    def test_search_records_history(self, cli, capsys, load_fixture, make_forecast):
        with respx.mock:
            respx.get(f"{BASE}/weather").mock(
                return_value=httpx.Response(200, json=load_fixture("owm_weather_london.json"))
            )
            respx.get(f"{BASE}/forecast").mock(
                return_value=httpx.Response(200, json=make_forecast(40))
            )
            assert cli("search", "London") == 0

        out = capsys.readouterr().out
        assert "=== London, GB ===" in out
        assert "picnic" in out

        assert cli("history") == 0
        assert "1. London" in capsys.readouterr().out

    def test_search_json(self, cli, capsys, load_fixture, make_forecast):
        with respx.mock:
            respx.get(f"{BASE}/weather").mock(
                return_value=httpx.Response(200, json=load_fixture("owm_weather_london.json"))
            )
            respx.get(f"{BASE}/forecast").mock(
                return_value=httpx.Response(200, json=make_forecast(40))
            )
            assert cli("search", "--json", "London") == 0

        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "ready"
        assert len(data["forecast"]) == 5

    def test_search_not_found(self, cli, capsys):
        with respx.mock:
            respx.get(f"{BASE}/weather").mock(
                return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
            )
            respx.get(f"{BASE}/forecast").mock(
                return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
            )
            assert cli("search", "Atlantis") == 1

        assert 'City "Atlantis" not found' in capsys.readouterr().out

    def test_search_without_key(self, tmp_path: Path, capsys, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        result = main([
            "--config", str(config_path), "--db", str(tmp_path / "t.db"),
            "search", "London",
        ])
        assert result == 1
        assert "API key is not set" in capsys.readouterr().out

    def test_suggest(self, cli, capsys, load_fixture):
        with respx.mock:
            respx.get(f"{GEO}/direct").mock(
                return_value=httpx.Response(200, json=load_fixture("owm_geo_lon.json"))
            )
            assert cli("suggest", "Lon") == 0

        assert "1. London, GB (England)" in capsys.readouterr().out

    def test_suggest_short_input(self, cli, capsys):
        assert cli("suggest", "Lo") == 0
        assert "No suggestions" in capsys.readouterr().out

    def test_locate_with_coordinates(self, cli, capsys, load_fixture, make_forecast):
        with respx.mock:
            respx.get(f"{BASE}/weather").mock(
                return_value=httpx.Response(200, json=load_fixture("owm_weather_london.json"))
            )
            respx.get(f"{BASE}/forecast").mock(
                return_value=httpx.Response(200, json=make_forecast(40))
            )
            assert cli("locate", "--lat", "51.5", "--lon", "-0.12") == 0

        assert "London" in capsys.readouterr().out

    def test_locate_asks_once(self, cli, capsys, monkeypatch, load_fixture, make_forecast):
        answers = []

        def fake_input(prompt: str) -> str:
            answers.append(prompt)
            return "y"

        monkeypatch.setattr("builtins.input", fake_input)
        with respx.mock:
            respx.get(LOOKUP).mock(
                return_value=httpx.Response(200, json={"latitude": 51.5, "longitude": -0.12})
            )
            respx.get(f"{BASE}/weather").mock(
                return_value=httpx.Response(200, json=load_fixture("owm_weather_london.json"))
            )
            respx.get(f"{BASE}/forecast").mock(
                return_value=httpx.Response(200, json=make_forecast(40))
            )
            assert cli("locate") == 0
            assert cli("locate") == 0

        assert len(answers) == 1

    def test_locate_refusal_is_remembered(self, cli, capsys, monkeypatch):
        answers = []
        monkeypatch.setattr("builtins.input", lambda prompt: answers.append(prompt) or "n")
        assert cli("locate") == 1
        assert cli("locate") == 1
        assert len(answers) == 1
        assert "Location access was denied" in capsys.readouterr().out

    def test_search_at_night(self, cli, capsys, monkeypatch, load_fixture, make_forecast):
        class LateClock(datetime):
            @classmethod
            def now(cls, tz=None):
                return cls(2026, 2, 10, 23, 0)

        monkeypatch.setattr("weatherview.orchestrator.datetime", LateClock)
        with respx.mock:
            respx.get(f"{BASE}/weather").mock(
                return_value=httpx.Response(200, json=load_fixture("owm_weather_london.json"))
            )
            respx.get(f"{BASE}/forecast").mock(
                return_value=httpx.Response(200, json=make_forecast(40))
            )
            assert cli("search", "--json", "London") == 0

        data = json.loads(capsys.readouterr().out)
        assert data["time_of_day"] == "night"
        assert data["palette"] == "clear-night"

    def test_history_closes_db_on_error(self, cli, monkeypatch):
        opened = []

        def tracking_connect(path):
            conn = connect(path)
            opened.append(conn)
            return conn

        class BrokenStore:
            def __init__(self, *args, **kwargs):
                raise RuntimeError("store unavailable")

        monkeypatch.setattr("weatherview.cli.connect", tracking_connect)
        monkeypatch.setattr("weatherview.cli.HistoryStore", BrokenStore)
        with pytest.raises(RuntimeError):
            cli("history")

        with pytest.raises(sqlite3.ProgrammingError):
            opened[0].execute("SELECT 1")
