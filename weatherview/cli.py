"""CLI entry point: a terminal presentation layer over the orchestrator."""

import argparse
import asyncio
import logging

from weatherview.config.loader import load_config, redacted_dump
from weatherview.config.schema import AppConfig
from weatherview.ingest.geolocation import (
    FixedGeolocationResolver,
    IpGeolocationResolver,
)
from weatherview.orchestrator import WeatherOrchestrator
from weatherview.reporting.formatters import (
    format_highlights_text,
    format_history_text,
    format_suggestions_text,
    format_weather_json,
    format_weather_text,
)
from weatherview.storage.database import connect, run_migrations
from weatherview.storage.history_store import HistoryStore
from weatherview.storage.kv_store import SqliteStorage

DEFAULT_CONFIG = "weatherview.yaml"
DEFAULT_DB = "data/weatherview.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherview",
        description="Current weather, forecast and lifestyle tips",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path for local state")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # search
    search_p = sub.add_parser("search", help="Current weather + forecast for a city")
    search_p.add_argument("city", nargs="+", help="City name, e.g. 'Paris, FR'")
    search_p.add_argument("--json", action="store_true", help="Emit JSON")

    # locate
    locate_p = sub.add_parser("locate", help="Weather for the current location")
    locate_p.add_argument("--lat", type=float, help="Latitude (skips IP lookup)")
    locate_p.add_argument("--lon", type=float, help="Longitude (skips IP lookup)")
    locate_p.add_argument("--yes", action="store_true", help="Allow location access without asking")
    locate_p.add_argument("--json", action="store_true", help="Emit JSON")

    # suggest
    suggest_p = sub.add_parser("suggest", help="City name suggestions")
    suggest_p.add_argument("partial", help="Partial city name (3+ characters)")

    # highlights
    sub.add_parser("highlights", help="Weather in the reference cities")

    # history
    history_p = sub.add_parser("history", help="Recent searches")
    history_p.add_argument("--clear", action="store_true", help="Forget recent searches")

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "search":
        return asyncio.run(_cmd_search(config, args))
    elif args.command == "locate":
        return asyncio.run(_cmd_locate(config, args))
    elif args.command == "suggest":
        return asyncio.run(_cmd_suggest(config, args))
    elif args.command == "highlights":
        return asyncio.run(_cmd_highlights(config, args))
    elif args.command == "history":
        return _cmd_history(config, args)
    else:
        parser.print_help()
        return 1


def _open_storage(args) -> SqliteStorage:
    conn = connect(args.db)
    run_migrations(conn)
    return SqliteStorage(conn)


async def _close(orch: WeatherOrchestrator, storage: SqliteStorage) -> None:
    await orch.aclose()
    storage.conn.close()


def _print_weather(orch: WeatherOrchestrator, as_json: bool) -> None:
    if as_json:
        print(format_weather_json(orch.state))
    else:
        print(format_weather_text(orch.state, orch.config.provider.icon_base_url))


async def _cmd_search(config: AppConfig, args) -> int:
    storage = _open_storage(args)
    orch = WeatherOrchestrator(config, storage)
    try:
        ok = await orch.search_by_name(" ".join(args.city))
        _print_weather(orch, args.json)
        return 0 if ok else 1
    finally:
        await _close(orch, storage)


async def _cmd_locate(config: AppConfig, args) -> int:
    explicit = args.lat is not None and args.lon is not None
    if explicit:
        resolver = FixedGeolocationResolver(args.lat, args.lon)
    else:
        resolver = IpGeolocationResolver(config.geolocation, consent=_ask_location_consent)

    storage = _open_storage(args)
    orch = WeatherOrchestrator(config, storage, geolocation=resolver)
    try:
        if explicit or args.yes:
            orch.allow_location()
        ok = await orch.locate()
        _print_weather(orch, args.json)
        return 0 if ok else 1
    finally:
        await _close(orch, storage)


def _ask_location_consent() -> bool:
    answer = input("Allow weatherview to look up your location? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


async def _cmd_suggest(config: AppConfig, args) -> int:
    storage = _open_storage(args)
    orch = WeatherOrchestrator(config, storage)
    try:
        found = await orch.request_suggestions(args.partial)
        print(format_suggestions_text(found))
        return 0
    finally:
        await _close(orch, storage)


async def _cmd_highlights(config: AppConfig, args) -> int:
    storage = _open_storage(args)
    orch = WeatherOrchestrator(config, storage)
    try:
        highlights = await orch.load_global_highlights()
        print(format_highlights_text(highlights))
        return 0 if highlights else 1
    finally:
        await _close(orch, storage)


def _cmd_history(config: AppConfig, args) -> int:
    storage = _open_storage(args)
    try:
        store = HistoryStore(storage, limit=config.search.history_limit)
        if args.clear:
            store.clear()
            print("Search history cleared")
        else:
            print(format_history_text(tuple(store.load())))
        return 0
    finally:
        storage.conn.close()


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(redacted_dump(config))
        return 0
    print("Use: config show")
    return 1
