"""Plain text and JSON renderings of application state."""

import json
from datetime import datetime

from weatherview.models.common import round_half_up
from weatherview.models.state import AppState
from weatherview.models.weather import CitySuggestion, GlobalHighlight
from weatherview.view.icons import icon_url
from weatherview.view.theme import PALETTE_GRADIENTS


def _hhmm(dt: datetime) -> str:
    return dt.astimezone().strftime("%H:%M")


def _weekday(dt: datetime) -> str:
    return dt.astimezone().strftime("%a")


def format_weather_text(state: AppState, icon_base_url: str) -> str:
    """Current conditions, forecast and ambient info for the terminal."""
    lines: list[str] = []
    if state.error is not None:
        lines.append(f"! {state.error.message}")

    s = state.snapshot
    if s is None:
        return "\n".join(lines)

    place = f"{s.name}, {s.country}" if s.country else s.name
    lines += [
        f"=== {place} ===",
        f"{round_half_up(s.temperature)}°C  {s.description} "
        f"(feels like {round_half_up(s.feels_like)}°C)",
        f"Wind: {s.wind_speed} m/s @ {s.wind_deg:.0f}° | Humidity: {s.humidity:.0f}%",
        f"Sunrise: {_hhmm(s.sunrise)} | Sunset: {_hhmm(s.sunset)}",
        f"Icon: {icon_url(s.icon, icon_base_url, large=True)}",
    ]
    if state.forecast:
        lines.append("Forecast:")
        for entry in state.forecast:
            lines.append(
                f"  {_weekday(entry.timestamp)}  {round_half_up(entry.temperature):>3}°C  "
                f"{entry.description}"
            )

    start, end = PALETTE_GRADIENTS[state.palette]
    lines.append(f"Theme: {state.palette} ({start} -> {end}, {state.time_of_day})")
    if state.recommendation is not None:
        lines.append(f"Tip: {state.recommendation.text}")
    return "\n".join(lines)


def format_weather_json(state: AppState) -> str:
    """JSON rendering for programmatic consumption."""
    s = state.snapshot
    data = {
        "status": str(state.status),
        "error": (
            {"kind": str(state.error.kind), "message": state.error.message}
            if state.error
            else None
        ),
        "snapshot": (
            {
                "name": s.name,
                "country": s.country,
                "temperature": s.temperature,
                "feels_like": s.feels_like,
                "humidity": s.humidity,
                "wind_speed": s.wind_speed,
                "wind_deg": s.wind_deg,
                "sunrise": s.sunrise.isoformat(),
                "sunset": s.sunset.isoformat(),
                "condition": s.condition,
                "description": s.description,
                "icon": s.icon,
            }
            if s
            else None
        ),
        "forecast": [
            {
                "timestamp": e.timestamp.isoformat(),
                "temperature": e.temperature,
                "condition": e.condition,
                "icon": e.icon,
            }
            for e in state.forecast
        ],
        "history": list(state.history),
        "palette": str(state.palette),
        "time_of_day": str(state.time_of_day),
        "recommendation": (
            state.recommendation.text if state.recommendation else None
        ),
    }
    return json.dumps(data, indent=2)


def format_highlights_text(highlights: tuple[GlobalHighlight, ...]) -> str:
    if not highlights:
        return "No highlights available"
    return "\n".join(
        f"{h.city:<16} {h.temperature:>4}°C  {h.description}" for h in highlights
    )


def format_suggestions_text(suggestions: tuple[CitySuggestion, ...]) -> str:
    if not suggestions:
        return "No suggestions"
    lines = []
    for i, s in enumerate(suggestions, 1):
        region = f" ({s.state})" if s.state else ""
        lines.append(
            f"{i}. {s.label}{region}  [{s.latitude:.2f}, {s.longitude:.2f}]"
        )
    return "\n".join(lines)


def format_history_text(history: tuple[str, ...]) -> str:
    if not history:
        return "No recent searches"
    return "\n".join(f"{i}. {city}" for i, city in enumerate(history, 1))
