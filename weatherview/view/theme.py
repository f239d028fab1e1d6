"""Ambient palette selection from the current condition and time of day."""

from enum import StrEnum

from weatherview.models.common import TimeOfDay


class Palette(StrEnum):
    CLEAR_DAY = "clear-day"
    CLEAR_NIGHT = "clear-night"
    CLOUDS_DAY = "clouds-day"
    CLOUDS_NIGHT = "clouds-night"
    RAIN_DAY = "rain-day"
    RAIN_NIGHT = "rain-night"
    SNOW_DAY = "snow-day"
    SNOW_NIGHT = "snow-night"
    THUNDERSTORM = "thunderstorm"
    DEFAULT_DAY = "default-day"
    DEFAULT_NIGHT = "default-night"


# (gradient start, gradient end)
PALETTE_GRADIENTS: dict[Palette, tuple[str, str]] = {
    Palette.CLEAR_DAY: ("blue-400", "blue-200"),
    Palette.CLEAR_NIGHT: ("blue-900", "purple-900"),
    Palette.CLOUDS_DAY: ("gray-300", "blue-200"),
    Palette.CLOUDS_NIGHT: ("gray-800", "blue-900"),
    Palette.RAIN_DAY: ("gray-400", "blue-300"),
    Palette.RAIN_NIGHT: ("gray-900", "blue-800"),
    Palette.SNOW_DAY: ("gray-100", "blue-100"),
    Palette.SNOW_NIGHT: ("gray-700", "blue-900"),
    Palette.THUNDERSTORM: ("gray-700", "purple-900"),
    Palette.DEFAULT_DAY: ("blue-300", "green-200"),
    Palette.DEFAULT_NIGHT: ("blue-800", "purple-900"),
}

_DAY_NIGHT: dict[str, tuple[Palette, Palette]] = {
    "clear": (Palette.CLEAR_DAY, Palette.CLEAR_NIGHT),
    "clouds": (Palette.CLOUDS_DAY, Palette.CLOUDS_NIGHT),
    "rain": (Palette.RAIN_DAY, Palette.RAIN_NIGHT),
    "snow": (Palette.SNOW_DAY, Palette.SNOW_NIGHT),
}

DEFAULT_CONDITION = "Clear"


def select_palette(condition: str | None, time_of_day: TimeOfDay) -> Palette:
    """Map a condition code to a palette. Thunderstorm ignores time of day."""
    key = (condition or DEFAULT_CONDITION).lower()
    if key == "thunderstorm":
        return Palette.THUNDERSTORM
    day, night = _DAY_NIGHT.get(key, (Palette.DEFAULT_DAY, Palette.DEFAULT_NIGHT))
    return day if time_of_day == TimeOfDay.DAY else night
