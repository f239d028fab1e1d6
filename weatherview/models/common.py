"""Common types and helpers shared across models."""

import math
from datetime import UTC, datetime
from enum import StrEnum


class TimeOfDay(StrEnum):
    DAY = "day"
    NIGHT = "night"


class Status(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def from_unix(ts: int | float) -> datetime:
    return datetime.fromtimestamp(ts, UTC)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
