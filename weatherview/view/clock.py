"""Time-of-day selector."""

from datetime import datetime

from weatherview.models.common import TimeOfDay


def time_of_day(
    now: datetime | None = None, day_start: int = 6, night_start: int = 18
) -> TimeOfDay:
    """Local hour in [day_start, night_start) is day, anything else is night."""
    if now is None:
        now = datetime.now()
    return TimeOfDay.DAY if day_start <= now.hour < night_start else TimeOfDay.NIGHT
