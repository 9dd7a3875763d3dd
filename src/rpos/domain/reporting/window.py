from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo


@dataclass(frozen=True)
class ReportWindow:
    """Inclusive day-granular window ``[start_of_day(from), end_of_day(to)]``."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def day_window(from_day: date, to_day: date, tz: tzinfo) -> ReportWindow:
    if from_day > to_day:
        raise ValueError("from date must not be after to date")
    start = datetime.combine(from_day, time.min, tzinfo=tz)
    end = datetime.combine(to_day + timedelta(days=1), time.min, tzinfo=tz) - timedelta(
        microseconds=1
    )
    return ReportWindow(start=start, end=end)
