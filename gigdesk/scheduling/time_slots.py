"""Candidate booking start times for a calendar date.

Pure helper used by booking pickers: fixed granularity across a fixed
working window, no state and no side effects.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterator, Optional

from gigdesk.config import settings


class CandidateStartTimes:
    """Lazy, finite, restartable sequence of start times on one day.

    Each ``iter()`` starts a fresh generator, so the same object can be
    enumerated any number of times. The window end is exclusive.
    """

    def __init__(
        self,
        day: date,
        granularity_minutes: int,
        start_hour: int,
        end_hour: int,
        duration_minutes: Optional[int] = None,
        tz: tzinfo = timezone.utc,
    ) -> None:
        if granularity_minutes <= 0:
            raise ValueError(f"granularity_minutes must be > 0, got {granularity_minutes}")
        if end_hour <= start_hour:
            raise ValueError(f"end_hour must be after start_hour, got {start_hour}-{end_hour}")
        self.day = day
        self.granularity = timedelta(minutes=granularity_minutes)
        self.window_start = datetime.combine(day, time(hour=start_hour), tzinfo=tz)
        self.window_end = datetime.combine(day, time(), tzinfo=tz) + timedelta(hours=end_hour)
        self.duration = timedelta(minutes=duration_minutes) if duration_minutes else None

    def __iter__(self) -> Iterator[datetime]:
        current = self.window_start
        while current < self.window_end:
            if self.duration is None or current + self.duration <= self.window_end:
                yield current
            current += self.granularity

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def labels(self) -> list[str]:
        """``HH:MM`` strings as shown in a time picker."""
        return [start.strftime("%H:%M") for start in self]


def candidate_start_times(
    day: date,
    duration_minutes: Optional[int] = None,
    granularity_minutes: Optional[int] = None,
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
    tz: tzinfo = timezone.utc,
) -> CandidateStartTimes:
    """Build the candidate starts for ``day`` using configured defaults (09:00-17:00, 30 min)."""
    scheduling = settings.scheduling
    return CandidateStartTimes(
        day=day,
        granularity_minutes=(
            scheduling.slot_granularity_minutes if granularity_minutes is None else granularity_minutes
        ),
        start_hour=scheduling.workday_start_hour if start_hour is None else start_hour,
        end_hour=scheduling.workday_end_hour if end_hour is None else end_hour,
        duration_minutes=duration_minutes,
        tz=tz,
    )
