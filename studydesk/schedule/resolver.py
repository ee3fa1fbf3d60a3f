import re
from typing import Optional, Sequence

from studydesk.schedule.models import ScheduleRow, TimeInterval
from studydesk.services.date_service import ClockReading, SUNDAY

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(text: str) -> int:
    """Parse "H:MM" / "HH:MM" (24-hour) into minutes since midnight."""
    match = _HHMM_RE.match(text.strip())
    if not match:
        raise ValueError(f"Invalid time of day: {text!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time of day out of range: {text!r}")
    return hours * 60 + minutes


def parse_interval(text: str) -> TimeInterval:
    """Parse "H:MM - H:MM" into a half-open interval."""
    parts = text.split("-")
    if len(parts) != 2:
        raise ValueError(f"Interval must have exactly two parts: {text!r}")
    return TimeInterval(start=parse_time_of_day(parts[0]), end=parse_time_of_day(parts[1]))


def day_index_for(weekday: int) -> int:
    # Clock weekdays count from Sunday=0; timetable columns count from Monday=0.
    return 6 if weekday == SUNDAY else weekday - 1


def resolve_active_subject(rows: Sequence[ScheduleRow], now: ClockReading) -> Optional[str]:
    """
    Return the subject scheduled at `now`, or None.

    Overlapping rows are allowed; the first row in stored order wins. Rows whose
    interval text does not parse never match.
    """
    now_minutes = now.hour * 60 + now.minute
    day_index = day_index_for(now.weekday)

    for row in rows:
        try:
            interval = parse_interval(row.time)
        except ValueError:
            continue
        if not interval.contains(now_minutes):
            continue
        if not 0 <= day_index < len(row.cells):
            return None
        subject = row.cells[day_index].strip()
        return subject or None
    return None
