from dataclasses import dataclass
from datetime import datetime
import zoneinfo

SUNDAY = 0


@dataclass(frozen=True)
class ClockReading:
    hour: int
    minute: int
    weekday: int  # Sunday=0 .. Saturday=6

    @classmethod
    def from_datetime(cls, value: datetime) -> "ClockReading":
        # isoweekday(): Monday=1 .. Sunday=7
        return cls(hour=value.hour, minute=value.minute, weekday=value.isoweekday() % 7)


def get_local_now(tz: str) -> datetime:
    return datetime.now(zoneinfo.ZoneInfo(tz))


class SystemClock:
    def __init__(self, tz: str):
        self.tz = tz

    def now(self) -> ClockReading:
        return ClockReading.from_datetime(get_local_now(self.tz))
