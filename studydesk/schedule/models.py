from dataclasses import dataclass, field
from typing import List

DAYS_OF_WEEK = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
DAYS_COUNT = len(DAYS_OF_WEEK)

# Interval text given to freshly added rows until the user types a real one.
NEW_ROW_TIME = "New Time"


def _empty_cells() -> List[str]:
    return [""] * DAYS_COUNT


@dataclass(frozen=True)
class TimeInterval:
    start: int  # minutes since midnight, inclusive
    end: int    # minutes since midnight, exclusive

    def contains(self, minutes: int) -> bool:
        return self.start <= minutes < self.end


@dataclass
class ScheduleRow:
    time: str                       # raw interval text, e.g. "8:00 - 10:00"
    cells: List[str] = field(default_factory=_empty_cells)  # Monday..Sunday

    def to_dict(self) -> dict:
        return {"time": self.time, "cells": list(self.cells)}

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleRow":
        if not isinstance(data, dict):
            raise ValueError(f"Schedule row must be an object, got {type(data).__name__}")
        time = data.get("time")
        cells = data.get("cells")
        if not isinstance(time, str):
            raise ValueError("Schedule row 'time' must be a string")
        if not isinstance(cells, list) or len(cells) != DAYS_COUNT:
            raise ValueError(f"Schedule row 'cells' must be a list of {DAYS_COUNT} strings")
        if not all(isinstance(cell, str) for cell in cells):
            raise ValueError("Schedule row cells must be strings")
        return cls(time=time, cells=list(cells))


def default_rows() -> List[ScheduleRow]:
    return [
        ScheduleRow(time="8:00 - 10:00"),
        ScheduleRow(time="10:00 - 12:00"),
        ScheduleRow(time="13:00 - 15:00"),
        ScheduleRow(time="15:00 - 17:00"),
    ]
