import json
import logging
from typing import List, Sequence

from studydesk.db.keys import KeyValueStore, TIMETABLE_KEY
from studydesk.schedule.models import DAYS_COUNT, NEW_ROW_TIME, ScheduleRow, default_rows

logger = logging.getLogger(__name__)


class ScheduleStore:
    """Loads and saves the weekly timetable through a key-value store."""

    def __init__(self, kv: KeyValueStore, key: str = TIMETABLE_KEY):
        self.kv = kv
        self.key = key

    async def load(self) -> List[ScheduleRow]:
        raw = await self.kv.get(self.key)
        if raw is None:
            logger.info("No stored timetable, using default rows")
            return default_rows()
        try:
            return parse_rows(raw)
        except ValueError as exc:
            logger.warning("Stored timetable is unreadable, using default rows: %s", exc)
            return default_rows()

    async def save(self, rows: Sequence[ScheduleRow]) -> None:
        await self.kv.set(self.key, dump_rows(rows))
        logger.info("Timetable saved (rows=%d)", len(rows))


def dump_rows(rows: Sequence[ScheduleRow]) -> str:
    return json.dumps([row.to_dict() for row in rows], ensure_ascii=False)


def parse_rows(raw: str) -> List[ScheduleRow]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError("timetable must be a JSON array")
    return [ScheduleRow.from_dict(item) for item in data]


def _in_range(rows: Sequence[ScheduleRow], row_index: int) -> bool:
    return 0 <= row_index < len(rows)


def set_cell(rows: Sequence[ScheduleRow], row_index: int, day_index: int, value: str) -> List[ScheduleRow]:
    if not _in_range(rows, row_index) or not 0 <= day_index < DAYS_COUNT:
        logger.debug("set_cell ignored for stale index row=%s day=%s", row_index, day_index)
        return list(rows)
    row = rows[row_index]
    cells = list(row.cells)
    cells[day_index] = value
    updated = list(rows)
    updated[row_index] = ScheduleRow(time=row.time, cells=cells)
    return updated


def set_interval(rows: Sequence[ScheduleRow], row_index: int, value: str) -> Sequence[ScheduleRow]:
    """
    Replace a row's raw interval text.

    Returns `rows` itself when nothing changes, so callers can skip saving by identity.
    """
    if not _in_range(rows, row_index):
        logger.debug("set_interval ignored for stale index row=%s", row_index)
        return rows
    row = rows[row_index]
    if row.time == value:
        return rows
    updated = list(rows)
    updated[row_index] = ScheduleRow(time=value, cells=list(row.cells))
    logger.debug("Interval for row %d changed to %r", row_index, value)
    return updated


def add_row(rows: Sequence[ScheduleRow]) -> List[ScheduleRow]:
    return [*rows, ScheduleRow(time=NEW_ROW_TIME)]


def remove_row(rows: Sequence[ScheduleRow], row_index: int) -> List[ScheduleRow]:
    if not _in_range(rows, row_index):
        return list(rows)
    return [row for index, row in enumerate(rows) if index != row_index]
