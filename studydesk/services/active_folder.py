import logging
from typing import Optional, Sequence

from studydesk.graph.models import Folder
from studydesk.schedule.models import ScheduleRow
from studydesk.schedule.resolver import resolve_active_subject
from studydesk.services.date_service import ClockReading

logger = logging.getLogger(__name__)


def find_subfolder_id(folder: Folder, name: str) -> Optional[str]:
    # Sibling names are not unique; the first one in listing order wins.
    for subfolder in folder.subfolders:
        if subfolder.name == name:
            return subfolder.id
    return None


def resolve_target_folder(rows: Sequence[ScheduleRow], now: ClockReading, folder: Optional[Folder]) -> Optional[str]:
    """Id of the subfolder named after the subject active at `now`, or None."""
    subject = resolve_active_subject(rows, now)
    if subject is None:
        logger.info("No subject scheduled for the current time")
        return None
    if folder is None:
        logger.info("Root folder not loaded, cannot place subject=%r", subject)
        return None
    folder_id = find_subfolder_id(folder, subject)
    if folder_id is None:
        logger.info("No subfolder named %r under folder %s", subject, folder.id)
    return folder_id
