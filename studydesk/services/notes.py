import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from studydesk.graph.models import Document
from studydesk.schedule.models import ScheduleRow
from studydesk.services.active_folder import resolve_target_folder
from studydesk.services.date_service import ClockReading
from studydesk.services.folder_tree import FolderTree, RefetchError

logger = logging.getLogger(__name__)


@dataclass
class NoteDraft:
    """In-progress note; kept intact when filing it fails so it can be resubmitted."""
    folder_id: str
    text_content: str = ""
    description: Optional[str] = None

    def clear(self) -> None:
        self.text_content = ""
        self.description = None


def prepare_note_for_now(rows: Sequence[ScheduleRow], now: ClockReading, tree: FolderTree) -> Optional[NoteDraft]:
    folder_id = resolve_target_folder(rows, now, tree.root)
    if folder_id is None:
        return None
    return NoteDraft(folder_id=folder_id)


async def submit_draft(tree: FolderTree, draft: NoteDraft) -> Document:
    # A rejected write keeps the draft; a saved one clears it even if the re-read fails.
    try:
        document = await tree.create_document(draft.folder_id, draft.text_content, draft.description)
    except RefetchError:
        draft.clear()
        raise
    draft.clear()
    return document
