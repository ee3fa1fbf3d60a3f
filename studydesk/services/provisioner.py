import json
import logging
from typing import AbstractSet, Sequence, Set

from studydesk.db.keys import KeyValueStore, PROVISIONED_KEY
from studydesk.graph.client import RemoteError
from studydesk.graph.services import FolderService
from studydesk.schedule.models import ScheduleRow
from studydesk.schedule.store import ScheduleStore

logger = logging.getLogger(__name__)


def collect_subjects(rows: Sequence[ScheduleRow]) -> Set[str]:
    """Distinct non-empty subject names across every row and day."""
    subjects = set()
    for row in rows:
        for cell in row.cells:
            name = cell.strip()
            if name:
                subjects.add(name)
    return subjects


class FolderProvisioner:
    """
    Creates one folder under the root for every subject in the timetable.

    The provisioned set only avoids repeat requests; it is not proof that the
    folder still exists remotely. A subject is recorded only after the service
    confirms its folder, and the set is written back once per batch.
    """

    def __init__(self, kv: KeyValueStore, folder_service: FolderService, key: str = PROVISIONED_KEY):
        self.kv = kv
        self.folder_service = folder_service
        self.key = key

    async def load_provisioned(self) -> Set[str]:
        raw = await self.kv.get(self.key)
        if raw is None:
            return set()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored provisioned subjects are unreadable, starting empty")
            return set()
        if not isinstance(data, list):
            logger.warning("Stored provisioned subjects are not a list, starting empty")
            return set()
        return {item for item in data if isinstance(item, str)}

    async def provision(self, rows: Sequence[ScheduleRow], provisioned: AbstractSet[str], root_id: str) -> Set[str]:
        result = set(provisioned)
        pending = sorted(collect_subjects(rows) - result)
        failed = []

        for subject in pending:
            try:
                await self.folder_service.create_folder(name=subject, parent_id=root_id)
            except RemoteError as exc:
                logger.error("Folder creation failed for subject=%r: %s", subject, exc)
                failed.append(subject)
                continue
            result.add(subject)
            logger.info("Folder provisioned for subject=%r", subject)

        await self.kv.set(self.key, json.dumps(sorted(result), ensure_ascii=False))
        if pending:
            logger.info(
                "Provisioning finished: created=%d failed=%d total=%d",
                len(pending) - len(failed),
                len(failed),
                len(result),
            )
        return result


async def save_timetable(
    schedule_store: ScheduleStore,
    provisioner: FolderProvisioner,
    rows: Sequence[ScheduleRow],
    root_id: str,
) -> Set[str]:
    """Persist the timetable, then make sure every subject in it has a folder."""
    await schedule_store.save(rows)
    provisioned = await provisioner.load_provisioned()
    return await provisioner.provision(rows, provisioned, root_id)
