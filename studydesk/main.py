import asyncio
import logging
import sys

from studydesk.logging_setup import setup_logging
from studydesk.config import settings as env_settings
from studydesk.db.connection import dispose_engine, ensure_schema
from studydesk.db.kv_store import DurableKeyValueStore
from studydesk.graph.client import GraphClient, RemoteError
from studydesk.graph.services import GraphDocumentService, GraphFolderService
from studydesk.schedule.store import ScheduleStore
from studydesk.services.date_service import SystemClock
from studydesk.services.folder_tree import FolderTree, RefetchError
from studydesk.services.notes import prepare_note_for_now, submit_draft
from studydesk.services.provisioner import FolderProvisioner

async def main(note_text: str = "") -> int:
    # 1. Setup Logging
    setup_logging()
    logging.info("Starting studydesk...")

    # 2. Init DB
    await ensure_schema()
    kv = DurableKeyValueStore()

    # 3. Remote services
    client = GraphClient(
        env_settings.GRAPH_API_URL,
        api_key=env_settings.GRAPH_API_KEY,
        timeout=env_settings.GRAPH_TIMEOUT_SECONDS,
    )
    folder_service = GraphFolderService(client, subfolder_limit=env_settings.SUBFOLDER_PAGE_SIZE)
    document_service = GraphDocumentService(client)
    root_id = env_settings.ROOT_FOLDER_ID

    try:
        # 4. Timetable + folder provisioning for new subjects
        rows = await ScheduleStore(kv).load()
        logging.info("Loaded timetable rows=%d", len(rows))
        provisioner = FolderProvisioner(kv, folder_service)
        provisioned = await provisioner.provision(rows, await provisioner.load_provisioned(), root_id)
        logging.info("Provisioned subjects=%d", len(provisioned))

        # 5. Current folder contents
        tree = FolderTree(folder_service, document_service, [root_id])
        await tree.fetch()
        if tree.root is None:
            logging.error("Root folder %s not found", root_id)
            return 1

        # 6. Resolve where a note taken right now belongs
        draft = prepare_note_for_now(rows, SystemClock(env_settings.TZ).now(), tree)
        if draft is None:
            logging.info("No folder matches the current timetable slot.")
            return 0
        logging.info("Active folder id=%s", draft.folder_id)

        if not note_text.strip():
            return 0
        draft.text_content = note_text
        document = await submit_draft(tree, draft)
        logging.info("Note filed as document id=%s", document.id)
        return 0
    except RefetchError as e:
        logging.error("Note saved as document id=%s, but the folder view could not be reloaded: %s", getattr(e.result, "id", None), e)
        return 1
    except RemoteError as e:
        logging.error("Folder service error: %s", e)
        return 1
    finally:
        await dispose_engine()

if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main(" ".join(sys.argv[1:]))))
    except KeyboardInterrupt:
        logging.info("Stopped by user!")
