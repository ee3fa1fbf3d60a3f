import logging
from typing import Any, Iterable, List, Optional, Sequence

from studydesk.graph.client import RemoteError
from studydesk.graph.models import Document, Folder, Subfolder
from studydesk.graph.services import DocumentService, FolderService

logger = logging.getLogger(__name__)


class ConfirmationRequiredError(RuntimeError):
    """Raised when a destructive operation is called without explicit user confirmation."""


class RefetchError(RemoteError):
    """The remote write succeeded but re-reading the tree afterwards failed.

    `result` holds what the write returned, so callers must not repeat it.
    """

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.result = result


class FolderTree:
    """
    Read-through view of the remote folder hierarchy.

    The tree watches a list of folder ids (the root folder first) and keeps the
    last snapshot fetched for them. Snapshots are never patched locally: every
    mutation is sent to the remote service and then the watched folders, plus
    the folders the mutation touched, are fetched again before the call
    returns. If the remote write fails the snapshot is left as it was and the
    RemoteError propagates. If the write succeeds but the re-read fails, the
    old snapshot is kept and RefetchError (a RemoteError) is raised carrying
    the write result, so the write is not repeated. Nothing is retried here.
    """

    def __init__(self, folder_service: FolderService, document_service: DocumentService, watch_ids: Sequence[str]):
        self.folder_service = folder_service
        self.document_service = document_service
        self.watch_ids: List[str] = list(watch_ids)
        self.folders: List[Folder] = []

    @property
    def root(self) -> Optional[Folder]:
        if not self.watch_ids:
            return None
        return self.get(self.watch_ids[0])

    def get(self, folder_id: str) -> Optional[Folder]:
        for folder in self.folders:
            if folder.id == folder_id:
                return folder
        return None

    async def fetch(self, ids: Optional[Sequence[str]] = None) -> List[Folder]:
        """Fetch `ids` (default: the watched ids), make them the watched set and return the new snapshot."""
        if ids is not None:
            self.watch_ids = list(ids)
        self.folders = await self.folder_service.fetch_folders_by_ids(self.watch_ids)
        logger.debug("Fetched %d folder(s) for ids=%s", len(self.folders), self.watch_ids)
        return self.folders

    async def refresh(self, affected: Iterable[Optional[str]] = ()) -> List[Folder]:
        ids = list(self.watch_ids)
        for folder_id in affected:
            if folder_id and folder_id not in ids:
                ids.append(folder_id)
        self.folders = await self.folder_service.fetch_folders_by_ids(ids)
        return self.folders

    async def _refresh_after_write(self, affected: Iterable[Optional[str]], result: Any) -> None:
        try:
            await self.refresh(affected)
        except RemoteError as exc:
            logger.error("Re-read after write failed: %s", exc)
            raise RefetchError(f"Change saved but the folder view could not be reloaded: {exc}", result) from exc

    async def create_folder(self, name: str, parent_id: str) -> Optional[Subfolder]:
        if not name.strip():
            logger.info("Folder creation skipped: empty name")
            return None
        created = await self.folder_service.create_folder(name, parent_id)
        logger.info("Folder created id=%s name=%r parent=%s", created.id, created.name, parent_id)
        self.watch_ids.append(created.id)
        await self._refresh_after_write([parent_id], created)
        return created

    async def rename_folder(self, folder_id: str, name: str) -> bool:
        # Renaming to the current name still goes to the service.
        await self.folder_service.rename_folder(folder_id, name)
        logger.info("Folder renamed id=%s name=%r", folder_id, name)
        await self._refresh_after_write([folder_id], True)
        return True

    async def delete_folder(self, folder_id: str, *, confirmed: bool = False) -> bool:
        if not confirmed:
            raise ConfirmationRequiredError(f"Deleting folder {folder_id} requires confirmation")
        await self.folder_service.delete_folder(folder_id)
        logger.info("Folder deleted id=%s", folder_id)
        if folder_id in self.watch_ids[1:]:
            self.watch_ids.remove(folder_id)
        await self._refresh_after_write((), True)
        return True

    async def create_document(self, folder_id: str, text_content: str, description: Optional[str] = None) -> Document:
        document = await self.document_service.create_document(folder_id, text_content, description)
        logger.info("Document created id=%s folder=%s", document.id, folder_id)
        await self._refresh_after_write([folder_id], document)
        return document

    async def update_document(self, document_id: str, text_content: str) -> Document:
        document = await self.document_service.update_document(document_id, text_content)
        logger.info("Document updated id=%s", document_id)
        await self._refresh_after_write([self.folder_of_document(document_id)], document)
        return document

    async def delete_document(self, document_id: str, *, confirmed: bool = False) -> bool:
        if not confirmed:
            raise ConfirmationRequiredError(f"Deleting document {document_id} requires confirmation")
        owner = self.folder_of_document(document_id)
        await self.document_service.delete_document(document_id)
        logger.info("Document deleted id=%s", document_id)
        await self._refresh_after_write([owner], True)
        return True

    def folder_of_document(self, document_id: str) -> Optional[str]:
        for folder in self.folders:
            if any(doc.id == document_id for doc in folder.documents):
                return folder.id
        return None
