import logging
from typing import Any, List, Optional, Protocol, Sequence

from studydesk.graph import queries
from studydesk.graph.client import GraphClient, RemoteError
from studydesk.graph.models import (
    Document,
    Folder,
    Subfolder,
    document_from_node,
    folders_from_connection,
)

logger = logging.getLogger(__name__)


class FolderService(Protocol):
    async def fetch_folders_by_ids(self, ids: Sequence[str]) -> List[Folder]: ...

    async def create_folder(self, name: str, parent_id: str) -> Subfolder: ...

    async def rename_folder(self, folder_id: str, name: str) -> bool: ...

    async def delete_folder(self, folder_id: str) -> bool: ...


class DocumentService(Protocol):
    async def create_document(
        self, folder_id: str, text_content: str, description: Optional[str] = None
    ) -> Document: ...

    async def update_document(self, document_id: str, text_content: str) -> Document: ...

    async def delete_document(self, document_id: str) -> bool: ...


def _field(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if not isinstance(value, dict):
        raise RemoteError(f"Folder service returned no '{name}' payload")
    return value


def _require_success(payload: dict[str, Any], operation: str) -> None:
    if payload.get("success") is not True:
        logger.error("%s was not acknowledged by the folder service: %s", operation, payload)
        raise RemoteError(f"{operation} failed")


class GraphFolderService:
    def __init__(self, client: GraphClient, subfolder_limit: int = 100):
        self.client = client
        self.subfolder_limit = subfolder_limit

    async def fetch_folders_by_ids(self, ids: Sequence[str]) -> List[Folder]:
        data = await self.client.execute(
            queries.GET_FOLDER_CONTENTS,
            {"ids": list(ids), "subfolderLimit": self.subfolder_limit},
        )
        try:
            return folders_from_connection(data.get("foldersById"))
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteError(f"Malformed folder listing: {exc}") from exc

    async def create_folder(self, name: str, parent_id: str) -> Subfolder:
        data = await self.client.execute(
            queries.CREATE_FOLDER,
            {"input": {"name": name, "parentId": parent_id}},
        )
        payload = _field(data, "createFolder")
        if not payload.get("id"):
            raise RemoteError(f"Folder '{name}' was not created")
        return Subfolder(id=str(payload["id"]), name=payload.get("name") or name, document_count=0)

    async def rename_folder(self, folder_id: str, name: str) -> bool:
        data = await self.client.execute(queries.UPDATE_FOLDER_NAME, {"id": folder_id, "name": name})
        _require_success(_field(data, "updateFolder"), "Rename folder")
        return True

    async def delete_folder(self, folder_id: str) -> bool:
        data = await self.client.execute(queries.DELETE_FOLDER, {"id": folder_id})
        _require_success(_field(data, "removeFolder"), "Delete folder")
        return True


class GraphDocumentService:
    def __init__(self, client: GraphClient):
        self.client = client

    async def create_document(
        self, folder_id: str, text_content: str, description: Optional[str] = None
    ) -> Document:
        variables: dict[str, Any] = {"folderId": folder_id, "textContent": text_content}
        # An omitted description stays absent instead of becoming "".
        if description is not None:
            variables["description"] = description
        data = await self.client.execute(queries.CREATE_DOCUMENT, variables)
        return self._document(data, "createDocumentText")

    async def update_document(self, document_id: str, text_content: str) -> Document:
        data = await self.client.execute(
            queries.UPDATE_DOCUMENT, {"id": document_id, "textContent": text_content}
        )
        return self._document(data, "updateTextContentOnDocument")

    async def delete_document(self, document_id: str) -> bool:
        data = await self.client.execute(queries.DELETE_DOCUMENT, {"input": {"id": document_id}})
        _require_success(_field(data, "removeDocument"), "Delete document")
        return True

    @staticmethod
    def _document(data: dict[str, Any], name: str) -> Document:
        payload = _field(data, name)
        try:
            return document_from_node(payload)
        except KeyError as exc:
            raise RemoteError(f"Malformed document payload: missing {exc}") from exc
