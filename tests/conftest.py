import os
import itertools

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

# Make sure importing studydesk.config doesn't fail during test collection.
os.environ.setdefault("GRAPH_API_URL", "http://graph.test/graphql")
os.environ.setdefault("ROOT_FOLDER_ID", "root")

from studydesk.db.models import Base
from studydesk.graph.client import RemoteError
from studydesk.graph.models import Document, Folder, Subfolder

# Use in-memory SQLite for tests
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    # StaticPool keeps the single in-memory database alive across connections
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session
        await session.rollback()


class MemoryKeyValueStore:
    def __init__(self, data=None):
        self.data = dict(data or {})
        self.writes = []

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.writes.append((key, value))
        self.data[key] = value


class FakeFolderService:
    """In-memory folder service that records every call in order."""

    def __init__(self):
        self.calls = []
        self.folders = {}
        self.fail_names = set()
        self.fail_next = None
        self.fail_fetch = None
        self._ids = itertools.count(1)

    def add_folder(self, folder_id, name, parent_id=None):
        self.folders[folder_id] = {"name": name, "parent": parent_id, "documents": []}

    def _check_failure(self):
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def _snapshot(self, folder_id):
        data = self.folders[folder_id]
        children = [
            Subfolder(id=child_id, name=child["name"], document_count=len(child["documents"]))
            for child_id, child in self.folders.items()
            if child["parent"] == folder_id
        ]
        return Folder(
            id=folder_id,
            name=data["name"],
            document_count=len(data["documents"]),
            subfolders=children,
            documents=list(data["documents"]),
        )

    async def fetch_folders_by_ids(self, ids):
        self.calls.append(("fetch", list(ids)))
        self._check_failure()
        if self.fail_fetch is not None:
            error, self.fail_fetch = self.fail_fetch, None
            raise error
        return [self._snapshot(folder_id) for folder_id in ids if folder_id in self.folders]

    async def create_folder(self, name, parent_id):
        self.calls.append(("create_folder", name, parent_id))
        self._check_failure()
        if name in self.fail_names:
            raise RemoteError(f"rejected {name}")
        folder_id = f"f{next(self._ids)}"
        self.add_folder(folder_id, name, parent_id)
        return Subfolder(id=folder_id, name=name, document_count=0)

    async def rename_folder(self, folder_id, name):
        self.calls.append(("rename_folder", folder_id, name))
        self._check_failure()
        self.folders[folder_id]["name"] = name
        return True

    async def delete_folder(self, folder_id):
        self.calls.append(("delete_folder", folder_id))
        self._check_failure()
        self.folders.pop(folder_id)
        return True


class FakeDocumentService:
    def __init__(self, folders: FakeFolderService):
        self.folders = folders
        self.calls = folders.calls
        self._ids = itertools.count(1)

    def _find(self, document_id):
        for data in self.folders.folders.values():
            for index, doc in enumerate(data["documents"]):
                if doc.id == document_id:
                    return data["documents"], index
        raise RemoteError(f"unknown document {document_id}")

    async def create_document(self, folder_id, text_content, description=None):
        self.calls.append(("create_document", folder_id, text_content, description))
        self.folders._check_failure()
        document = Document(
            id=f"d{next(self._ids)}",
            text_content=text_content,
            description=description,
            created_at="2026-10-19T09:00:00",
        )
        self.folders.folders[folder_id]["documents"].append(document)
        return document

    async def update_document(self, document_id, text_content):
        self.calls.append(("update_document", document_id, text_content))
        self.folders._check_failure()
        documents, index = self._find(document_id)
        old = documents[index]
        documents[index] = Document(id=old.id, text_content=text_content, description=old.description, created_at=old.created_at)
        return documents[index]

    async def delete_document(self, document_id):
        self.calls.append(("delete_document", document_id))
        self.folders._check_failure()
        documents, index = self._find(document_id)
        documents.pop(index)
        return True


@pytest.fixture
def kv():
    return MemoryKeyValueStore()

@pytest.fixture
def folder_service():
    service = FakeFolderService()
    service.add_folder("root", "Materials")
    return service

@pytest.fixture
def document_service(folder_service):
    return FakeDocumentService(folder_service)
