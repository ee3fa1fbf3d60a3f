import logging
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from studydesk.db.connection import async_session_maker
from studydesk.db.keys import PROVISIONED_KEY, TIMETABLE_KEY, KeyValueStore  # noqa: F401
from studydesk.db.repos.kv_repo import KeyValueRepo

logger = logging.getLogger(__name__)


class DurableKeyValueStore:
    """
    Key-value storage on top of the SQL database.

    Every call opens its own session; `set` commits before returning so that a
    reload at any point sees the latest value. The engine is created lazily on
    first use by `async_session_maker`.
    """

    def __init__(self, session_maker: Callable[[], AsyncSession] = async_session_maker):
        self._session_maker = session_maker

    async def get(self, key: str) -> Optional[str]:
        async with self._session_maker() as session:
            return await KeyValueRepo(session).get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._session_maker() as session:
            await KeyValueRepo(session).set(key, value)
            await session.commit()
        logger.debug("Stored key=%s (%d chars)", key, len(value))

    async def keys(self) -> list[str]:
        async with self._session_maker() as session:
            return await KeyValueRepo(session).keys()
