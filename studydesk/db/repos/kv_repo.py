from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from studydesk.db.models import KeyValue
from datetime import datetime

class KeyValueRepo:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> str | None:
        stmt = select(KeyValue.value).where(KeyValue.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set(self, key: str, value: str):
        """Upsert by key. Commit is left to the caller."""
        now = datetime.now().isoformat()
        stmt = sqlite_insert(KeyValue).values(key=key, value=value, updated_at=now).on_conflict_do_update(
            index_elements=["key"],
            set_={"value": value, "updated_at": now},
        )
        await self.session.execute(stmt)

    async def keys(self) -> list[str]:
        stmt = select(KeyValue.key).order_by(KeyValue.key)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
