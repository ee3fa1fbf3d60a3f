from typing import Optional, Protocol

# Keys kept compatible with the browser client's localStorage layout.
TIMETABLE_KEY = "timetable"
PROVISIONED_KEY = "createdMaterials"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...
