"""In-memory key-value store."""

from typing import Dict, Optional

from .base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Process-local store; state is lost on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None
