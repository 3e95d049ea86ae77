"""Abstract base class for key-value store implementations."""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Raised when a key-value backend cannot be read or written."""


class KeyValueStore(ABC):
    """Flat string key-value store holding the client's persisted state.

    Values are opaque strings; callers own their serialization.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get the value stored under a key.

        Args:
            key: The key to look up

        Returns:
            The stored value, or None if the key is not set

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value.

        Raises:
            StorageError: If the backend cannot be written
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key.

        Returns:
            True if the key existed
        """
        pass

    async def close(self) -> None:
        """Release backend resources."""

    async def health_check(self) -> bool:
        """Check whether the backend can be read.

        Returns:
            True if healthy, False otherwise
        """
        try:
            await self.get("__health__")
            return True
        except StorageError:
            return False
