"""JSON file key-value store."""

import asyncio
import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from .base import KeyValueStore, StorageError


class JSONFileStore(KeyValueStore):
    """Key-value store kept as a single JSON object on disk.

    Every operation reads the whole file and every write replaces it, the
    same way browser local storage is used by the form page.
    """

    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        """Initialize the store.

        Args:
            path: Path of the JSON file (created on first write)
            logger: Optional logger instance
        """
        self.path = path
        self.logger = logger or logging.getLogger(__name__)

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt store file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Corrupt store file {self.path}: expected a JSON object")

        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".store-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def _get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Value under '{key}' in {self.path} is not a string")
        return value

    def _set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)
        self.logger.debug(f"Stored {len(value)} bytes under '{key}' in {self.path}")

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, key)
