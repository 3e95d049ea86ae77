"""Persisted list of shortened URLs."""

import json
import logging
from typing import Iterable, List, Optional

from .models import ShortenResult
from .storage.base import KeyValueStore

DEFAULT_RESULTS_KEY = "shortenedUrls"


class ResultStore:
    """Append-only repository of ShortenResult records under a single store key.

    The list is read and written wholesale. There is no locking: two writers
    appending at the same time can drop one another's records.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_RESULTS_KEY,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the repository.

        Args:
            store: Backend holding the serialized list
            key: Store key of the list
            logger: Optional logger
        """
        self.store = store
        self.key = key
        self.logger = logger or logging.getLogger(__name__)

    async def load(self) -> List[ShortenResult]:
        """Load all persisted results in append order.

        A missing key, unparseable JSON or a non-list value reads as an empty
        list. Records that are not JSON objects are skipped.

        Raises:
            StorageError: If the backend cannot be read
        """
        raw = await self.store.get(self.key)
        if not raw:
            return []

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            self.logger.warning(f"Ignoring unreadable result list under '{self.key}': {e}")
            return []

        if not isinstance(records, list):
            self.logger.warning(f"Ignoring result list under '{self.key}': not a JSON array")
            return []

        results = []
        for record in records:
            if not isinstance(record, dict):
                self.logger.warning(f"Skipping malformed result record: {record!r}")
                continue
            results.append(ShortenResult.from_dict(record))

        return results

    async def append(self, results: Iterable[ShortenResult]) -> List[ShortenResult]:
        """Append results to the persisted list.

        Args:
            results: Newly shortened URLs

        Returns:
            The combined list as written

        Raises:
            StorageError: If the backend cannot be read or written
        """
        new_results = list(results)
        combined = await self.load() + new_results
        await self.store.set(self.key, json.dumps([r.to_dict() for r in combined]))
        self.logger.info(f"Persisted {len(new_results)} new result(s); {len(combined)} total")
        return combined

    async def count(self) -> int:
        """Number of persisted results."""
        return len(await self.load())
