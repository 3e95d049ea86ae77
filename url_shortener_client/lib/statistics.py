"""Click statistics for the persisted short links."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from .api_client import ShortenerAPIClient, ShortenerAPIError
from .common.logging_config import log_event
from .models import PageState, ShortenResult, UrlStatistics
from .result_store import ResultStore
from .storage.base import StorageError


@dataclass
class StatisticsPage:
    """View model of the statistics page.

    state moves from LOADING to exactly one of ERROR, EMPTY or LOADED and
    stays there; a reload builds a new page.
    """

    state: PageState = PageState.LOADING
    rows: List[UrlStatistics] = field(default_factory=list)
    error: Optional[str] = None
    expanded: Set[str] = field(default_factory=set)

    def is_expanded(self, shortcode: str) -> bool:
        return shortcode in self.expanded

    def toggle_expanded(self, shortcode: str) -> bool:
        """Flip the click-details toggle of one row.

        Returns:
            The new expanded state
        """
        if shortcode in self.expanded:
            self.expanded.discard(shortcode)
            return False
        self.expanded.add(shortcode)
        return True

    def expanded_after_toggle(self, shortcode: str) -> List[str]:
        """Expanded shortcodes as they would be after toggling one row."""
        return sorted(self.expanded ^ {shortcode})

    @property
    def total_clicks(self) -> int:
        return sum(row.click_count for row in self.rows)


class StatisticsViewer:
    """Loads persisted results and their click details."""

    def __init__(
        self,
        api_client: ShortenerAPIClient,
        result_store: ResultStore,
        logger: Optional[logging.Logger] = None,
    ):
        self.api_client = api_client
        self.result_store = result_store
        self.logger = logger or logging.getLogger(__name__)

    async def load(self, expanded: Iterable[str] = ()) -> StatisticsPage:
        """Build the statistics page.

        With no persisted results no request is made. Otherwise click details
        for all results are fetched concurrently; each fetch fails on its own
        without affecting the other rows.

        Args:
            expanded: Shortcodes whose click details are shown

        Returns:
            StatisticsPage in the ERROR, EMPTY or LOADED state
        """
        page = StatisticsPage(expanded=set(expanded))
        log_event(self.logger, "STATISTICS_PAGE_LOAD", message="Fetching URL statistics.")

        try:
            results = await self.result_store.load()
        except StorageError as e:
            page.state = PageState.ERROR
            page.error = f"Failed to load statistics: {e}"
            self.logger.error(f"Error fetching statistics: {e}")
            log_event(self.logger, "STATISTICS_FETCH_ERROR", errorMessage=str(e))
            return page

        if not results:
            page.state = PageState.EMPTY
            self.logger.info("No URLs found in the store to fetch statistics for.")
            return page

        page.rows = list(await asyncio.gather(*(self._load_row(r) for r in results)))
        page.state = PageState.LOADED
        log_event(self.logger, "STATISTICS_FETCH_SUCCESS", count=len(page.rows))
        return page

    async def _load_row(self, result: ShortenResult) -> UrlStatistics:
        if not result.shortcode:
            self.logger.warning(f"Shortcode missing for URL: {result.shortened_url}. Cannot fetch clicks.")
            return UrlStatistics(result=result)

        try:
            clicks = await self.api_client.get_clicks(result.shortcode)
        except ShortenerAPIError as e:
            self.logger.error(f"Failed to fetch click data for {result.shortened_url}: {e.message}")
            return UrlStatistics(result=result, error=e.message)

        self.logger.debug(f"Click data for {result.shortcode}: {len(clicks)} click(s)")
        return UrlStatistics(result=result, click_count=len(clicks), clicks=clicks)
