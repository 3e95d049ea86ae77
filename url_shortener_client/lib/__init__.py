"""Core logic of the URL shortener client."""

from .entries import EntryForm, UnknownEntryError
from .api_client import ShortenerAPIClient, ShortenerAPIError
from .result_store import ResultStore
from .submission import SubmissionCoordinator, SubmissionOutcome
from .statistics import StatisticsViewer, StatisticsPage

__all__ = [
    "EntryForm",
    "UnknownEntryError",
    "ShortenerAPIClient",
    "ShortenerAPIError",
    "ResultStore",
    "SubmissionCoordinator",
    "SubmissionOutcome",
    "StatisticsViewer",
    "StatisticsPage",
]
