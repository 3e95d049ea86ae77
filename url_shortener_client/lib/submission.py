"""Submission of the shorten form to the remote API."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .api_client import ShortenerAPIClient, ShortenerAPIError
from .common.logging_config import log_event
from .common.url_builder import build_short_url
from .common.validators import parse_duration, validate_entry
from .entries import EntryForm
from .models import (
    LONG_URL,
    Notice,
    ShortenResult,
    UrlEntry,
)
from .result_store import ResultStore
from .storage.base import StorageError


@dataclass
class SubmissionOutcome:
    """What happened to one form submission."""

    results: List[ShortenResult] = field(default_factory=list)
    failures: Dict[int, str] = field(default_factory=dict)
    skipped: List[int] = field(default_factory=list)
    validation_failed: bool = False

    @property
    def succeeded(self) -> bool:
        """True if at least one entry was sent and none failed or was skipped."""
        return bool(self.results) and not self.failures and not self.skipped


def is_blank_entry(entry: UrlEntry, default_validity: int) -> bool:
    """True if the user has not touched the entry.

    An entry is blank when its URL and shortcode are empty and its validity is
    empty or still the default.
    """
    if entry.long_url.strip() or entry.custom_shortcode.strip():
        return False

    validity = entry.validity_minutes
    if isinstance(validity, str) and not validity.strip():
        return True
    return parse_duration(validity) == default_validity


def request_validity(entry: UrlEntry, default_validity: int) -> Union[int, float]:
    """Validity in minutes to send for an already validated entry."""
    number = parse_duration(entry.validity_minutes)
    if number is None:
        return default_validity
    return int(number) if number.is_integer() else number


class SubmissionCoordinator:
    """Validates the form and shortens its entries one request at a time."""

    def __init__(
        self,
        api_client: ShortenerAPIClient,
        result_store: ResultStore,
        short_link_base_url: str,
        path_prefix: str = "",
        stop_on_first_error: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the coordinator.

        Args:
            api_client: Client for the shortening API
            result_store: Where successful results are persisted
            short_link_base_url: Base URL of the displayed short links
            path_prefix: Optional path prefix of the displayed short links
            stop_on_first_error: Leave the remaining entries unsent after the
                first failed request instead of continuing with them
            logger: Optional logger
        """
        self.api_client = api_client
        self.result_store = result_store
        self.short_link_base_url = short_link_base_url
        self.path_prefix = path_prefix
        self.stop_on_first_error = stop_on_first_error
        self.logger = logger or logging.getLogger(__name__)

    async def submit(self, form: EntryForm) -> SubmissionOutcome:
        """Submit every non-blank entry of the form.

        Blank entries are ignored. If any remaining entry is invalid nothing
        is sent and all errors are recorded on the form. Otherwise entries are
        shortened strictly in order, one request in flight at a time. Results
        obtained are persisted even if a later entry fails, since they already
        exist remotely.

        On full success the form is reset to a single blank entry. Otherwise
        failed and unsent entries stay in the form, with the API message on
        each failed entry's URL field.

        Args:
            form: The form to submit; updated in place

        Returns:
            SubmissionOutcome with results and per-entry failures
        """
        outcome = SubmissionOutcome()
        form.notice = None
        form.errors = {}
        log_event(self.logger, "SHORTEN_REQUEST_INITIATED", numUrls=len(form.entries))

        to_process = [e for e in form.entries if not is_blank_entry(e, form.default_validity)]

        if not to_process:
            form.notice = Notice.error("Please enter at least one URL to shorten.")
            self.logger.warning("Shorten request aborted: No URLs provided after filtering empty rows.")
            return outcome

        for entry in to_process:
            for field_name, message in validate_entry(entry).items():
                form.errors[(entry.id, field_name)] = message

        if form.errors:
            outcome.validation_failed = True
            form.notice = Notice.error("Please correct the errors in the form.")
            self.logger.error(f"Shorten request aborted: Client-side validation failed: {form.errors}")
            return outcome

        first_error: Optional[str] = None

        for index, entry in enumerate(to_process):
            try:
                result = await self._shorten_entry(entry, form.default_validity)
            except ShortenerAPIError as e:
                self.logger.error(f"Error shortening {entry.long_url}: {e.message}")
                outcome.failures[entry.id] = e.message
                form.errors[(entry.id, LONG_URL)] = e.message
                first_error = first_error or e.message
                if self.stop_on_first_error:
                    outcome.skipped = [pending.id for pending in to_process[index + 1:]]
                    break
                continue

            outcome.results.append(result)

        if outcome.results:
            try:
                await self.result_store.append(outcome.results)
            except StorageError as e:
                self.logger.error(f"Failed to persist shortened URLs: {e}")
                form.notice = Notice.error(f"URLs were shortened but could not be saved: {e}")
                form.keep_only(list(outcome.failures) + outcome.skipped)
                return outcome
            log_event(
                self.logger,
                "URL_SHORTENED_PERSISTED",
                newUrls=[r.shortened_url for r in outcome.results],
            )

        if outcome.succeeded:
            form.notice = Notice.success("URLs shortened successfully!")
            log_event(self.logger, "SHORTEN_REQUEST_SUCCESS", count=len(outcome.results))
            form.reset()
        else:
            form.notice = Notice.error(f"Error shortening URLs: {first_error}")
            form.keep_only(list(outcome.failures) + outcome.skipped)

        return outcome

    async def _shorten_entry(self, entry: UrlEntry, default_validity: int) -> ShortenResult:
        long_url = entry.long_url.strip()
        custom_shortcode = entry.custom_shortcode.strip() or None
        validity = request_validity(entry, default_validity)

        self.logger.info(f"Sending single shorten request for {long_url}")
        response = await self.api_client.shorten(
            long_url,
            validity_minutes=validity,
            custom_shortcode=custom_shortcode,
        )

        return ShortenResult(
            original_url=long_url,
            shortened_url=build_short_url(
                short_code=response["shortcode"],
                base_url=self.short_link_base_url,
                path_prefix=self.path_prefix,
            ),
            shortcode=response["shortcode"],
            expiry_time=response.get("expiryTime"),
        )
