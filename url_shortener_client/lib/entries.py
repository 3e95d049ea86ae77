"""Editable list of URL entries behind the shorten form."""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .common.validators import validate_field
from .models import (
    DEFAULT_VALIDITY_MINUTES,
    ENTRY_FIELDS,
    Notice,
    UrlEntry,
)

MAX_URL_INPUTS = 5

ErrorKey = Tuple[int, str]


class UnknownEntryError(KeyError):
    """Raised when an entry id is not in the form."""


class EntryForm:
    """Ordered list of 1 to max_entries URL entries with live validation.

    Holds the per-field validation errors and the single notice shown to the
    user. The entry list is never empty and never longer than max_entries.
    """

    def __init__(
        self,
        max_entries: int = MAX_URL_INPUTS,
        default_validity: int = DEFAULT_VALIDITY_MINUTES,
        next_id: int = 0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize a form with one blank entry.

        Args:
            max_entries: Maximum number of entries
            default_validity: Validity prefilled in new entries
            next_id: First id to hand out
            logger: Optional logger
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.max_entries = max_entries
        self.default_validity = default_validity
        self.logger = logger or logging.getLogger(__name__)
        self._next_id = next_id
        self.entries: List[UrlEntry] = [self._new_entry()]
        self.errors: Dict[ErrorKey, str] = {}
        self.notice: Optional[Notice] = None

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, str]],
        next_id: int,
        max_entries: int = MAX_URL_INPUTS,
        default_validity: int = DEFAULT_VALIDITY_MINUTES,
        logger: Optional[logging.Logger] = None,
    ) -> "EntryForm":
        """Rebuild a form from posted rows, validating every field as if typed.

        Each row maps "id" and the entry field names to raw values. Rows past
        max_entries are dropped; with no rows the form holds one blank entry.

        Raises:
            ValueError: If a row id is not an integer or appears twice
        """
        form = cls(max_entries=max_entries, default_validity=default_validity, next_id=next_id, logger=logger)
        entries = []

        for row in list(rows)[:max_entries]:
            entry_id = int(row["id"])
            if any(e.id == entry_id for e in entries):
                raise ValueError(f"Duplicate entry id {entry_id}")
            entries.append(UrlEntry(
                id=entry_id,
                long_url=row.get("long_url", ""),
                validity_minutes=row.get("validity_minutes", ""),
                custom_shortcode=row.get("custom_shortcode", ""),
            ))

        if entries:
            form.entries = entries
            seen_max = max(e.id for e in entries)
            form._next_id = max(next_id, seen_max + 1)
            for entry in entries:
                for field in ENTRY_FIELDS:
                    form._validate_live(entry, field)

        return form

    def _new_entry(self) -> UrlEntry:
        entry = UrlEntry(id=self._next_id, validity_minutes=str(self.default_validity))
        self._next_id += 1
        return entry

    @property
    def next_id(self) -> int:
        """Id the next added entry will get."""
        return self._next_id

    def get_entry(self, entry_id: int) -> UrlEntry:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise UnknownEntryError(entry_id)

    def error_for(self, entry_id: int, field: str) -> Optional[str]:
        return self.errors.get((entry_id, field))

    def add_entry(self) -> Optional[UrlEntry]:
        """Append a blank entry.

        At capacity nothing is added and an informational notice is set.

        Returns:
            The new entry, or None at capacity
        """
        self.logger.debug("add_entry called")
        if len(self.entries) >= self.max_entries:
            self.notice = Notice.info(f"You can only shorten up to {self.max_entries} URLs at a time.")
            self.logger.warning(f"Attempted to add more than {self.max_entries} URL input fields.")
            return None

        entry = self._new_entry()
        self.entries.append(entry)
        self.notice = None
        self.logger.debug(f"Added a new URL input field. Total: {len(self.entries)}")
        return entry

    def remove_entry(self, entry_id: int) -> bool:
        """Remove an entry and its validation errors.

        The last remaining entry cannot be removed; an error notice is set
        instead.

        Returns:
            True if the entry was removed

        Raises:
            UnknownEntryError: If no entry has this id
        """
        entry = self.get_entry(entry_id)

        if len(self.entries) <= 1:
            self.notice = Notice.error("At least one URL input field is required.")
            self.logger.warning("Attempted to remove the last URL input field.")
            return False

        self.entries.remove(entry)
        self.errors = {key: msg for key, msg in self.errors.items() if key[0] != entry_id}
        self.notice = None
        self.logger.debug(f"Removed URL input field with ID {entry_id}. Total: {len(self.entries)}")
        return True

    def update_field(self, entry_id: int, field: str, value: str) -> Optional[str]:
        """Replace one field value and re-validate that field only.

        Returns:
            The field's error message, or None if valid

        Raises:
            UnknownEntryError: If no entry has this id
            KeyError: If the field name is unknown
        """
        if field not in ENTRY_FIELDS:
            raise KeyError(field)

        entry = self.get_entry(entry_id)
        setattr(entry, field, value)
        return self._validate_live(entry, field)

    def _validate_live(self, entry: UrlEntry, field: str) -> Optional[str]:
        error = validate_field(field, getattr(entry, field))
        key = (entry.id, field)
        if error:
            self.errors[key] = error
        else:
            self.errors.pop(key, None)
        return error

    def keep_only(self, entry_ids: Iterable[int]) -> None:
        """Drop every entry not listed, keeping order; resets if none are left."""
        wanted = set(entry_ids)
        remaining = [e for e in self.entries if e.id in wanted]
        if not remaining:
            self.reset()
            return
        self.entries = remaining
        self.errors = {key: msg for key, msg in self.errors.items() if key[0] in wanted}

    def reset(self) -> None:
        """Back to a single blank entry with no errors."""
        self.entries = [self._new_entry()]
        self.errors = {}
