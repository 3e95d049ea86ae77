"""Validation utilities for the URL shortener form."""

import math
import re
from urllib.parse import urlsplit
from typing import Dict, Optional, Union

from ..models import UrlEntry, LONG_URL, VALIDITY_MINUTES, CUSTOM_SHORTCODE


SHORTCODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{4,16}$")

# RFC 3986 scheme syntax
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")

# Schemes that must carry a host, as in the WHATWG "special" schemes
NETWORK_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

INVALID_URL_MESSAGE = "Invalid URL format (e.g., https://example.com)."
EMPTY_URL_MESSAGE = "Original URL cannot be empty."
INVALID_VALIDITY_MESSAGE = "Validity must be a positive number of minutes."
INVALID_SHORTCODE_MESSAGE = "Shortcode must be 4-16 alphanumeric, hyphens, or underscores."

FIELD_MESSAGES = {
    LONG_URL: INVALID_URL_MESSAGE,
    VALIDITY_MINUTES: INVALID_VALIDITY_MESSAGE,
    CUSTOM_SHORTCODE: INVALID_SHORTCODE_MESSAGE,
}


def is_valid_url(url: str) -> bool:
    """Check whether a string parses as an absolute URL.

    Args:
        url: The URL to validate

    Returns:
        True if the URL has a valid scheme and, for network schemes,
        a host with a valid port
    """
    if not url or not isinstance(url, str):
        return False

    url = url.strip()
    if not url or any(ch.isspace() for ch in url):
        return False

    try:
        result = urlsplit(url)
        if not result.scheme or not _SCHEME_PATTERN.match(result.scheme):
            return False

        if result.scheme.lower() in NETWORK_SCHEMES:
            # .port raises ValueError for out-of-range or non-numeric ports
            result.port
            return bool(result.hostname)

        return bool(result.netloc or result.path)

    except ValueError:
        return False


def parse_duration(value: Union[str, int, float, None]) -> Optional[float]:
    """Parse a validity duration into a number, or None if it is not numeric."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None

    return number if math.isfinite(number) else None


def is_valid_duration(value: Union[str, int, float, None]) -> bool:
    """Check whether a duration parses to a number greater than zero."""
    number = parse_duration(value)
    return number is not None and number > 0


def is_valid_shortcode(shortcode: Optional[str]) -> bool:
    """Check an optional custom shortcode.

    Args:
        shortcode: The shortcode to validate; empty means "not provided"

    Returns:
        True if empty or matching the 4-16 character pattern
    """
    if not shortcode:
        return True
    if not isinstance(shortcode, str):
        return False
    return bool(SHORTCODE_PATTERN.match(shortcode))


_FIELD_CHECKS = {
    LONG_URL: is_valid_url,
    VALIDITY_MINUTES: is_valid_duration,
    CUSTOM_SHORTCODE: is_valid_shortcode,
}


def validate_field(field: str, value) -> Optional[str]:
    """Validate one field value as it is being edited.

    Empty values are not reported here; a missing URL is only an error
    once the entry is submitted.

    Args:
        field: One of the UrlEntry field names
        value: The raw field value

    Returns:
        Error message, or None if the value is acceptable

    Raises:
        KeyError: If the field name is unknown
    """
    check = _FIELD_CHECKS[field]
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    # Numbers from JSON clients are checked as the text a user would type
    if not isinstance(value, str) and field != VALIDITY_MINUTES:
        value = str(value)
    if check(value.strip() if isinstance(value, str) else value):
        return None
    return FIELD_MESSAGES[field]


def validate_entry(entry: UrlEntry) -> Dict[str, str]:
    """Validate a whole entry for submission.

    Applies the same per-field rules as live validation, and additionally
    requires a URL.

    Returns:
        Mapping of field name to error message (empty if valid)
    """
    errors = {}

    for field in (LONG_URL, VALIDITY_MINUTES, CUSTOM_SHORTCODE):
        error = validate_field(field, getattr(entry, field))
        if error:
            errors[field] = error

    if not entry.long_url.strip():
        errors[LONG_URL] = EMPTY_URL_MESSAGE

    return errors
