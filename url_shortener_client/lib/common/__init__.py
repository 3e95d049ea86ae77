"""Common utilities for the URL shortener client."""

from .validators import (
    is_valid_url,
    is_valid_duration,
    is_valid_shortcode,
    validate_field,
    validate_entry,
)
from .url_builder import build_short_url, build_api_url
from .logging_config import setup_logging, get_logger, log_event

__all__ = [
    "is_valid_url",
    "is_valid_duration",
    "is_valid_shortcode",
    "validate_field",
    "validate_entry",
    "build_short_url",
    "build_api_url",
    "setup_logging",
    "get_logger",
    "log_event",
]
