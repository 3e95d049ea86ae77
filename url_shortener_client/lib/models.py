"""Data models for the URL shortener client."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# UrlEntry field names, also used as form field names and error keys
LONG_URL = "long_url"
VALIDITY_MINUTES = "validity_minutes"
CUSTOM_SHORTCODE = "custom_shortcode"

ENTRY_FIELDS = (LONG_URL, VALIDITY_MINUTES, CUSTOM_SHORTCODE)

DEFAULT_VALIDITY_MINUTES = 30


def _text(value: Any, default: Optional[str] = "") -> Optional[str]:
    """Stored or API value as a string; missing and empty values give default."""
    if value is None or value == "":
        return default
    return str(value)


@dataclass
class UrlEntry:
    """One editable row of the shorten form."""

    id: int
    long_url: str = ""
    validity_minutes: str = str(DEFAULT_VALIDITY_MINUTES)
    custom_shortcode: str = ""


@dataclass(frozen=True)
class ShortenResult:
    """A URL shortened by the remote API."""

    original_url: str
    shortened_url: str
    shortcode: str
    expiry_time: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to the persisted record layout."""
        return {
            "originalUrl": self.original_url,
            "shortenedUrl": self.shortened_url,
            "shortcode": self.shortcode,
            "expiryTime": self.expiry_time,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShortenResult":
        """Create from a persisted record."""
        return cls(
            original_url=_text(data.get("originalUrl")),
            shortened_url=_text(data.get("shortenedUrl")),
            shortcode=_text(data.get("shortcode")),
            expiry_time=_text(data.get("expiryTime"), None),
        )


@dataclass(frozen=True)
class ClickDetail:
    """A single recorded access of a short link."""

    timestamp: Optional[str]
    source: Optional[str] = None
    geo_location: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClickDetail":
        """Create from an API click record, accepting the common key spellings."""
        geo = data.get("geo_location") or data.get("geoLocation") or data.get("geo")
        return cls(
            timestamp=_text(data.get("timestamp"), None),
            source=_text(data.get("source"), None),
            geo_location=_text(geo, None),
        )


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """The single user-facing message shown above the form."""

    level: NoticeLevel
    text: str

    @classmethod
    def info(cls, text: str) -> "Notice":
        return cls(NoticeLevel.INFO, text)

    @classmethod
    def success(cls, text: str) -> "Notice":
        return cls(NoticeLevel.SUCCESS, text)

    @classmethod
    def error(cls, text: str) -> "Notice":
        return cls(NoticeLevel.ERROR, text)


@dataclass
class UrlStatistics:
    """A persisted result together with its click data."""

    result: ShortenResult
    click_count: int = 0
    clicks: List[ClickDetail] = field(default_factory=list)
    error: Optional[str] = None


class PageState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    LOADED = "loaded"
