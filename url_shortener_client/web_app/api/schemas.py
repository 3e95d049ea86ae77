"""Pydantic schemas for the JSON API."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from url_shortener_client.lib.models import ENTRY_FIELDS


class ValidateFieldRequest(BaseModel):
    """Request model for live validation of one form field."""

    field: str = Field(..., description="Entry field name", examples=["long_url"])
    value: Union[str, int, float, None] = Field(None, description="Current field value")

    @field_validator("field")
    @classmethod
    def check_field(cls, value: str) -> str:
        if value not in ENTRY_FIELDS:
            raise ValueError(f"field must be one of {', '.join(ENTRY_FIELDS)}")
        return value


class ValidateFieldResponse(BaseModel):
    """Result of live validation."""

    field: str
    valid: bool
    message: Optional[str] = None


class ShortenResultResponse(BaseModel):
    """A persisted shortened URL."""

    original_url: str
    shortened_url: str
    shortcode: str
    expiry_time: Optional[str] = None


class ResultListResponse(BaseModel):
    """All persisted shortened URLs."""

    count: int
    results: List[ShortenResultResponse]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Key-value store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
