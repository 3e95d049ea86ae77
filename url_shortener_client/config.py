"""Configuration management for the URL shortener client."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

from .lib.storage import STORE_BACKENDS


class Config(BaseSettings):
    """Application configuration."""

    # Remote shortening API
    api_base_url: str = Field(
        default="http://20.244.56.144/evaluation-service",
        description="Base URL of the remote shortening API"
    )

    client_id: Optional[str] = Field(
        default=None,
        description="Value sent in the client-id header"
    )

    client_secret: Optional[str] = Field(
        default=None,
        description="Value sent in the client-secret header"
    )

    api_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for each API request"
    )

    # Short link display
    short_link_base_url: str = Field(
        default="http://localhost:9200",
        description="Base URL used to build the displayed short links"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short links (e.g., '/s' for /s/abc123)"
    )

    # Form behaviour
    max_entries: int = Field(
        default=5,
        ge=1,
        description="Maximum number of URLs submitted at once"
    )

    default_validity_minutes: int = Field(
        default=30,
        ge=1,
        description="Validity prefilled in new entries and sent for blank ones"
    )

    stop_on_first_error: bool = Field(
        default=False,
        description="Stop a submission at the first failed request instead of continuing"
    )

    # Persistence
    store_backend: str = Field(
        default="json",
        description="Key-value store backend: json, redis or memory"
    )

    store_path: str = Field(
        default="data/local_storage.json",
        description="JSON file used by the json store backend"
    )

    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for the redis store backend"
    )

    results_key: str = Field(
        default="shortenedUrls",
        description="Store key holding the list of shortened URLs"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=9200,
        description="Port to listen on"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("store_backend")
    @classmethod
    def check_store_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in STORE_BACKENDS:
            raise ValueError(f"store_backend must be one of {', '.join(STORE_BACKENDS)}")
        return value


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
