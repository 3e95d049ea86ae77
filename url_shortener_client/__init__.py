"""Web client for batch URL shortening with click statistics."""

__version__ = "1.0.0"
