"""HTML pages of the URL shortener client."""

from .routes import router as web_router

__all__ = ["web_router"]
