"""Middleware for the URL shortener client web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
