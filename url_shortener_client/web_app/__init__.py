"""Web application for the URL shortener client."""

from .app_factory import create_app, attach_services

__all__ = ["create_app", "attach_services"]
