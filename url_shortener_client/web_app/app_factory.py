"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI

from url_shortener_client.lib.api_client import ShortenerAPIClient
from url_shortener_client.lib.result_store import ResultStore
from url_shortener_client.lib.statistics import StatisticsViewer
from url_shortener_client.lib.submission import SubmissionCoordinator
from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


def create_app(
    api_client: Optional[ShortenerAPIClient],
    result_store: Optional[ResultStore],
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    The API client and result store may be None when they are created later
    by a lifespan handler; attach_services() then wires them in.

    Args:
        api_client: Client for the remote shortening API
        result_store: Repository of persisted results
        config: Configuration instance
        logger: Optional logger

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener Client",
        description="Shorten up to five URLs at a time and follow their clicks",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.config = config
    app.state.logger = logger or logging.getLogger("url_shortener_client")
    attach_services(app, api_client, result_store)

    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app


def attach_services(
    app: FastAPI,
    api_client: Optional[ShortenerAPIClient],
    result_store: Optional[ResultStore],
) -> None:
    """Build the submission and statistics services and store them in app state."""
    config = app.state.config
    logger = app.state.logger

    app.state.api_client = api_client
    app.state.result_store = result_store

    if api_client is None or result_store is None:
        app.state.submission = None
        app.state.statistics = None
        return

    app.state.submission = SubmissionCoordinator(
        api_client=api_client,
        result_store=result_store,
        short_link_base_url=config.short_link_base_url,
        path_prefix=config.path_prefix,
        stop_on_first_error=config.stop_on_first_error,
        logger=logger,
    )
    app.state.statistics = StatisticsViewer(
        api_client=api_client,
        result_store=result_store,
        logger=logger,
    )
