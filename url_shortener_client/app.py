#!/usr/bin/env python3
"""
Main entry point for the URL shortener client.

Usage:
    url-shortener-client
    python -m url_shortener_client.app

Environment variables:
    API_BASE_URL - Base URL of the remote shortening API
    CLIENT_ID / CLIENT_SECRET - Credentials sent with each API request
    SHORT_LINK_BASE_URL - Base URL of the displayed short links
    STORE_BACKEND - json, redis or memory
    STORE_PATH - JSON file for the json backend
    REDIS_URL - Redis connection URL for the redis backend
    STOP_ON_FIRST_ERROR - Stop a submission at the first failed request
    PORT - Port to listen on
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .config import load_config
from .lib.api_client import ShortenerAPIClient
from .lib.result_store import ResultStore
from .lib.storage import open_store
from .lib.common.logging_config import setup_logging, log_event
from .web_app import create_app, attach_services


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener client...")

    store = await open_store(
        config.store_backend,
        store_path=config.store_path,
        redis_url=config.redis_url,
        logger=logger,
    )

    api_client = ShortenerAPIClient(
        base_url=config.api_base_url,
        client_id=config.client_id,
        client_secret=config.client_secret,
        timeout=config.api_timeout_seconds,
        logger=logger,
    )

    result_store = ResultStore(store, key=config.results_key, logger=logger)
    attach_services(app, api_client, result_store)

    log_event(logger, "APP_START", message="Application has started successfully.")

    yield

    logger.info("Shutting down URL shortener client...")
    await api_client.close()
    await store.close()
    logger.info("Client stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Client")
    logger.info(f"Configuration: {config.model_dump(exclude={'client_secret'})}")

    # Services are created in lifespan
    app = create_app(
        api_client=None,
        result_store=None,
        config=config,
        logger=logger,
    )
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
