"""Pytest configuration and fixtures."""

import json
from typing import AsyncGenerator, Dict, List, Optional

import httpx
import pytest

from url_shortener_client.config import Config
from url_shortener_client.lib.api_client import ShortenerAPIClient
from url_shortener_client.lib.common.logging_config import setup_logging
from url_shortener_client.lib.entries import EntryForm
from url_shortener_client.lib.result_store import ResultStore
from url_shortener_client.lib.statistics import StatisticsViewer
from url_shortener_client.lib.storage.memory import MemoryStore
from url_shortener_client.lib.submission import SubmissionCoordinator

API_BASE_URL = "http://api.test/evaluation-service"
LINK_BASE_URL = "http://links.test"


class FakeShortenerAPI:
    """In-process stand-in for the remote shortening API."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.shortened: List[Dict] = []
        self.clicks: Dict[str, object] = {}
        self.failing_urls: Dict[str, tuple] = {}
        self.failing_click_codes: Dict[str, int] = {}
        self.expiry_time: object = "2026-10-18T12:30:00Z"
        self._counter = 0

    def fail_url(self, long_url: str, status_code: int = 409, message: Optional[str] = "shortcode collision"):
        self.failing_urls[long_url] = (status_code, message)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.replace("/evaluation-service", "", 1)

        if request.method == "POST" and path == "/shorten":
            body = json.loads(request.content)
            if body["longUrl"] in self.failing_urls:
                status_code, message = self.failing_urls[body["longUrl"]]
                payload = {"message": message} if message else {}
                return httpx.Response(status_code, json=payload)
            shortcode = body.get("customShortcode")
            if not shortcode:
                self._counter += 1
                shortcode = f"gen{self._counter:03d}"
            self.shortened.append(body)
            return httpx.Response(
                201,
                json={"shortcode": shortcode, "expiryTime": self.expiry_time},
            )

        if request.method == "GET" and path.startswith("/shorten/") and path.endswith("/clicks"):
            shortcode = path[len("/shorten/"):-len("/clicks")]
            if shortcode in self.failing_click_codes:
                return httpx.Response(self.failing_click_codes[shortcode], json={"message": "clicks unavailable"})
            return httpx.Response(200, json=self.clicks.get(shortcode, []))

        return httpx.Response(404, json={"message": "not found"})

    @property
    def shorten_requests(self) -> List[Dict]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def fake_api() -> FakeShortenerAPI:
    return FakeShortenerAPI()


@pytest.fixture
async def api_client(fake_api, logger) -> AsyncGenerator[ShortenerAPIClient, None]:
    """API client wired to the fake API."""
    client = ShortenerAPIClient(
        base_url=API_BASE_URL,
        client_id="test-client",
        client_secret="test-secret",
        logger=logger,
        transport=httpx.MockTransport(fake_api.handler),
    )

    yield client

    await client.close()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def result_store(memory_store, logger) -> ResultStore:
    return ResultStore(memory_store, logger=logger)


@pytest.fixture
def form(logger) -> EntryForm:
    return EntryForm(logger=logger)


@pytest.fixture
def coordinator(api_client, result_store, logger) -> SubmissionCoordinator:
    return SubmissionCoordinator(
        api_client=api_client,
        result_store=result_store,
        short_link_base_url=LINK_BASE_URL,
        logger=logger,
    )


@pytest.fixture
def viewer(api_client, result_store, logger) -> StatisticsViewer:
    return StatisticsViewer(api_client=api_client, result_store=result_store, logger=logger)


@pytest.fixture
def config() -> Config:
    return Config(
        api_base_url=API_BASE_URL,
        short_link_base_url=LINK_BASE_URL,
        store_backend="memory",
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
