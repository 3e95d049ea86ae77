"""Async client for the remote shortening API."""

import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx

from .common.logging_config import log_event
from .common.url_builder import build_api_url
from .models import ClickDetail


class ShortenerAPIError(Exception):
    """A shortening API call failed.

    The message is what users see: the API's own error message when it sent
    one, otherwise a status- or transport-derived description.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ShortenerAPIClient:
    """Client for the shorten and click-detail endpoints."""

    def __init__(
        self,
        base_url: str,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: float = 10.0,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize API client.

        Args:
            base_url: Base URL of the shortening API
            client_id: Value of the client-id header
            client_secret: Value of the client-secret header
            timeout: Request timeout in seconds
            logger: Optional logger
            transport: Optional httpx transport (used to stub the API in tests)
        """
        self.base_url = base_url
        self.logger = logger or logging.getLogger(__name__)

        if not client_id or not client_secret:
            self.logger.error(
                "API credentials (client_id or client_secret) are missing. "
                "Set CLIENT_ID and CLIENT_SECRET in the environment or .env file."
            )

        headers = {"Content-Type": "application/json"}
        if client_id:
            headers["client-id"] = client_id
        if client_secret:
            headers["client-secret"] = client_secret

        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def _call(
        self,
        method: str,
        endpoint: str,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ShortenerAPIError: On transport errors, non-2xx responses or a
                success response that is not JSON
        """
        url = build_api_url(self.base_url, endpoint)
        self.logger.info(f"Attempting API call: {method} {url}")
        log_event(self.logger, "API_CALL_ATTEMPT", url=url, method=method, bodySent=json_body is not None)

        try:
            response = await self.client.request(method, url, json=json_body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            message = str(e) or e.__class__.__name__
            self.logger.error(f"Network or unexpected error during API call to {url}: {message}")
            log_event(self.logger, "API_CALL_NETWORK_ERROR", url=url, errorMessage=message)
            raise ShortenerAPIError(message) from e

        if not response.is_success:
            message = self._error_message(response)
            self.logger.error(f"API Error for {url}: {response.status_code} {response.reason_phrase}")
            log_event(
                self.logger,
                "API_CALL_ERROR",
                url=url,
                status=response.status_code,
                statusText=response.reason_phrase,
                errorMessage=message,
            )
            raise ShortenerAPIError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            self.logger.error(f"API call to {url} returned a non-JSON body")
            raise ShortenerAPIError(
                f"Invalid response from API (status {response.status_code})",
                status_code=response.status_code,
            ) from e

        self.logger.info(f"API call successful for {url}")
        log_event(self.logger, "API_CALL_SUCCESS", url=url, status=response.status_code)
        return data

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """User-facing message for a failed response."""
        try:
            body = response.json()
        except ValueError:
            return f"HTTP error! status: {response.status_code}"

        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"API call failed with status {response.status_code}"

    async def shorten(
        self,
        long_url: str,
        validity_minutes: Optional[Union[int, float]] = None,
        custom_shortcode: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Shorten one URL.

        Args:
            long_url: The URL to shorten
            validity_minutes: Optional validity window in minutes
            custom_shortcode: Optional custom shortcode

        Returns:
            Dictionary with shortcode and expiryTime

        Raises:
            ShortenerAPIError: If the call fails or no shortcode is returned
        """
        body: Dict[str, Any] = {"longUrl": long_url}
        if validity_minutes is not None:
            body["validityInMinutes"] = validity_minutes
        if custom_shortcode:
            body["customShortcode"] = custom_shortcode

        data = await self._call("POST", "/shorten", json_body=body)

        if not isinstance(data, dict) or not data.get("shortcode"):
            raise ShortenerAPIError("Shortening API response did not include a shortcode")

        expiry_time = data.get("expiryTime")
        return {
            "shortcode": str(data["shortcode"]),
            "expiryTime": str(expiry_time) if expiry_time is not None else None,
        }

    async def get_clicks(self, shortcode: str) -> List[ClickDetail]:
        """Fetch the click details recorded for a shortcode.

        The shortcode is sent as a single escaped path segment. A response
        that is not a JSON array is treated as no clicks.

        Raises:
            ShortenerAPIError: If the call fails
        """
        segment = quote(shortcode, safe="")
        if segment in (".", ".."):
            segment = segment.replace(".", "%2E")

        data = await self._call("GET", f"/shorten/{segment}/clicks")

        if not isinstance(data, list):
            self.logger.warning(f"Click data for {shortcode} is not a list; treating as empty")
            return []

        return [ClickDetail.from_dict(item) for item in data if isinstance(item, dict)]
