"""URL building utilities for the URL shortener client."""


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build the user-facing short URL for a shortcode.

    Args:
        short_code: The shortcode returned by the shortening API
        base_url: Base URL links are served from (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"


def build_api_url(api_base_url: str, endpoint: str) -> str:
    """Join the API base URL and an endpoint path with exactly one slash."""
    return f"{api_base_url.rstrip('/')}/{endpoint.lstrip('/')}"
