"""Bitbucket Cloud API client using requests."""

import logging
import os
import time
from typing import Any

import requests

BITBUCKET_API_BASE = "https://api.bitbucket.org/2.0"
REQUEST_TIMEOUT = 30

logger = logging.getLogger("bb_utils.client")


class BitbucketAPIError(Exception):
    """Base class for errors raised by bb_utils."""


class InvalidArgumentError(BitbucketAPIError, ValueError):
    """Exception raised when a required argument is None."""


class TransportError(BitbucketAPIError):
    """Exception raised when the request never got an HTTP response."""


class RemoteError(BitbucketAPIError):
    """Exception raised when Bitbucket answers with a non-success status."""

    def __init__(self, message: str, status_code: int, response_body: str):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(RemoteError):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, message: str, retry_after: int):
        super().__init__(message, 429, "Rate limit exceeded")
        self.retry_after = retry_after


def get_api_base() -> str:
    """Get the API root, honouring BITBUCKET_API_BASE."""
    return os.environ.get("BITBUCKET_API_BASE", BITBUCKET_API_BASE).rstrip("/")


def get_token() -> str | None:
    """Get Bitbucket access token from environment."""
    return os.environ.get("BITBUCKET_TOKEN")


def get_auth() -> tuple[str, str] | None:
    """Get basic auth credentials (username, app password) from environment."""
    username = os.environ.get("BITBUCKET_USERNAME")
    password = os.environ.get("BITBUCKET_APP_PASSWORD")
    if username and password:
        return username, password
    return None


def get_headers() -> dict[str, str]:
    """Get headers for Bitbucket API requests."""
    headers = {"Accept": "application/json"}
    token = get_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def resolve_url(endpoint: str) -> str:
    """Turn an API path into an absolute URL; absolute URLs pass through."""
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    return f"{get_api_base()}/{endpoint.lstrip('/')}"


def error_message(response: requests.Response) -> str:
    """Extract the server's error message, falling back to the HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        return response.reason or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return response.reason or f"HTTP {response.status_code}"


def parse_body(response: requests.Response) -> Any:
    """Decode a success response: JSON when advertised, text otherwise."""
    if response.status_code == 204 or not response.content:
        return None
    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type:
        return response.json()
    return response.text


def api_request(
    method: str,
    endpoint: str,
    params: dict[str, Any] | None = None,
    json: Any = None,
    max_retries: int = 3,
) -> Any:
    """Make a request to the Bitbucket API.

    Args:
        method: HTTP method (GET, POST, PUT, DELETE).
        endpoint: API path (e.g., '/repositories/team/repo/pullrequests')
            or an absolute URL such as a pagination 'next' link.
        params: Optional query parameters.
        json: Optional JSON request body.
        max_retries: Maximum attempts on rate limit (with exponential backoff).

    Returns:
        Parsed JSON response, response text for non-JSON bodies, or None
        for empty responses.

    Raises:
        RemoteError: If Bitbucket answers with a non-success status.
        RateLimitError: If rate limit exceeded after retries.
        TransportError: If the connection fails or times out.
    """
    url = resolve_url(endpoint)
    headers = get_headers()
    auth = None if "Authorization" in headers else get_auth()

    for attempt in range(max_retries):
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = requests.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                auth=auth,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if 200 <= response.status_code < 300:
            return parse_body(response)

        if response.status_code == 429:
            try:
                retry_after = int(response.headers.get("Retry-After", 60))
            except ValueError:
                retry_after = 60

            if attempt < max_retries - 1 and retry_after < 60:
                # Only wait if it's less than a minute
                wait_time = min(retry_after, 2 ** (attempt + 1))
                logger.warning(
                    "Rate limited on %s, retrying in %ss", url, wait_time
                )
                time.sleep(wait_time)
                continue

            raise RateLimitError(
                f"Rate limit exceeded. Retry after {retry_after}s. "
                f"Set BITBUCKET_TOKEN env var for higher limits.",
                retry_after,
            )

        raise RemoteError(
            error_message(response),
            response.status_code,
            response.text,
        )

    raise RemoteError("Max retries exceeded", 0, "")


def api_get(endpoint: str, params: dict[str, Any] | None = None) -> Any:
    """Make a GET request to the Bitbucket API."""
    return api_request("GET", endpoint, params=params)
