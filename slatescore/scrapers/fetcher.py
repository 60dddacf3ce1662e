from typing import Any, Dict, Optional, Union

import httpx
from loguru import logger
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from slatescore.config.settings import settings

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

Payload = Union[str, Dict[str, Any], list]


class ScraperError(Exception):
    """Custom exception for fetch-related errors."""

    pass


class AuthenticationError(ScraperError):
    """Exception raised for authentication failures (401, 403)."""

    pass


class RateLimitError(ScraperError):
    """Exception raised for rate limit errors (429)."""

    pass


class Fetcher:
    """Fetches raw provider payloads over HTTP.

    Non-2xx responses surface as ScraperError subclasses, never as empty
    payloads. Network errors and retryable statuses are retried with
    exponential backoff before giving up.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
        )

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def fetch(self, url: str, as_json: bool = True) -> Payload:
        """Returns the decoded JSON document, or the body text when `as_json` is False."""
        try:
            response = await self._make_request("GET", url)
        except httpx.HTTPStatusError as e:
            logger.error(f"Max retries exceeded for {url} (status {e.response.status_code})")
            raise ScraperError(
                f"HTTP error {e.response.status_code} for {url} after retries"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Max retries exceeded for {url}: {e}")
            raise ScraperError(f"Network error for {url} after retries") from e
        if not as_json:
            return response.text
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Response from {url} is not valid JSON: {e}")
            logger.debug(f"Raw response content: {response.text[:500]}")
            raise ScraperError(f"Invalid JSON payload from {url}") from e

    @retry(
        stop=stop_after_attempt(settings.http_max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(
            (httpx.RequestError, httpx.HTTPStatusError, RateLimitError)
        ),
        reraise=True,  # Reraise the exception after max attempts
    )
    async def _make_request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Makes an asynchronous HTTP request with retry logic."""
        logger.debug(f"Making request {method} {url} params={params}")
        try:
            response = await self.client.request(method, url, params=params, **kwargs)

            if response.status_code in {401, 403}:
                logger.warning(
                    f"Authentication error ({response.status_code}) at {url}."
                )
                # Don't retry auth errors
                raise AuthenticationError(
                    f"Authentication failed ({response.status_code}) for {url}"
                )

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After")
                logger.warning(f"Rate limit hit (429) at {url}. Retry-After: {retry_after}")
                raise RateLimitError(f"Rate limited by {url}")

            response.raise_for_status()  # Raises HTTPStatusError for 4xx/5xx
            logger.debug(f"Request successful: {response.status_code} for {url}")
            return response

        except httpx.HTTPStatusError as e:
            if e.response.status_code in RETRYABLE_STATUS_CODES:
                logger.warning(
                    f"Retrying request to {url} due to status {e.response.status_code}"
                )
                raise  # Re-raise to trigger tenacity retry
            logger.error(f"HTTP error during request to {url}: {e.response.status_code}")
            raise ScraperError(f"HTTP error {e.response.status_code} for {url}") from e
        except httpx.RequestError as e:
            # Network errors, timeouts etc. - these are retryable
            logger.warning(f"Request error for {url}, retrying: {e}")
            raise
        except ScraperError:
            raise

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.debug("Closed HTTP client")
